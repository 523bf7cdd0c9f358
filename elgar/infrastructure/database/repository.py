# elgar/infrastructure/database/repository.py

import functools
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from elgar.application.exceptions import StoreFailureError

T = TypeVar("T")


def store_operation(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Roll back and surface driver errors as StoreFailureError. No retry."""

    @functools.wraps(func)
    async def wrapper(self: "SqlRepository", *args: Any, **kwargs: Any) -> T:
        try:
            return await func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StoreFailureError(
                f"{func.__name__} failed: {e.__class__.__name__}"
            ) from e

    return wrapper


class SqlRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

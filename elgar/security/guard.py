"""Route and action guards. Evaluate fully, then allow or deny; never run a denied operation."""

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar

from elgar.domain.models.user import User
from elgar.observability.metrics import MetricsCollector
from elgar.security.evaluator import PermissionEvaluator, Required, normalize_required
from elgar.security.exceptions import AuthorizationError, UnauthenticatedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GuardState(str, Enum):
    CHECKING = "checking"
    ALLOWED = "allowed"
    DENIED = "denied"


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of a route check. redirect_to is set only for DENIED."""

    state: GuardState
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.state is GuardState.ALLOWED


class RouteGuard:
    """
    UI instantiation: decides whether protected content may render.
    Unauthenticated -> login, before anything else. While permissions load -> CHECKING (render nothing).
    """

    def __init__(
        self,
        evaluator: PermissionEvaluator,
        login_path: str = "/login",
        default_redirect: str = "/dashboard",
    ) -> None:
        self._evaluator = evaluator
        self._login_path = login_path
        self._default_redirect = default_redirect

    def decide(
        self,
        user: Optional[User],
        required: Required = None,
        redirect_to: Optional[str] = None,
        loading: bool = False,
    ) -> GuardDecision:
        if user is None or not user.is_active:
            return GuardDecision(GuardState.DENIED, self._login_path)
        if loading:
            return GuardDecision(GuardState.CHECKING)
        if required is None:
            return GuardDecision(GuardState.ALLOWED)
        if not self._evaluator.has_any_permission(user, required):
            return GuardDecision(GuardState.DENIED, redirect_to or self._default_redirect)
        return GuardDecision(GuardState.ALLOWED)


class ActionGuard:
    """
    Server instantiation: same decision, but denial raises.
    Callers must run check() before any mutation.
    """

    def __init__(
        self,
        evaluator: PermissionEvaluator,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._evaluator = evaluator
        self._metrics = metrics

    @property
    def evaluator(self) -> PermissionEvaluator:
        return self._evaluator

    def check(self, user: Optional[User], required: Required = None) -> User:
        """Return the user if allowed. Raises UnauthenticatedError or AuthorizationError."""
        if user is None or not user.is_active:
            self._count("guard_denied", "unauthenticated")
            raise UnauthenticatedError("Authentication required")
        if required is None:
            self._count("guard_allowed", "authenticated")
            return user
        tokens = normalize_required(required)
        # An explicit requirement that names no token is never satisfied.
        if not self._evaluator.has_any_permission(user, tokens):
            self._count("guard_denied", "|".join(tokens) or "none")
            logger.warning(
                "guard_denied",
                extra={"user_id": user.id, "role": user.role, "required": tokens},
            )
            raise AuthorizationError(
                f"Role {user.role} lacks required permission: {', '.join(tokens) or '(none)'}"
            )
        self._count("guard_allowed", "|".join(tokens))
        return user

    def protect(
        self, required: Required = None
    ) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
        """
        Decorate an async operation taking an `actor` keyword; the body runs only when allowed.
        For callers outside the workflow services, which run check() inline.
        """

        def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
            @functools.wraps(func)
            async def wrapper(*args: Any, **kwargs: Any) -> T:
                self.check(kwargs.get("actor"), required)
                return await func(*args, **kwargs)

            return wrapper

        return decorator

    def _count(self, name: str, label: str) -> None:
        if self._metrics is not None:
            self._metrics.increment(name, category=label)

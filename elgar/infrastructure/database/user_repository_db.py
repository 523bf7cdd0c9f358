"""DB-backed users and permission grants (users, user_permissions tables)."""

from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from elgar.domain.models.user import PermissionGrant, User
from elgar.infrastructure.database.models import UserPermissionRow, UserRow
from elgar.infrastructure.database.repository import SqlRepository, store_operation

_UPDATABLE_USER_FIELDS = frozenset({"role", "is_active", "full_name"})


def _to_user(orm: UserRow) -> User:
    return User(
        id=orm.id,
        role=orm.role,
        is_active=bool(orm.is_active),
        full_name=orm.full_name,
    )


def _to_grant(orm: UserPermissionRow) -> PermissionGrant:
    return PermissionGrant(
        user_id=orm.user_id,
        permission=orm.permission,
        is_active=bool(orm.is_active),
        granted_by=orm.granted_by_id,
        granted_at=orm.granted_at,
    )


class DbUserRepository(SqlRepository):
    """Implements UserRepository protocol."""

    @store_operation
    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        orm = await self._session.get(UserRow, user_id)
        return _to_user(orm) if orm is not None else None

    @store_operation
    async def list_active_permissions(self, user_id: str) -> List[PermissionGrant]:
        stmt = (
            select(UserPermissionRow)
            .where(
                UserPermissionRow.user_id == user_id,
                UserPermissionRow.is_active == True,  # noqa: E712
            )
            .order_by(UserPermissionRow.permission)
        )
        result = await self._session.execute(stmt)
        return [_to_grant(row) for row in result.scalars().all()]

    @store_operation
    async def save_grant(self, grant: PermissionGrant) -> PermissionGrant:
        orm = UserPermissionRow(
            user_id=grant.user_id,
            permission=grant.permission,
            is_active=True,
            granted_by_id=grant.granted_by,
            granted_at=grant.granted_at,
        )
        self._session.add(orm)
        try:
            await self._session.commit()
        except IntegrityError:
            # Someone granted the same token first; the active row is the grant.
            await self._session.rollback()
            for existing in await self.list_active_permissions(grant.user_id):
                if existing.permission == grant.permission:
                    return existing
            raise
        await self._session.refresh(orm)
        return _to_grant(orm)

    @store_operation
    async def deactivate_grant(self, user_id: str, permission: str) -> bool:
        stmt = (
            update(UserPermissionRow)
            .where(
                UserPermissionRow.user_id == user_id,
                UserPermissionRow.permission == permission,
                UserPermissionRow.is_active == True,  # noqa: E712
            )
            .values(is_active=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return result.rowcount > 0

    @store_operation
    async def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        values = {k: v for k, v in fields.items() if k in _UPDATABLE_USER_FIELDS}
        stmt = (
            update(UserRow)
            .where(UserRow.id == user_id)
            .values(**values)
            .returning(UserRow)
        )
        result = await self._session.execute(stmt)
        orm = result.scalar_one_or_none()
        await self._session.commit()
        return _to_user(orm) if orm is not None else None

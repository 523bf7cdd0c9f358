"""Privilege management: explicit grants, roles and activation, under the role hierarchy."""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from elgar.application.exceptions import NotFoundError
from elgar.application.repositories import UserRepository
from elgar.core.context import correlation_id_ctx
from elgar.domain.exceptions import DomainValidationError
from elgar.domain.models.user import PermissionGrant, User
from elgar.governance.audit_logger import AuditLogger
from elgar.security.exceptions import AuthorizationError
from elgar.security.guard import ActionGuard
from elgar.security.permissions import CAN_MODIFY_PRIVILEGES, WILDCARD

RESOURCE_TYPE = "user"


class PrivilegeService:
    """
    Reads and mutates user privileges. Mutations require can_modify_privileges and a target
    role the actor may manage. Revocation is soft; at most one active grant per (user, token).
    """

    def __init__(
        self,
        users: UserRepository,
        guard: ActionGuard,
        audit_logger: AuditLogger,
        logger: logging.Logger,
    ) -> None:
        self._users = users
        self._guard = guard
        self._audit = audit_logger
        self._logger = logger

    async def load_user(self, user_id: str) -> Optional[User]:
        """User with active grants attached, or None."""
        user = await self._users.get_user_by_id(user_id)
        if user is None:
            return None
        grants = await self._users.list_active_permissions(user_id)
        return replace(user, grants=tuple(grants))

    def manageable_roles(self, actor: Optional[User]) -> tuple[str, ...]:
        self._guard.check(actor)
        return self._guard.evaluator.manageable_roles(actor)

    async def active_permissions(self, *, actor: Optional[User], user_id: str) -> List[PermissionGrant]:
        """Own grants, or anyone's for privilege managers."""
        self._guard.check(actor)
        if actor.id != user_id:
            self._guard.check(actor, CAN_MODIFY_PRIVILEGES)
        if await self._users.get_user_by_id(user_id) is None:
            raise NotFoundError(f"User not found: {user_id}")
        return await self._users.list_active_permissions(user_id)

    async def grant(self, *, actor: Optional[User], user_id: str, permission: str) -> PermissionGrant:
        await self._manageable_target(actor, user_id)
        permission = _grantable_token(permission)
        for existing in await self._users.list_active_permissions(user_id):
            if existing.permission == permission:
                return existing
        grant = await self._users.save_grant(
            PermissionGrant(
                user_id=user_id,
                permission=permission,
                is_active=True,
                granted_by=actor.id,
                granted_at=datetime.now(timezone.utc),
            )
        )
        self._logger.info(
            "permission_granted",
            extra={"user_id": user_id, "permission": permission, "granted_by": actor.id},
        )
        await self._record(actor, "permission_granted", user_id, {"permission": permission})
        return grant

    async def revoke(self, *, actor: Optional[User], user_id: str, permission: str) -> bool:
        await self._manageable_target(actor, user_id)
        permission = _clean_token(permission)
        revoked = await self._users.deactivate_grant(user_id, permission)
        if revoked:
            self._logger.info(
                "permission_revoked",
                extra={"user_id": user_id, "permission": permission, "revoked_by": actor.id},
            )
            await self._record(actor, "permission_revoked", user_id, {"permission": permission})
        return revoked

    async def replace_permissions(
        self, *, actor: Optional[User], user_id: str, permissions: Iterable[str]
    ) -> List[PermissionGrant]:
        """Make the active grant set equal to permissions; revoked grants stay as history."""
        await self._manageable_target(actor, user_id)
        wanted = {_grantable_token(p) for p in permissions}
        current = {g.permission for g in await self._users.list_active_permissions(user_id)}
        for token in sorted(current - wanted):
            await self.revoke(actor=actor, user_id=user_id, permission=token)
        for token in sorted(wanted - current):
            await self.grant(actor=actor, user_id=user_id, permission=token)
        return await self._users.list_active_permissions(user_id)

    async def change_role(self, *, actor: Optional[User], user_id: str, role: str) -> User:
        target = await self._manageable_target(actor, user_id)
        role = role.strip() if role else ""
        if not role:
            raise DomainValidationError("role must not be empty", field="role")
        if not self._guard.evaluator.can_manage_role(actor, role):
            raise AuthorizationError(f"Cannot assign role {role}")
        updated = await self._update(user_id, {"role": role})
        await self._record(
            actor, "role_changed", user_id, {"from": target.role, "to": role}
        )
        return updated

    async def set_active(self, *, actor: Optional[User], user_id: str, is_active: bool) -> User:
        """Users are never deleted, only deactivated."""
        await self._manageable_target(actor, user_id)
        updated = await self._update(user_id, {"is_active": is_active})
        await self._record(
            actor, "user_activated" if is_active else "user_deactivated", user_id, None
        )
        return updated

    async def _manageable_target(self, actor: Optional[User], user_id: str) -> User:
        self._guard.check(actor, CAN_MODIFY_PRIVILEGES)
        target = await self._users.get_user_by_id(user_id)
        if target is None:
            raise NotFoundError(f"User not found: {user_id}")
        if not self._guard.evaluator.can_manage_role(actor, target.role):
            raise AuthorizationError(f"Cannot modify permissions for {target.role} role")
        return target

    async def _update(self, user_id: str, fields: dict) -> User:
        updated = await self._users.update_user(user_id, fields)
        if updated is None:
            raise NotFoundError(f"User not found: {user_id}")
        return updated

    async def _record(self, actor: User, action: str, user_id: str, metadata: Optional[dict]) -> None:
        try:
            await self._audit.log_action(
                actor=actor.id,
                action=action,
                resource_type=RESOURCE_TYPE,
                resource_id=user_id,
                reason=None,
                correlation_id=correlation_id_ctx.get() or "",
                metadata=metadata,
            )
        except Exception as e:
            self._logger.error(
                "audit_write_failed",
                extra={"user_id": user_id, "action": action, "error": str(e)},
            )


def _clean_token(permission: Optional[str]) -> str:
    token = permission.strip() if permission else ""
    if not token:
        raise DomainValidationError("permission must not be empty", field="permission")
    return token


def _grantable_token(permission: Optional[str]) -> str:
    """Explicit grants name concrete tokens; the wildcard belongs to super-roles only."""
    token = _clean_token(permission)
    if token == WILDCARD:
        raise DomainValidationError(
            "the wildcard permission cannot be granted explicitly", field="permission"
        )
    return token

"""Permission evaluator. Pure decisions over the role table and explicit grants. No FastAPI."""

from typing import Iterable, Optional, Union

from elgar.domain.models.user import User
from elgar.security.permissions import (
    NAVIGATION,
    PAGE_PERMISSIONS,
    PERMISSION_LEVELS,
    ROLE_ADMIN,
    ROLE_DEVELOPER,
    ROLE_HIERARCHY,
    ROLE_UNIT_COMMAND,
    SUPER_ROLES,
    WILDCARD,
    permissions_for,
)

Required = Union[str, Iterable[str], None]


def normalize_required(required: Required) -> list[str]:
    """A single token or any iterable of tokens -> list of tokens."""
    if required is None:
        return []
    if isinstance(required, str):
        return [required]
    return list(required)


class PermissionEvaluator:
    """
    Decide whether a user may perform an action guarded by tokens.
    Stateless; safe to share between requests.
    """

    def resolved_permissions(self, user: Optional[User]) -> frozenset[str]:
        """Role defaults united with active explicit grants. Empty for missing or inactive users."""
        if user is None or not user.is_active:
            return frozenset()
        return permissions_for(user.role) | user.explicit_permissions

    def is_super_role(self, user: Optional[User]) -> bool:
        if user is None or not user.is_active:
            return False
        return user.role in SUPER_ROLES

    def has_permission(self, user: Optional[User], token: str) -> bool:
        if user is None or not user.is_active:
            return False
        if user.role in SUPER_ROLES:
            return True
        resolved = self.resolved_permissions(user)
        if WILDCARD in resolved:
            return True
        return token in resolved

    def has_any_permission(self, user: Optional[User], tokens: Required) -> bool:
        """OR semantics. An empty token list grants nothing."""
        return any(self.has_permission(user, t) for t in normalize_required(tokens))

    def has_all_permissions(self, user: Optional[User], tokens: Required) -> bool:
        wanted = normalize_required(tokens)
        if not wanted:
            return False
        return all(self.has_permission(user, t) for t in wanted)

    def can_access_page(self, user: Optional[User], page: str) -> bool:
        return self.has_any_permission(user, PAGE_PERMISSIONS.get(page, ()))

    def navigation_for(self, user: Optional[User]) -> list[dict[str, str]]:
        return [
            {"text": text, "path": path, "permission": token}
            for text, path, token in NAVIGATION
            if self.has_permission(user, token)
        ]

    def permission_level(self, user: Optional[User]) -> str:
        if user is None:
            return "none"
        return PERMISSION_LEVELS.get(user.role, "volunteer")

    def manageable_roles(self, user: Optional[User]) -> tuple[str, ...]:
        if user is None or not user.is_active:
            return ()
        return ROLE_HIERARCHY.get(user.role, ())

    def can_manage_role(self, actor: Optional[User], target_role: Optional[str]) -> bool:
        """Role hierarchy: who may modify privileges of users in target_role."""
        if actor is None or not actor.is_active or not target_role:
            return False
        # Only developer and admin may touch the developer role; only developer may touch admin.
        if target_role == ROLE_DEVELOPER:
            return actor.role in (ROLE_DEVELOPER, ROLE_ADMIN)
        if target_role == ROLE_ADMIN:
            return actor.role == ROLE_DEVELOPER
        if actor.role == ROLE_DEVELOPER:
            return True
        return target_role in self.manageable_roles(actor) or actor.role == target_role

    def can_manage_user(self, actor: Optional[User], target: Optional[User]) -> bool:
        """Strict hierarchy for user administration; no other role manages users."""
        if actor is None or target is None or not actor.is_active:
            return False
        if actor.role == ROLE_DEVELOPER:
            return True
        if actor.role == ROLE_ADMIN:
            return target.role != ROLE_DEVELOPER
        if actor.role == ROLE_UNIT_COMMAND:
            return target.role not in (ROLE_DEVELOPER, ROLE_ADMIN)
        return False

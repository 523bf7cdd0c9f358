"""Domain model for users and their explicit permission grants. No ORM or infrastructure."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PermissionGrant:
    """One explicit token granted to one user. Revocation is soft: is_active=False keeps history."""

    user_id: str
    permission: str
    is_active: bool = True
    granted_by: Optional[str] = None
    granted_at: Optional[datetime] = None


@dataclass(frozen=True)
class User:
    """
    Authenticated principal. Role is an opaque string compared exactly.
    grants holds explicit grants as loaded from the store; only active ones count.
    """

    id: str
    role: str
    is_active: bool = True
    full_name: Optional[str] = None
    grants: tuple[PermissionGrant, ...] = field(default_factory=tuple)

    @property
    def explicit_permissions(self) -> frozenset[str]:
        return frozenset(g.permission for g in self.grants if g.is_active)

"""Domain models. Pure business entities."""

from elgar.domain.models.action_report import (
    ActionReport,
    ReportStatus,
    ReviewDecision,
)
from elgar.domain.models.user import PermissionGrant, User

__all__ = [
    "ActionReport",
    "PermissionGrant",
    "ReportStatus",
    "ReviewDecision",
    "User",
]

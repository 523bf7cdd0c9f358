"""Domain layer: models, schemas, validators, exceptions. Pure business logic only."""

from elgar.domain.exceptions import (
    DomainError,
    DomainValidationError,
    InvalidStatusTransitionError,
)
from elgar.domain.models import (
    ActionReport,
    PermissionGrant,
    ReportStatus,
    ReviewDecision,
    User,
)

__all__ = [
    "ActionReport",
    "DomainError",
    "DomainValidationError",
    "InvalidStatusTransitionError",
    "PermissionGrant",
    "ReportStatus",
    "ReviewDecision",
    "User",
]

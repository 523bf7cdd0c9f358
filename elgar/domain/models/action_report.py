"""Domain model for action reports. Pure business semantics; no ORM or infrastructure."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional

from elgar.domain.exceptions import InvalidStatusTransitionError


class ReportStatus(str, Enum):
    """Lifecycle status of an action report. Values are the strings stored in action_reports.status."""

    DRAFT = "טיוטה"  # Client-side only; never persisted
    SUBMITTED = "הוגש"
    UNDER_REVIEW = "נבדק"
    APPROVED = "אושר"
    REJECTED = "נדחה"


class ReviewDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> ReportStatus:
        return ReportStatus.APPROVED if self is ReviewDecision.APPROVE else ReportStatus.REJECTED


# Allowed status transitions: from_status -> set of valid next statuses
_STATUS_TRANSITIONS: Dict[ReportStatus, FrozenSet[ReportStatus]] = {
    ReportStatus.DRAFT: frozenset({ReportStatus.SUBMITTED}),
    ReportStatus.SUBMITTED: frozenset(
        {ReportStatus.UNDER_REVIEW, ReportStatus.APPROVED, ReportStatus.REJECTED}
    ),
    ReportStatus.UNDER_REVIEW: frozenset(
        {ReportStatus.UNDER_REVIEW, ReportStatus.APPROVED, ReportStatus.REJECTED}
    ),
    ReportStatus.REJECTED: frozenset({ReportStatus.SUBMITTED}),
    ReportStatus.APPROVED: frozenset(),
}

REVIEWABLE_STATUSES: FrozenSet[ReportStatus] = frozenset(
    {ReportStatus.SUBMITTED, ReportStatus.UNDER_REVIEW}
)
EDITABLE_STATUSES: FrozenSet[ReportStatus] = frozenset(
    {ReportStatus.DRAFT, ReportStatus.REJECTED}
)


def is_transition_allowed(current: ReportStatus, new: ReportStatus) -> bool:
    return new in _STATUS_TRANSITIONS.get(current, frozenset())


def validate_transition(current: ReportStatus, new: ReportStatus) -> None:
    """Validate that transition from current to new is allowed. Raises if invalid."""
    if not is_transition_allowed(current, new):
        raise InvalidStatusTransitionError(
            f"Invalid status transition from {current.value} to {new.value}"
        )


@dataclass(frozen=True)
class ActionReport:
    """
    Volunteer-authored write-up of one event. Owned by volunteer_id.
    The review slot (reviewed_by, reviewed_at, review_notes) holds only the latest decision.
    """

    id: Optional[str]
    event_id: str
    volunteer_id: str
    status: ReportStatus
    full_report: str = ""
    digital_signature: bool = False
    volunteer_role: Optional[str] = None
    has_partner: bool = False
    partner_name: Optional[str] = None
    partner_id_number: Optional[str] = None
    partner_phone: Optional[str] = None
    signature_timestamp: Optional[datetime] = None
    review_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def is_owned_by(self, user_id: str) -> bool:
        return self.volunteer_id == user_id

    def with_status(self, new_status: ReportStatus) -> "ActionReport":
        """Return a copy in new_status. Raises InvalidStatusTransitionError if not allowed."""
        validate_transition(self.status, new_status)
        return replace(self, status=new_status)

"""Review ledger: the latest review decision, stored on the report row in one update."""

from datetime import datetime, timezone
from typing import Callable, Optional

from elgar.application.repositories import ActionReportRepository
from elgar.domain.exceptions import InvalidStatusTransitionError
from elgar.domain.models.action_report import ActionReport, ReviewDecision, validate_transition
from elgar.domain.models.user import User
from elgar.domain.validators.action_report_validator import validate_review


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewLedger:
    """
    Single-slot record of who decided, when, what and why.
    status, reviewed_by, reviewed_at and review_notes are written together or not at all.
    The write is conditional on the status the decision was based on.
    """

    def __init__(
        self,
        reports: ActionReportRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._reports = reports
        self._clock = clock

    async def record_review(
        self,
        report: ActionReport,
        reviewer: User,
        decision: ReviewDecision,
        notes: Optional[str] = None,
    ) -> ActionReport:
        new_status = decision.target_status
        validate_transition(report.status, new_status)
        validate_review(decision, notes)
        fields = {
            "status": new_status,
            "reviewed_by": reviewer.id,
            "reviewed_at": self._clock(),
            "review_notes": notes.strip() if notes and notes.strip() else None,
        }
        updated = await self._reports.update_report(
            report.id, fields, expected_status=report.status
        )
        if updated is None:
            raise InvalidStatusTransitionError(
                f"Report {report.id} was changed by another reviewer; reload and retry"
            )
        return updated

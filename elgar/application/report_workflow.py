"""Action-report workflow: transaction boundary. Guard, validate, persist, then audit and notify."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from elgar.application.exceptions import DuplicateReportError, NotFoundError
from elgar.application.repositories import (
    ActionReportRepository,
    AssignmentRepository,
    ReportNotifier,
)
from elgar.application.review_ledger import ReviewLedger
from elgar.core.context import correlation_id_ctx
from elgar.domain.exceptions import InvalidStatusTransitionError
from elgar.domain.models.action_report import (
    ActionReport,
    ReportStatus,
    ReviewDecision,
    validate_transition,
)
from elgar.domain.models.user import User
from elgar.domain.schemas.action_report import ReportContent
from elgar.domain.validators.action_report_validator import (
    content_fields,
    validate_event_id,
    validate_report_content,
)
from elgar.governance.audit_logger import AuditLogger
from elgar.observability.metrics import MetricsCollector
from elgar.security.exceptions import AuthorizationError
from elgar.security.guard import ActionGuard
from elgar.security.permissions import ACCESS_ACTION_REPORTS

RESOURCE_TYPE = "action_report"
ROUTING_SUBMITTED = "report.submitted"
ROUTING_REVIEW_STARTED = "report.review_started"
ROUTING_REVIEWED = "report.reviewed"
ROUTING_RESUBMITTED = "report.resubmitted"


class ActionReportWorkflow:
    """
    Lifecycle: draft (client only) -> submitted -> under_review -> approved | rejected;
    rejected -> submitted by the owner. Approved is terminal.
    Every operation checks, in order: authentication, permission or ownership, existence,
    status transition, fields. Nothing is written unless all pass.
    Audit and notification run after a successful write; their failure is logged, never raised.
    """

    def __init__(
        self,
        reports: ActionReportRepository,
        assignments: AssignmentRepository,
        ledger: ReviewLedger,
        guard: ActionGuard,
        audit_logger: AuditLogger,
        logger: logging.Logger,
        notifier: Optional[ReportNotifier] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._reports = reports
        self._assignments = assignments
        self._ledger = ledger
        self._guard = guard
        self._audit = audit_logger
        self._logger = logger
        self._notifier = notifier
        self._metrics = metrics

    # ------------------------------------------------------------------
    # Volunteer side
    # ------------------------------------------------------------------

    async def open_draft(self, *, actor: Optional[User], event_id: str) -> ActionReport:
        """Blank report for an assigned event. Not persisted."""
        self._guard.check(actor)
        validate_event_id(event_id)
        await self._require_assignment(actor, event_id)
        return ActionReport(
            id=None,
            event_id=event_id,
            volunteer_id=actor.id,
            status=ReportStatus.DRAFT,
            volunteer_role=actor.role,
        )

    async def submit(
        self, *, actor: Optional[User], event_id: str, content: ReportContent
    ) -> ActionReport:
        """First save: draft -> submitted. One report per (event, volunteer)."""
        self._guard.check(actor)
        validate_event_id(event_id)
        await self._require_assignment(actor, event_id)
        validate_transition(ReportStatus.DRAFT, ReportStatus.SUBMITTED)
        validate_report_content(content.full_report, content.digital_signature)

        existing = await self._reports.find_report(event_id, actor.id)
        if existing is not None:
            raise DuplicateReportError(
                f"Report already exists for event {event_id} (report {existing.id})"
            )

        fields = content_fields(content)
        fields.update(
            event_id=event_id,
            volunteer_id=actor.id,
            volunteer_role=content.volunteer_role or actor.role,
            signature_timestamp=datetime.now(timezone.utc),
            status=ReportStatus.SUBMITTED,
        )
        report = await self._reports.insert_report(fields)
        self._logger.info(
            "report_submitted",
            extra={"report_id": report.id, "event_id": event_id, "volunteer_id": actor.id},
        )
        await self._after_transition(
            actor, report, action="report_submitted", routing_key=ROUTING_SUBMITTED
        )
        return report

    async def resubmit(
        self, *, actor: Optional[User], report_id: str, content: ReportContent
    ) -> ActionReport:
        """Owner edits a rejected report: rejected -> submitted. Prior review_notes stay readable."""
        self._guard.check(actor)
        report = await self._load(report_id)
        if not report.is_owned_by(actor.id):
            raise AuthorizationError("Only the report owner may resubmit it")
        validate_transition(report.status, ReportStatus.SUBMITTED)
        validate_report_content(content.full_report, content.digital_signature)

        fields = content_fields(content)
        fields.update(
            volunteer_role=content.volunteer_role or report.volunteer_role,
            signature_timestamp=datetime.now(timezone.utc),
            status=ReportStatus.SUBMITTED,
            reviewed_by=None,
            reviewed_at=None,
        )
        updated = await self._apply(report, fields)
        self._logger.info(
            "report_resubmitted",
            extra={"report_id": report_id, "volunteer_id": actor.id},
        )
        await self._after_transition(
            actor, updated, action="report_resubmitted", routing_key=ROUTING_RESUBMITTED
        )
        return updated

    # ------------------------------------------------------------------
    # Reviewer side
    # ------------------------------------------------------------------

    async def begin_review(self, *, actor: Optional[User], report_id: str) -> ActionReport:
        """Reviewer opens a submitted report for decision: submitted -> under_review."""
        self._guard.check(actor, ACCESS_ACTION_REPORTS)
        report = await self._load(report_id)
        if report.status is ReportStatus.UNDER_REVIEW:
            return report
        validate_transition(report.status, ReportStatus.UNDER_REVIEW)
        updated = await self._apply(report, {"status": ReportStatus.UNDER_REVIEW})
        await self._after_transition(
            actor, updated, action="report_review_started", routing_key=ROUTING_REVIEW_STARTED
        )
        return updated

    async def review(
        self,
        *,
        actor: Optional[User],
        report_id: str,
        decision: ReviewDecision,
        notes: Optional[str] = None,
    ) -> ActionReport:
        self._guard.check(actor, ACCESS_ACTION_REPORTS)
        report = await self._load(report_id)
        updated = await self._ledger.record_review(report, actor, decision, notes)
        self._logger.info(
            "report_reviewed",
            extra={
                "report_id": report_id,
                "reviewer_id": actor.id,
                "decision": decision.value,
            },
        )
        await self._after_transition(
            actor,
            updated,
            action="report_approved" if decision is ReviewDecision.APPROVE else "report_rejected",
            routing_key=ROUTING_REVIEWED,
            reason=updated.review_notes,
        )
        return updated

    async def approve(
        self, *, actor: Optional[User], report_id: str, notes: Optional[str] = None
    ) -> ActionReport:
        return await self.review(
            actor=actor, report_id=report_id, decision=ReviewDecision.APPROVE, notes=notes
        )

    async def reject(
        self, *, actor: Optional[User], report_id: str, notes: Optional[str]
    ) -> ActionReport:
        return await self.review(
            actor=actor, report_id=report_id, decision=ReviewDecision.REJECT, notes=notes
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    async def get_report(self, *, actor: Optional[User], report_id: str) -> ActionReport:
        """Owner or reviewer only."""
        self._guard.check(actor)
        report = await self._load(report_id)
        if not report.is_owned_by(actor.id) and not self._guard.evaluator.has_permission(
            actor, ACCESS_ACTION_REPORTS
        ):
            raise AuthorizationError("Insufficient permissions to view this report")
        return report

    async def list_reports(
        self, *, actor: Optional[User], status: Optional[ReportStatus] = None
    ) -> List[ActionReport]:
        self._guard.check(actor, ACCESS_ACTION_REPORTS)
        return await self._reports.list_reports(status=status)

    async def list_my_reports(self, *, actor: Optional[User]) -> List[ActionReport]:
        self._guard.check(actor)
        return await self._reports.list_reports(volunteer_id=actor.id)

    async def list_events_awaiting_report(self, *, actor: Optional[User]) -> List[str]:
        """Assigned events the actor has not reported on yet, in assignment order."""
        self._guard.check(actor)
        event_ids = await self._assignments.list_assigned_event_ids(actor.id)
        reported = {r.event_id for r in await self._reports.list_reports(volunteer_id=actor.id)}
        return [e for e in event_ids if e not in reported]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _require_assignment(self, actor: User, event_id: str) -> None:
        if not await self._assignments.is_assigned(event_id, actor.id):
            raise AuthorizationError(
                f"User {actor.id} is not assigned to event {event_id}"
            )

    async def _load(self, report_id: str) -> ActionReport:
        report = await self._reports.get_report_by_id(report_id)
        if report is None:
            raise NotFoundError(f"Action report not found: {report_id}")
        return report

    async def _apply(self, report: ActionReport, fields: dict) -> ActionReport:
        """Conditional single-row update based on the status that was validated."""
        updated = await self._reports.update_report(
            report.id, fields, expected_status=report.status
        )
        if updated is None:
            raise InvalidStatusTransitionError(
                f"Report {report.id} changed concurrently; reload and retry"
            )
        return updated

    async def _after_transition(
        self,
        actor: User,
        report: ActionReport,
        *,
        action: str,
        routing_key: str,
        reason: Optional[str] = None,
    ) -> None:
        correlation_id = correlation_id_ctx.get() or ""
        if self._metrics is not None:
            self._metrics.increment("report_transitions", category=report.status.name.lower())
        try:
            await self._audit.log_action(
                actor=actor.id,
                action=action,
                resource_type=RESOURCE_TYPE,
                resource_id=report.id,
                reason=reason,
                correlation_id=correlation_id,
                metadata={"status": report.status.value, "event_id": report.event_id},
            )
        except Exception as e:
            self._logger.error(
                "audit_write_failed",
                extra={"report_id": report.id, "action": action, "error": str(e)},
            )
        if self._notifier is None:
            return
        message = {
            "report_id": report.id,
            "event_id": report.event_id,
            "volunteer_id": report.volunteer_id,
            "status": report.status.value,
            "actor_id": actor.id,
            "correlation_id": correlation_id,
        }
        try:
            await self._notifier.publish(routing_key, message)
        except Exception as e:
            self._logger.error(
                "notification_failed",
                extra={"report_id": report.id, "routing_key": routing_key, "error": str(e)},
            )

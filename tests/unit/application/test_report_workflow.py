"""Action-report workflow: guards, validation order, transitions, side effects."""

import pytest

from elgar.application.exceptions import DuplicateReportError, NotFoundError
from elgar.domain.exceptions import DomainValidationError, InvalidStatusTransitionError
from elgar.domain.models.action_report import ReportStatus
from elgar.domain.schemas.action_report import ReportContent
from elgar.security.exceptions import AuthorizationError, UnauthenticatedError


# ---------------------------------------------------------------------------
# Draft and submit
# ---------------------------------------------------------------------------

async def test_open_draft_is_not_persisted(workflow, patrol, report_store):
    draft = await workflow.open_draft(actor=patrol, event_id="evt-1")
    assert draft.status is ReportStatus.DRAFT
    assert draft.id is None
    assert draft.volunteer_role == patrol.role
    assert report_store.rows == {}


async def test_open_draft_requires_assignment(workflow, patrol):
    with pytest.raises(AuthorizationError):
        await workflow.open_draft(actor=patrol, event_id="evt-9")


async def test_submit_creates_submitted_report(workflow, patrol, content, report_store):
    report = await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    assert report.status is ReportStatus.SUBMITTED
    assert report.volunteer_id == patrol.id
    assert report.volunteer_role == patrol.role
    assert report.signature_timestamp is not None
    assert report.reviewed_by is None
    assert list(report_store.rows) == [report.id]


async def test_submit_without_signature_persists_nothing(workflow, patrol, report_store):
    content = ReportContent(full_report="text", digital_signature=False)
    with pytest.raises(DomainValidationError) as exc:
        await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    assert exc.value.field == "digital_signature"
    assert report_store.rows == {}


async def test_submit_empty_report_persists_nothing(workflow, patrol, report_store):
    content = ReportContent(full_report="", digital_signature=True)
    with pytest.raises(DomainValidationError) as exc:
        await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    assert exc.value.field == "full_report"
    assert report_store.rows == {}


async def test_submit_unassigned_event_is_unauthorized(workflow, patrol, content, report_store):
    with pytest.raises(AuthorizationError):
        await workflow.submit(actor=patrol, event_id="evt-9", content=content)
    assert report_store.rows == {}


async def test_submit_unauthenticated(workflow, content):
    with pytest.raises(UnauthenticatedError):
        await workflow.submit(actor=None, event_id="evt-1", content=content)


async def test_authorization_checked_before_validation(workflow, patrol, report_store):
    content = ReportContent(full_report="", digital_signature=False)
    with pytest.raises(AuthorizationError):
        await workflow.submit(actor=patrol, event_id="evt-9", content=content)


async def test_second_submit_for_same_event_is_duplicate(workflow, patrol, content, report_store):
    await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    with pytest.raises(DuplicateReportError) as exc:
        await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    assert exc.value.kind == "duplicate"
    assert len(report_store.rows) == 1


async def test_submit_drops_partner_fields_without_partner(workflow, patrol):
    content = ReportContent(
        full_report="text",
        digital_signature=True,
        has_partner=False,
        partner_name="Dana",
    )
    report = await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    assert report.partner_name is None


async def test_submit_audits_notifies_and_counts(workflow, patrol, content, audit_logger, notifier, metrics):
    report = await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    kwargs = audit_logger.log_action.call_args.kwargs
    assert kwargs["action"] == "report_submitted"
    assert kwargs["resource_type"] == "action_report"
    assert kwargs["resource_id"] == report.id
    assert kwargs["actor"] == patrol.id
    routing_key, message = notifier.publish.call_args.args
    assert routing_key == "report.submitted"
    assert message["status"] == ReportStatus.SUBMITTED.value
    labels = metrics.export_metrics()["counters_by_labels"]["report_transitions"]
    assert labels["report_transitions:category=submitted"] == 1


async def test_side_effect_failures_do_not_fail_submit(workflow, patrol, content, audit_logger, notifier, report_store):
    audit_logger.log_action.side_effect = RuntimeError("audit store down")
    notifier.publish.side_effect = ConnectionError("broker down")
    report = await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    assert report_store.rows[report.id].status is ReportStatus.SUBMITTED


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------

async def test_begin_review(workflow, stored_report, reviewer, notifier):
    stored_report(ReportStatus.SUBMITTED)
    report = await workflow.begin_review(actor=reviewer, report_id="r-1")
    assert report.status is ReportStatus.UNDER_REVIEW
    assert notifier.publish.call_args.args[0] == "report.review_started"


async def test_begin_review_twice_is_noop(workflow, stored_report, reviewer, report_store):
    stored_report(ReportStatus.UNDER_REVIEW)
    report = await workflow.begin_review(actor=reviewer, report_id="r-1")
    assert report.status is ReportStatus.UNDER_REVIEW
    assert report_store.update_calls == 0


async def test_volunteer_cannot_review(workflow, stored_report, patrol, report_store):
    stored_report(ReportStatus.SUBMITTED)
    with pytest.raises(AuthorizationError):
        await workflow.approve(actor=patrol, report_id="r-1")
    with pytest.raises(AuthorizationError):
        await workflow.begin_review(actor=patrol, report_id="r-1")
    assert report_store.rows["r-1"].status is ReportStatus.SUBMITTED


async def test_permission_checked_before_existence(workflow, patrol):
    with pytest.raises(AuthorizationError):
        await workflow.approve(actor=patrol, report_id="missing")


async def test_review_missing_report(workflow, reviewer):
    with pytest.raises(NotFoundError):
        await workflow.approve(actor=reviewer, report_id="missing")


async def test_reject_without_notes_keeps_status(workflow, stored_report, reviewer, report_store):
    stored_report(ReportStatus.SUBMITTED)
    with pytest.raises(DomainValidationError) as exc:
        await workflow.reject(actor=reviewer, report_id="r-1", notes="")
    assert exc.value.field == "review_notes"
    assert report_store.rows["r-1"].status is ReportStatus.SUBMITTED


async def test_approve_without_notes(workflow, stored_report, reviewer, audit_logger):
    stored_report(ReportStatus.SUBMITTED)
    report = await workflow.approve(actor=reviewer, report_id="r-1")
    assert report.status is ReportStatus.APPROVED
    assert report.reviewed_by == reviewer.id
    assert report.reviewed_at is not None
    assert report.review_notes is None
    assert audit_logger.log_action.call_args.kwargs["action"] == "report_approved"


@pytest.mark.parametrize("attempt", ["approve", "reject", "resubmit", "begin_review"])
async def test_approved_is_terminal(workflow, stored_report, reviewer, patrol, content, attempt, report_store):
    stored_report(ReportStatus.APPROVED)
    with pytest.raises(InvalidStatusTransitionError):
        if attempt == "approve":
            await workflow.approve(actor=reviewer, report_id="r-1")
        elif attempt == "reject":
            await workflow.reject(actor=reviewer, report_id="r-1", notes="Changed my mind")
        elif attempt == "resubmit":
            await workflow.resubmit(actor=patrol, report_id="r-1", content=content)
        else:
            await workflow.begin_review(actor=reviewer, report_id="r-1")
    assert report_store.rows["r-1"].status is ReportStatus.APPROVED


async def test_reject_records_notes(workflow, stored_report, reviewer, audit_logger, notifier):
    stored_report(ReportStatus.UNDER_REVIEW)
    report = await workflow.reject(actor=reviewer, report_id="r-1", notes="Add arrival time")
    assert report.status is ReportStatus.REJECTED
    assert report.review_notes == "Add arrival time"
    kwargs = audit_logger.log_action.call_args.kwargs
    assert kwargs["action"] == "report_rejected"
    assert kwargs["reason"] == "Add arrival time"
    assert notifier.publish.call_args.args[0] == "report.reviewed"


async def test_concurrent_reviews_second_loses(workflow, stored_report, reviewer, unit_commander, report_store):
    stored_report(ReportStatus.SUBMITTED)
    original_get = report_store.get_report_by_id
    snapshot = await original_get("r-1")

    async def stale_get(report_id):
        return snapshot

    await workflow.approve(actor=reviewer, report_id="r-1")
    report_store.get_report_by_id = stale_get
    with pytest.raises(InvalidStatusTransitionError):
        await workflow.reject(actor=unit_commander, report_id="r-1", notes="Wrong unit")
    assert report_store.rows["r-1"].status is ReportStatus.APPROVED
    assert report_store.rows["r-1"].reviewed_by == reviewer.id


# ---------------------------------------------------------------------------
# Resubmit
# ---------------------------------------------------------------------------

async def test_owner_resubmits_rejected_report(workflow, stored_report, patrol, reviewer, notifier):
    stored_report(
        ReportStatus.REJECTED,
        review_notes="Add arrival time",
        reviewed_by=reviewer.id,
    )
    content = ReportContent(full_report="Arrived 21:05, no incidents.", digital_signature=True)
    report = await workflow.resubmit(actor=patrol, report_id="r-1", content=content)
    assert report.status is ReportStatus.SUBMITTED
    assert report.full_report == "Arrived 21:05, no incidents."
    assert report.review_notes == "Add arrival time"
    assert report.reviewed_by is None
    assert report.reviewed_at is None
    assert notifier.publish.call_args.args[0] == "report.resubmitted"


async def test_resubmit_then_review_overwrites_notes(workflow, stored_report, patrol, reviewer, content):
    stored_report(ReportStatus.REJECTED, review_notes="Add arrival time")
    await workflow.resubmit(actor=patrol, report_id="r-1", content=content)
    report = await workflow.approve(actor=reviewer, report_id="r-1", notes="Thanks")
    assert report.review_notes == "Thanks"


async def test_non_owner_cannot_resubmit(workflow, stored_report, other_patrol, reviewer, content, report_store):
    stored_report(ReportStatus.REJECTED, review_notes="notes")
    for actor in (other_patrol, reviewer):
        with pytest.raises(AuthorizationError) as exc:
            await workflow.resubmit(actor=actor, report_id="r-1", content=content)
        assert exc.value.kind == "unauthorized"
    assert report_store.rows["r-1"].status is ReportStatus.REJECTED


async def test_resubmit_only_from_rejected(workflow, stored_report, patrol, content):
    stored_report(ReportStatus.SUBMITTED)
    with pytest.raises(InvalidStatusTransitionError):
        await workflow.resubmit(actor=patrol, report_id="r-1", content=content)


async def test_resubmit_validates_content(workflow, stored_report, patrol, report_store):
    stored_report(ReportStatus.REJECTED, review_notes="notes")
    with pytest.raises(DomainValidationError):
        await workflow.resubmit(
            actor=patrol,
            report_id="r-1",
            content=ReportContent(full_report="fixed", digital_signature=False),
        )
    assert report_store.rows["r-1"].status is ReportStatus.REJECTED


# ---------------------------------------------------------------------------
# Read side
# ---------------------------------------------------------------------------

async def test_get_report_owner_or_reviewer(workflow, stored_report, patrol, other_patrol, reviewer):
    stored_report(ReportStatus.SUBMITTED)
    assert (await workflow.get_report(actor=patrol, report_id="r-1")).id == "r-1"
    assert (await workflow.get_report(actor=reviewer, report_id="r-1")).id == "r-1"
    with pytest.raises(AuthorizationError):
        await workflow.get_report(actor=other_patrol, report_id="r-1")


async def test_list_reports_requires_reviewer(workflow, patrol):
    with pytest.raises(AuthorizationError):
        await workflow.list_reports(actor=patrol)


async def test_list_reports_filters_by_status(workflow, patrol, other_patrol, reviewer, content):
    await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    second = await workflow.submit(actor=other_patrol, event_id="evt-1", content=content)
    await workflow.approve(actor=reviewer, report_id=second.id)

    everything = await workflow.list_reports(actor=reviewer)
    assert [r.id for r in everything] == [second.id, "1"]
    approved = await workflow.list_reports(actor=reviewer, status=ReportStatus.APPROVED)
    assert [r.id for r in approved] == [second.id]


async def test_list_my_reports_and_awaiting_events(workflow, patrol, other_patrol, content):
    assert await workflow.list_events_awaiting_report(actor=patrol) == ["evt-1", "evt-2"]
    await workflow.submit(actor=patrol, event_id="evt-1", content=content)
    await workflow.submit(actor=other_patrol, event_id="evt-1", content=content)

    mine = await workflow.list_my_reports(actor=patrol)
    assert [r.volunteer_id for r in mine] == [patrol.id]
    assert await workflow.list_events_awaiting_report(actor=patrol) == ["evt-2"]

"""Action-reports API router: submit, resubmit, review, read."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status

from elgar.api.dependencies import get_current_user, get_report_workflow, require_permissions
from elgar.application.report_workflow import ActionReportWorkflow
from elgar.domain.models.action_report import ActionReport, ReportStatus
from elgar.domain.models.user import User
from elgar.domain.schemas.action_report import (
    ActionReportResponse,
    ActionReportResubmitRequest,
    ActionReportSubmitRequest,
    ReviewRequest,
)
from elgar.security.permissions import ACCESS_ACTION_REPORTS

router = APIRouter()


def _to_response(report: ActionReport) -> ActionReportResponse:
    return ActionReportResponse.model_validate(report)


@router.get("/", response_model=List[ActionReportResponse])
async def list_reports(
    user: Annotated[User, Depends(require_permissions(ACCESS_ACTION_REPORTS))],
    workflow: Annotated[ActionReportWorkflow, Depends(get_report_workflow)],
    status_filter: Annotated[Optional[ReportStatus], Query(alias="status")] = None,
):
    """All reports, newest first. Reviewers only."""
    reports = await workflow.list_reports(actor=user, status=status_filter)
    return [_to_response(r) for r in reports]


@router.get("/mine", response_model=List[ActionReportResponse])
async def list_my_reports(
    user: Annotated[User, Depends(get_current_user)],
    workflow: Annotated[ActionReportWorkflow, Depends(get_report_workflow)],
):
    return [_to_response(r) for r in await workflow.list_my_reports(actor=user)]


@router.get("/assigned-events", response_model=List[str])
async def assigned_events(
    user: Annotated[User, Depends(get_current_user)],
    workflow: Annotated[ActionReportWorkflow, Depends(get_report_workflow)],
):
    """Event ids assigned to the caller that still need a report."""
    return await workflow.list_events_awaiting_report(actor=user)


@router.post("/", response_model=ActionReportResponse, status_code=status.HTTP_201_CREATED)
async def submit_report(
    body: ActionReportSubmitRequest,
    user: Annotated[User, Depends(get_current_user)],
    workflow: Annotated[ActionReportWorkflow, Depends(get_report_workflow)],
):
    report = await workflow.submit(actor=user, event_id=body.event_id, content=body)
    return _to_response(report)


@router.get("/{report_id}", response_model=ActionReportResponse)
async def get_report(
    report_id: str,
    user: Annotated[User, Depends(get_current_user)],
    workflow: Annotated[ActionReportWorkflow, Depends(get_report_workflow)],
):
    return _to_response(await workflow.get_report(actor=user, report_id=report_id))


@router.put("/{report_id}", response_model=ActionReportResponse)
async def resubmit_report(
    report_id: str,
    body: ActionReportResubmitRequest,
    user: Annotated[User, Depends(get_current_user)],
    workflow: Annotated[ActionReportWorkflow, Depends(get_report_workflow)],
):
    """Owner edits and resubmits a rejected report."""
    report = await workflow.resubmit(actor=user, report_id=report_id, content=body)
    return _to_response(report)


@router.post("/{report_id}/review/start", response_model=ActionReportResponse)
async def start_review(
    report_id: str,
    user: Annotated[User, Depends(require_permissions(ACCESS_ACTION_REPORTS))],
    workflow: Annotated[ActionReportWorkflow, Depends(get_report_workflow)],
):
    return _to_response(await workflow.begin_review(actor=user, report_id=report_id))


@router.post("/{report_id}/review", response_model=ActionReportResponse)
async def review_report(
    report_id: str,
    body: ReviewRequest,
    user: Annotated[User, Depends(require_permissions(ACCESS_ACTION_REPORTS))],
    workflow: Annotated[ActionReportWorkflow, Depends(get_report_workflow)],
):
    report = await workflow.review(
        actor=user,
        report_id=report_id,
        decision=body.decision,
        notes=body.review_notes,
    )
    return _to_response(report)

"""Pydantic schemas for the action-report API. Field rules that drive transitions live in the validators."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from elgar.domain.models.action_report import ReportStatus, ReviewDecision


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class ReportContent(BaseModel):
    """Owner-editable content of a report."""

    has_partner: bool = False
    partner_name: Optional[str] = None
    partner_id_number: Optional[str] = None
    partner_phone: Optional[str] = None
    volunteer_role: Optional[str] = None
    full_report: str = ""
    digital_signature: bool = False


class ActionReportSubmitRequest(ReportContent):
    """First save of a report for an assigned event."""

    event_id: str = Field(..., description="Event the report is written for")


class ActionReportResubmitRequest(ReportContent):
    """Edited content of a rejected report."""


class ReviewRequest(BaseModel):
    decision: ReviewDecision
    review_notes: Optional[str] = Field(None, description="Required when rejecting")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ActionReportResponse(BaseModel):
    id: str
    event_id: str
    volunteer_id: str
    status: ReportStatus
    has_partner: bool
    partner_name: Optional[str] = None
    partner_id_number: Optional[str] = None
    partner_phone: Optional[str] = None
    volunteer_role: Optional[str] = None
    full_report: str
    digital_signature: bool
    signature_timestamp: Optional[datetime] = None
    review_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

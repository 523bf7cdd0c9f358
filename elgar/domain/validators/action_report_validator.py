"""Validators for action-report transitions. Pure functions, no infrastructure or DB access."""

from typing import Any, Dict, Optional

from elgar.domain.exceptions import DomainValidationError
from elgar.domain.models.action_report import ReviewDecision
from elgar.domain.schemas.action_report import ReportContent


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_event_id(event_id: Optional[str]) -> None:
    if _is_blank(event_id):
        raise DomainValidationError("event_id must not be empty", field="event_id")


def validate_report_content(full_report: Optional[str], digital_signature: bool) -> None:
    """Submission rules: non-empty report text, then a signature. Raises DomainValidationError."""
    if _is_blank(full_report):
        raise DomainValidationError("full_report must not be empty", field="full_report")
    if digital_signature is not True:
        raise DomainValidationError(
            "digital_signature is required before submission", field="digital_signature"
        )


def validate_review(decision: ReviewDecision, review_notes: Optional[str]) -> None:
    """Rejection requires notes; approval does not."""
    if decision is ReviewDecision.REJECT and _is_blank(review_notes):
        raise DomainValidationError(
            "review_notes are required when rejecting a report", field="review_notes"
        )


def content_fields(content: ReportContent) -> Dict[str, Any]:
    """Owner-editable fields as stored. Partner details are dropped when there is no partner."""
    return {
        "has_partner": content.has_partner,
        "partner_name": content.partner_name if content.has_partner else None,
        "partner_id_number": content.partner_id_number if content.has_partner else None,
        "partner_phone": content.partner_phone if content.has_partner else None,
        "volunteer_role": content.volunteer_role,
        "full_report": content.full_report,
        "digital_signature": content.digital_signature,
    }

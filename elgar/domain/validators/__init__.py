"""Domain validators. Pure validation functions."""

from elgar.domain.validators.action_report_validator import (
    content_fields,
    validate_event_id,
    validate_report_content,
    validate_review,
)

__all__ = [
    "content_fields",
    "validate_event_id",
    "validate_report_content",
    "validate_review",
]

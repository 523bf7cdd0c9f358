"""Domain-specific exceptions. Pure domain layer; no infrastructure."""

from typing import Optional


class DomainError(Exception):
    """Base for all domain-layer errors."""

    kind = "domain"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when a field required by the attempted transition is missing or invalid."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)

    @property
    def kind(self) -> str:  # type: ignore[override]
        return f"validation:{self.field}" if self.field else "validation"


class InvalidStatusTransitionError(DomainError):
    """Raised when an action-report status transition is not allowed."""

    kind = "invalid_transition"

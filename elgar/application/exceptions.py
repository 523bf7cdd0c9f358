"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    kind = "application"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ApplicationError):
    """Raised when a referenced report or user does not exist. Not retried."""

    kind = "not_found"


class DuplicateReportError(ApplicationError):
    """Raised when the volunteer already filed a report for the event."""

    kind = "duplicate"


class StoreFailureError(ApplicationError):
    """Raised when the persistent store itself fails. No partial update was applied; no retry here."""

    kind = "store_failure"

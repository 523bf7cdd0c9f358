"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    kind = "security"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthenticatedError(SecurityError):
    """Raised when there is no (active) user behind the request. Takes precedence over every other check."""

    kind = "unauthenticated"


class AuthorizationError(SecurityError):
    """Raised when the user holds none of the tokens the action requires, or is not the report owner."""

    kind = "unauthorized"

"""Service error taxonomy. Each error maps to one HTTP status and a client-safe message."""


class ServiceError(Exception):
    """Base class for errors raised by services and mapped to an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailedError(ServiceError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"


class UnauthenticatedError(ServiceError):
    """Missing, malformed, wrongly signed or expired credentials."""

    status_code = 401
    default_message = "Invalid or expired token"


class InvalidRefreshTokenError(UnauthenticatedError):
    """Refresh token was never issued, already consumed, revoked, or fails verification."""

    default_message = "Invalid refresh token"


class ForbiddenError(ServiceError):
    status_code = 403
    default_message = "Admin permission required"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ServiceError):
    """Duplicate email on registration. Reported as 400, the status existing clients expect."""

    status_code = 400
    default_message = "Email already used"


class InternalError(ServiceError):
    status_code = 500

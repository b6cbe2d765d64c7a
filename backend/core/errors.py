"""Failure taxonomy shared by the identity and posting endpoints.

Every error carries the HTTP status it maps to and a human-readable message;
``backend.main`` renders them as ``{"success": false, "message": ...}``.
"""

from http import HTTPStatus


class AppError(Exception):
    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    message: str = "Unexpected server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConflictError(AppError):
    status = HTTPStatus.BAD_REQUEST
    message = "Email already exists"


class UnauthenticatedError(AppError):
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid token"


class ForbiddenError(AppError):
    status = HTTPStatus.FORBIDDEN
    message = "Forbidden"


class NotFoundError(AppError):
    status = HTTPStatus.NOT_FOUND
    message = "Email not registered"


class InvalidCodeError(AppError):
    status = HTTPStatus.BAD_REQUEST
    message = "Invalid OTP"


class ExpiredCodeError(AppError):
    status = HTTPStatus.BAD_REQUEST
    message = "OTP expired"


class UnexpectedError(AppError):
    pass


class InvalidTokenError(Exception):
    """Raised by the session issuer; never rendered directly."""

"""
core/errors.py -- Error taxonomy shared by every layer.

Each class carries the HTTP status it maps to and a default message. Domain
components (auth/) RETURN instances of these as typed results; only the
HTTP layer (api/ routes and auth/dependencies.py) raises them, and only the
error responder in api/errors.py writes them to the wire.

Layer rule: core/ is the kernel. No imports from api/ or auth/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for every classified failure. Unclassified errors become 500."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None) -> None:
        self.message = message or self.default_message
        self.headers = headers or {}
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    default_message = "Validation failed"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class TooManyRequestsError(AppError):
    status_code = 429
    default_message = "Too many requests from this IP, please try again later"


class InternalError(AppError):
    status_code = 500


class MisconfiguredSigningError(InternalError):
    default_message = "JWT secret not configured"


# Token rejections. The auth gate collapses both into one 403 message so a
# client cannot tell a forged token from an old one.


class InvalidTokenError(ForbiddenError):
    default_message = "Invalid token"


class TokenExpiredError(ForbiddenError):
    default_message = "Token expired"

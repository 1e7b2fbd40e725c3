"""
API request and response models for the backend's REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Wire field names follow the JSON contract (userId), so a few fields carry a
serialization alias; FastAPI serializes response models by alias.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from auth.models import AuthSession
from auth.tokens import BCRYPT_MAX_BYTES

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
PASSWORD_MAX_BYTES = BCRYPT_MAX_BYTES

_HAS_LETTER = re.compile(r"[A-Za-z]")
_HAS_DIGIT = re.compile(r"\d")


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
    return value


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""

    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, value: str) -> str:
        """Require at least one letter and one digit."""
        if not _HAS_LETTER.search(value) or not _HAS_DIGIT.search(value):
            raise ValueError("must contain at least one letter and one digit")
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    """Request body for POST /auth/login.

    Only presence and size are checked on the password. Repeating the
    registration policy here would tell callers what valid passwords look like.
    """

    email: EmailStr
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserPublic(BaseModel):
    """Public identity of an account -- never includes the password hash."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str


class AuthResponse(BaseModel):
    """Response body for POST /auth/register (201) and POST /auth/login (200)."""

    model_config = ConfigDict(frozen=True)

    message: str
    token: str
    user: UserPublic

    @classmethod
    def from_session(cls, message: str, session: AuthSession) -> "AuthResponse":
        return cls(
            message=message,
            token=session.token,
            user=UserPublic(id=session.user_id, email=session.email),
        )


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    uptime: float


class ProtectedResponse(BaseModel):
    """Response for GET /health/protected."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    message: str = "You are authenticated!"
    user_id: int = Field(serialization_alias="userId")


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response.

    stack is only populated outside production.
    """

    model_config = ConfigDict(frozen=True)

    status: str = "error"
    message: str
    stack: Optional[str] = None

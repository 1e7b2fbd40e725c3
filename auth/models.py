"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Dataclasses own domain
shape; the store, the service and the routes do the work.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is unique and kept exactly as it arrived from the validator.
    hashed_password is a bcrypt string and never leaves the store/service layer.
    """

    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """Result of a successful register or login: a signed token plus public identity."""

    token: str
    user_id: int
    email: str


@dataclass(frozen=True)
class AuthContext:
    """Per-request identity produced by the auth gate and passed to handlers."""

    user_id: int

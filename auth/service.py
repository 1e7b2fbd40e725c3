"""
auth/service.py -- Registration and login flows.

AuthService orchestrates the store, the password hasher and the token
service. Every outcome is returned, never raised: callers receive either an
AuthSession or an AppError subclass and decide how to surface it.

Account enumeration:
  login() answers an unknown email and a wrong password with the same
  UnauthorizedError message, and runs bcrypt in both branches so timing
  matches as well.

Store failures:
  A duplicate-email IntegrityError (two concurrent registrations racing past
  the lookup) maps to ConflictError. Any other SQLAlchemyError is logged with
  its traceback and returned as a generic InternalError so nothing about the
  database reaches the client.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import AuthSession, User
from auth.store import UserStore
from auth.tokens import PasswordHasher, TokenService
from core.errors import AppError, ConflictError, InternalError, MisconfiguredSigningError, UnauthorizedError

logger = logging.getLogger("frenzy.auth")

_DUPLICATE_MESSAGE = "User already exists"
_BAD_CREDENTIALS_MESSAGE = "Invalid credentials"


class AuthService:
    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenService) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def register(self, email: str, password: str) -> AuthSession | AppError:
        """Create an account and return a session for it.

        Signing is checked before the store is touched so a misconfigured
        deployment never leaves behind accounts that could not be issued a token.
        """
        if not self.tokens.configured:
            return MisconfiguredSigningError()
        try:
            if self.store.get_by_email(email) is not None:
                return ConflictError(_DUPLICATE_MESSAGE)
            hashed = self.hasher.hash(password)
            user_id = self.store.create_user(User(email=email, hashed_password=hashed))
        except IntegrityError:
            return ConflictError(_DUPLICATE_MESSAGE)
        except SQLAlchemyError:
            logger.exception("Credential store failure during registration")
            return InternalError()

        logger.info("User registered (id=%s)", user_id)
        return self._session_for(user_id, email)

    def login(self, email: str, password: str) -> AuthSession | AppError:
        """Check credentials and return a fresh session."""
        if not self.tokens.configured:
            return MisconfiguredSigningError()
        try:
            user = self.store.get_by_email(email)
        except SQLAlchemyError:
            logger.exception("Credential store failure during login")
            return InternalError()

        if user is None:
            self.hasher.verify_dummy(password)
            return UnauthorizedError(_BAD_CREDENTIALS_MESSAGE)
        if not self.hasher.verify(password, user.hashed_password):
            return UnauthorizedError(_BAD_CREDENTIALS_MESSAGE)

        return self._session_for(user.id, user.email)

    def _session_for(self, user_id: int, email: str) -> AuthSession | AppError:
        token = self.tokens.issue(user_id)
        if isinstance(token, AppError):
            return token
        return AuthSession(token=token, user_id=user_id, email=email)

"""
auth/tokens.py -- Password hashing and JWT issue/verify.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with the configured
       JWT_SECRET and carry userId, iat and exp. verify() returns a typed
       error value on any failure -- the auth gate turns that into 403.
       An empty secret is reported as MisconfiguredSigningError (500) on
       every call; it is never treated as "skip verification".

  Passwords: bcrypt used directly (no passlib wrapper). The cost factor comes
       from Settings.bcrypt_rounds (10..16). verify_dummy() runs bcrypt against
       a fixed hash so a login for an unknown email costs the same as a wrong
       password and response time does not reveal which accounts exist.

Both classes are built once in the app lifespan from Settings and injected
into AuthService and the auth gate, so tests can swap secrets freely.

Layer rule: no imports from api/. Import from core/ is allowed -- core/ is
the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from core.errors import InvalidTokenError, MisconfiguredSigningError, TokenExpiredError

logger = logging.getLogger("frenzy.auth")

_ALGORITHM = "HS256"

# Longest secret bcrypt accepts. bcrypt 5 raises past this; 4.x silently truncated.
BCRYPT_MAX_BYTES = 72

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


class PasswordHasher:
    """bcrypt hash/verify with a configurable work factor."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        # Computed once so the first unknown-email login is not measurably
        # slower than later ones.
        self._dummy_hash = self.hash("frenzy_timing_dummy")

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of the plaintext; salt and cost are embedded.

        Raises ValueError for plaintexts over BCRYPT_MAX_BYTES. The request
        schemas reject those with a 400 before they get here.
        """
        secret = plain.encode("utf-8")
        if len(secret) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password is longer than {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if the plaintext matches the hash. Malformed hashes never match."""
        secret = plain.encode("utf-8")
        if len(secret) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(secret, hashed.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt string")
            return False

    def verify_dummy(self, plain: str) -> None:
        """Spend one bcrypt verification without a real account behind it."""
        self.verify(plain, self._dummy_hash)


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


class TokenService:
    """Issue and verify self-contained session tokens."""

    def __init__(self, secret: str, lifetime: timedelta = timedelta(days=7)) -> None:
        self._secret = secret
        self.lifetime = lifetime

    @property
    def configured(self) -> bool:
        return bool(self._secret)

    def issue(self, user_id: int) -> str | MisconfiguredSigningError:
        """Encode a signed token for user_id expiring `lifetime` from now."""
        if not self.configured:
            return MisconfiguredSigningError()
        now = datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> int | InvalidTokenError | TokenExpiredError | MisconfiguredSigningError:
        """Return the userId carried by a valid token, or the reason it was rejected."""
        if not self.configured:
            return MisconfiguredSigningError()
        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except ExpiredSignatureError:
            return TokenExpiredError()
        except JWTError:
            return InvalidTokenError()
        user_id = payload.get("userId")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return InvalidTokenError()
        return user_id

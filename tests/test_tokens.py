"""Unit tests for auth/tokens.py -- PasswordHasher and TokenService.

Covers:
- bcrypt hashes embed the configured cost and verify only the right password
- malformed stored hashes verify False instead of raising
- passwords over 72 bytes are refused by hash() and never verify
- tokens round-trip to the same userId
- secret rotation, tampering, expiry and malformed payloads are rejected
- an empty secret is reported as MisconfiguredSigningError on issue and verify
- Settings refuses a bcrypt cost below 10
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from pydantic import ValidationError

from auth.tokens import PasswordHasher, TokenService
from conftest import TEST_SECRET, make_settings
from core.errors import InvalidTokenError, MisconfiguredSigningError, TokenExpiredError

OTHER_SECRET = "another-secret-fedcba9876543210fedcba9876543210"


@pytest.fixture(scope="module")
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=10)


class TestPasswordHasher:
    def test_hash_embeds_cost_and_salt(self, hasher: PasswordHasher) -> None:
        first = hasher.hash("Secret123")
        second = hasher.hash("Secret123")
        assert first.startswith("$2b$10$")
        assert first != second  # per-record salt
        assert "Secret123" not in first

    def test_verify(self, hasher: PasswordHasher) -> None:
        hashed = hasher.hash("Secret123")
        assert hasher.verify("Secret123", hashed) is True
        assert hasher.verify("secret123", hashed) is False

    def test_malformed_hash_never_matches(self, hasher: PasswordHasher) -> None:
        assert hasher.verify("Secret123", "not-a-bcrypt-hash") is False

    def test_hash_refuses_more_than_72_bytes(self, hasher: PasswordHasher) -> None:
        with pytest.raises(ValueError, match="72 bytes"):
            hasher.hash("Ab1" + "x" * 97)

    def test_oversized_password_never_matches(self, hasher: PasswordHasher, caplog: pytest.LogCaptureFixture) -> None:
        hashed = hasher.hash("Ab1" + "x" * 69)
        assert hasher.verify("Ab1" + "x" * 97, hashed) is False
        assert "not a valid bcrypt string" not in caplog.text

    def test_cost_below_ten_rejected_by_settings(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(bcrypt_rounds=4)


class TestTokenService:
    def test_round_trip(self) -> None:
        tokens = TokenService(TEST_SECRET)
        token = tokens.issue(42)
        assert isinstance(token, str)
        assert tokens.verify(token) == 42

    def test_expiry_is_seven_days_by_default(self) -> None:
        token = TokenService(TEST_SECRET).issue(1)
        claims = jwt.get_unverified_claims(token)
        assert claims["exp"] - claims["iat"] == 7 * 24 * 3600

    def test_rotated_secret_rejects_old_tokens(self) -> None:
        token = TokenService(TEST_SECRET).issue(7)
        assert isinstance(TokenService(OTHER_SECRET).verify(token), InvalidTokenError)

    def test_tampered_token_rejected(self) -> None:
        tokens = TokenService(TEST_SECRET)
        token = tokens.issue(7)
        head, _, sig = token.split(".")
        forged = jwt.encode({"userId": 1}, OTHER_SECRET, algorithm="HS256").split(".")[1]
        assert isinstance(tokens.verify(f"{head}.{forged}.{sig}"), InvalidTokenError)

    def test_expired_token_rejected(self) -> None:
        tokens = TokenService(TEST_SECRET, lifetime=timedelta(seconds=-1))
        assert isinstance(tokens.verify(tokens.issue(7)), TokenExpiredError)

    def test_payload_without_user_id_rejected(self) -> None:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"sub": "7", "exp": exp}, TEST_SECRET, algorithm="HS256")
        assert isinstance(TokenService(TEST_SECRET).verify(token), InvalidTokenError)

    def test_non_integer_user_id_rejected(self) -> None:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"userId": "7", "exp": exp}, TEST_SECRET, algorithm="HS256")
        assert isinstance(TokenService(TEST_SECRET).verify(token), InvalidTokenError)

    def test_garbage_rejected(self) -> None:
        assert isinstance(TokenService(TEST_SECRET).verify("a.b.c"), InvalidTokenError)

    def test_missing_secret_is_misconfiguration(self) -> None:
        tokens = TokenService("")
        assert tokens.configured is False
        assert isinstance(tokens.issue(1), MisconfiguredSigningError)
        assert isinstance(tokens.verify("anything"), MisconfiguredSigningError)
        assert MisconfiguredSigningError().status_code == 500

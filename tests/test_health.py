"""
tests/test_health.py -- Integration tests for GET /health and GET /health/protected.

Covers:
  - /health: 200 with status and uptime, no auth required, never rate-limited
  - /health/protected: 401 without a bearer token, 403 for bad or expired
    tokens, 200 with the caller's userId for a valid token
  - /health/protected: 500 when no JWT secret is configured
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from jose import jwt

from conftest import TEST_SECRET, bearer, register_user, running_app


class TestHealth:
    def test_health_returns_status_and_uptime(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert isinstance(data["uptime"], float)
        assert data["uptime"] >= 0

    def test_health_no_auth_required(self, client: TestClient) -> None:
        resp = client.get("/health", headers={})
        assert resp.status_code == 200

    def test_health_not_rate_limited(self) -> None:
        """The auth rate limit must not apply to health checks."""
        with running_app(rate_limit_max_requests=2) as client:
            statuses = [client.get("/health").status_code for _ in range(5)]
        assert statuses == [200] * 5


class TestProtected:
    def test_missing_token_is_401(self, client: TestClient) -> None:
        resp = client.get("/health/protected")
        assert resp.status_code == 401
        assert resp.json()["status"] == "error"
        assert resp.json()["message"] == "Access token required"

    def test_non_bearer_scheme_is_401(self, client: TestClient) -> None:
        resp = client.get("/health/protected", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert resp.status_code == 401

    def test_empty_bearer_is_401(self, client: TestClient) -> None:
        resp = client.get("/health/protected", headers={"Authorization": "Bearer "})
        assert resp.status_code == 401

    def test_garbage_token_is_403(self, client: TestClient) -> None:
        resp = client.get("/health/protected", headers=bearer("not-a-jwt"))
        assert resp.status_code == 403
        assert resp.json()["message"] == "Invalid or expired token"

    def test_expired_token_is_403(self, client: TestClient) -> None:
        past = datetime.now(timezone.utc) - timedelta(days=8)
        token = jwt.encode(
            {"userId": 1, "iat": past, "exp": past + timedelta(days=7)},
            TEST_SECRET,
            algorithm="HS256",
        )
        resp = client.get("/health/protected", headers=bearer(token))
        assert resp.status_code == 403
        assert resp.json()["message"] == "Invalid or expired token"

    def test_token_signed_with_other_secret_is_403(self, client: TestClient) -> None:
        token = jwt.encode({"userId": 1}, "some-other-secret-that-is-long-enough!!", algorithm="HS256")
        resp = client.get("/health/protected", headers=bearer(token))
        assert resp.status_code == 403

    def test_valid_token_returns_user_id(self, client: TestClient) -> None:
        reg = register_user(client).json()
        resp = client.get("/health/protected", headers=bearer(reg["token"]))
        assert resp.status_code == 200
        assert resp.json() == {
            "status": "ok",
            "message": "You are authenticated!",
            "userId": reg["user"]["id"],
        }

    def test_bearer_scheme_is_case_insensitive(self, client: TestClient) -> None:
        token = register_user(client).json()["token"]
        resp = client.get("/health/protected", headers={"Authorization": f"bearer {token}"})
        assert resp.status_code == 200

    def test_missing_secret_is_500(self) -> None:
        """Never fall back to accepting tokens when signing is misconfigured."""
        with running_app(jwt_secret="") as client:
            resp = client.get("/health/protected", headers=bearer("anything"))
        assert resp.status_code == 500
        assert resp.json()["message"] == "JWT secret not configured"

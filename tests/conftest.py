"""
tests/conftest.py -- Shared test fixtures for the backend.

This module provides:
  - make_settings(): Settings with a test secret and an isolated in-memory DB
  - running_app(): context manager yielding a TestClient over create_app()
  - client: function-scoped TestClient with default test settings
  - register_user(): helper that POSTs /auth/register and returns the response

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.
Each call gets a unique name so tests never see each other's users.

Clients are function-scoped: rate-limit counters and the user table are
per-app state, and several tests depend on starting from zero.
"""

from __future__ import annotations

import uuid
from collections.abc import Generator, Iterator
from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from core.config import Settings

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"
TEST_PASSWORD = "Secret123"


def make_settings(**overrides) -> Settings:
    """Build Settings for tests; .env files and real env vars are ignored for these fields."""
    values: dict = {
        "jwt_secret": TEST_SECRET,
        "environment": "development",
        "database_url": f"sqlite:///file:test_auth_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true",
        "bcrypt_rounds": 10,
        "rate_limit_max_requests": 1000,
        "rate_limit_window_seconds": 900,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@contextmanager
def running_app(raise_server_exceptions: bool = True, **overrides) -> Iterator[TestClient]:
    """Start a fresh app (lifespan included) and yield a TestClient for it.

    Pass raise_server_exceptions=False to assert on the 500 envelope for
    unhandled exceptions; Starlette re-raises them into the test otherwise.
    """
    app = create_app(make_settings(**overrides))
    with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
        yield client


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Yield a TestClient over an app with default test settings."""
    with running_app() as c:
        yield c


def register_user(client: TestClient, email: str = "a@x.com", password: str = TEST_PASSWORD):
    return client.post("/auth/register", json={"email": email, "password": password})


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}

"""
api/main.py -- FastAPI application factory for the backend.

Run with:  python server.py
           uvicorn asgi:app --reload

create_app(settings) builds a fresh app around an explicit Settings object.
asgi.py calls it once with get_settings(); tests call it with their own
Settings so each test app has its own secret, database and rate-limit window.

Middleware stack (outermost to innermost):
  1. log_requests   -- one access-log line per request with latency
  2. CORSMiddleware -- CORS headers for the configured origins (all by default)

Rate limiting is a router dependency on /auth (see api/limiter.py), not a
middleware, so /health is never throttled.

Lifespan handles startup (store, hasher, token service, auth service, rate
limiter onto app.state) and shutdown (dispose the store's connection pool)
symmetrically. Draining in-flight requests and the forced-exit deadline are
uvicorn's job; server.py passes timeout_graceful_shutdown.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.limiter import RateLimiter
from api.routes.auth import router as auth_router
from api.routes.health import router as health_router
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import PasswordHasher, TokenService
from core.config import Settings, get_settings

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("frenzy.api")

__version__ = "1.0.0"


# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the auth collaborators on startup and release them on shutdown.

    Startup order matters: the store and token service must exist before the
    AuthService that wraps them.
    """
    settings: Settings = app.state.settings
    logger.info("Backend starting up (environment=%s)", settings.environment)

    app.state.user_store = UserStore(db_url=settings.database_url)
    app.state.token_service = TokenService(
        secret=settings.jwt_secret,
        lifetime=timedelta(days=settings.token_expire_days),
    )
    app.state.auth_service = AuthService(
        store=app.state.user_store,
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        tokens=app.state.token_service,
    )
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        storage_uri=settings.rate_limit_storage_uri,
    )
    if not app.state.token_service.configured:
        logger.error("JWT_SECRET is not configured -- /auth and protected routes will answer 500")
    logger.info(
        "Auth initialized (rate limit %d requests / %ds)",
        settings.rate_limit_max_requests,
        settings.rate_limit_window_seconds,
    )

    yield

    # Shutdown
    app.state.user_store.close()
    logger.info("Database connection closed")
    logger.info("Backend shutdown complete")


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. We capture wall-clock time before and after call_next so we can
# report latency on every response.
# ---------------------------------------------------------------------------


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(settings: Settings | None = None) -> FastAPI:
    """Assemble the FastAPI app: middleware, routers, error handlers, lifespan."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Frenzy Backend",
        description="Minimal authenticated HTTP backend: health, registration, login, JWT.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)

    app.include_router(health_router, prefix="/health", tags=["Health"])
    app.include_router(auth_router, prefix="/auth", tags=["Auth"])

    register_exception_handlers(app, settings)
    return app

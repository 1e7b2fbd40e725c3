"""
api/routes/health.py -- Liveness and token-check endpoints.

Routes:
  GET /health            -- public; status and seconds since the app started
  GET /health/protected  -- requires a bearer token; echoes the caller's userId

No rate limit applied -- health checks from load balancers and monitoring
systems must not be throttled.
"""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, Request

from api.models import HealthResponse, ProtectedResponse
from auth.dependencies import require_auth
from auth.models import AuthContext

# Auth policy:
# - GET /health:           public
# - GET /health/protected: requires auth (require_auth)
router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Return liveness and uptime in seconds."""
    return HealthResponse(uptime=time.monotonic() - request.app.state.started_at)


@router.get("/protected", response_model=ProtectedResponse)
async def protected(ctx: AuthContext = Depends(require_auth)) -> ProtectedResponse:
    """Example protected route: only reachable with a valid bearer token."""
    return ProtectedResponse(user_id=ctx.user_id)

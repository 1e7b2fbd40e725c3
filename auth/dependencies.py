"""
auth/dependencies.py -- FastAPI Depends() helper guarding protected routes.

require_auth() reads "Authorization: Bearer <token>", verifies it with the
TokenService on app.state, and hands the route an AuthContext. It does not
touch the request object beyond reading the header; identity travels as the
dependency's return value.

Failure mapping:
  no header / not a Bearer header / empty token -> 401 "Access token required"
  bad signature, malformed, expired             -> 403 "Invalid or expired token"
  no JWT secret configured                      -> 500 "JWT secret not configured"

Failures are raised as core.errors types and rendered by the error responder
in api/errors.py. Nothing here writes a response.

Layer rule: auth/dependencies.py may import from fastapi because it is part
of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import AuthContext
from auth.tokens import TokenService
from core.errors import ForbiddenError, MisconfiguredSigningError, UnauthorizedError


def bearer_token(request: Request) -> str | None:
    """Return the token from a Bearer Authorization header, or None."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def require_auth(request: Request) -> AuthContext:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(ctx: AuthContext = Depends(require_auth)): ...
    """
    token = bearer_token(request)
    if token is None:
        raise UnauthorizedError("Access token required")

    tokens: TokenService = request.app.state.token_service
    outcome = tokens.verify(token)
    if isinstance(outcome, MisconfiguredSigningError):
        raise outcome
    if not isinstance(outcome, int):
        raise ForbiddenError("Invalid or expired token")
    return AuthContext(user_id=outcome)

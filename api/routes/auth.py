"""
api/routes/auth.py -- Registration and login endpoints.

Routes:
  POST /auth/register  -- create an account; 201 with token and public user
  POST /auth/login     -- password login; 200 with token and public user

Security:
  Every route here sits behind enforce_rate_limit (router dependency), which
  runs before schema validation and adds the RateLimit-* response headers.
  login answers unknown email and wrong password identically -- see
  AuthService.login(). Do NOT add a separate "user not found" branch here.
  Cache-Control: no-store on responses carrying a token.

Handlers are plain `def` so FastAPI runs bcrypt and the synchronous store in
its threadpool instead of on the event loop.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.limiter import enforce_rate_limit
from api.models import AuthResponse, LoginRequest, RegisterRequest
from auth.service import AuthService
from core.errors import AppError

# Auth policy:
# - POST /auth/register: public, rate-limited
# - POST /auth/login:    public, rate-limited
router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: Request, response: Response, body: RegisterRequest) -> AuthResponse:
    """Create an account and return a session token for it.

    409 if the email is already registered.
    """
    service: AuthService = request.app.state.auth_service
    outcome = service.register(body.email, body.password)
    if isinstance(outcome, AppError):
        raise outcome
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse.from_session("User registered successfully", outcome)


@router.post("/login", response_model=AuthResponse)
def login(request: Request, response: Response, body: LoginRequest) -> AuthResponse:
    """Authenticate with email and password; return a fresh session token.

    Returns the same 401 "Invalid credentials" for an unknown email and a
    wrong password.
    """
    service: AuthService = request.app.state.auth_service
    outcome = service.login(body.email, body.password)
    if isinstance(outcome, AppError):
        raise outcome
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse.from_session("Login successful", outcome)

"""
api/errors.py -- The single exit path for every failure.

All handlers return the same ErrorResponse envelope, {"status": "error",
"message": ...}, so API clients can parse errors uniformly. A formatted
traceback is added under "stack" only when the app is NOT running with
ENVIRONMENT=production.
RateLimit-* headers recorded by api/limiter.py for the request are copied
onto the error response.

Handled kinds:
  AppError               -- classified failures from core/errors.py (own status)
  RequestValidationError -- pydantic body errors, aggregated into one 400
  StarletteHTTPException -- framework 404/405 etc.
  Exception              -- anything else: logged, 500, generic message

Security note: the message for unclassified exceptions is always generic.
The raw exception is written to the log only.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse
from core.config import Settings
from core.errors import AppError, BadRequestError, InternalError

logger = logging.getLogger("frenzy.api")


def error_response(
    status_code: int,
    message: str,
    exc: BaseException,
    settings: Settings,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the error envelope. Diagnostic detail only outside production."""
    stack = None
    if not settings.is_production:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, stack=stack).model_dump(exclude_none=True),
        headers=headers,
    )


def _rate_limit_headers(request: Request) -> dict[str, str]:
    # Left by enforce_rate_limit on /auth requests that were let through.
    return dict(getattr(request.state, "rate_limit_headers", {}))


def validation_message(exc: RequestValidationError) -> str:
    """Join every field error into one message: "email: ..., password: ...".

    The leading "body" segment of each location is dropped; an error on the
    body as a whole (missing or not an object) is reported as "body".
    """
    parts: list[str] = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] == "body":
            loc = loc[1:]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {err.get('msg', 'invalid value')}")
    return ", ".join(parts) or BadRequestError.default_message


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Install the envelope handlers on app, bound to this app's settings."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        headers = _rate_limit_headers(request)
        headers.update(exc.headers)
        return error_response(exc.status_code, exc.message, exc, settings, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(
            BadRequestError.status_code, validation_message(exc), exc, settings, _rate_limit_headers(request)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        headers = _rate_limit_headers(request)
        headers.update(exc.headers or {})
        return error_response(exc.status_code, str(exc.detail), exc, settings, headers)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return error_response(
            InternalError.status_code, InternalError.default_message, exc, settings, _rate_limit_headers(request)
        )

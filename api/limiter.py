"""
api/limiter.py -- Per-client rate limiting for the /auth routes.

RateLimiter wraps the `limits` library (the engine underneath slowapi) so the
limit, window and counter backend all come from Settings at app creation
time rather than from decorators fixed at import time. Clients are keyed by
slowapi's get_remote_address().

Counter backend:
  storage_uri selects where counters live. "memory://" keeps them in this
  process only: they vanish on restart and are NOT shared between instances,
  so a fleet behind a load balancer gets one window per instance. Point it at
  a shared store (e.g. "redis://host:6379") for multi-instance deployments.

The moving-window strategy counts hits in the trailing window_seconds; a
client that stops sending is back at zero once the window has elapsed.

Response headers (IETF RateLimit draft fields):
  RateLimit-Limit      max requests per window
  RateLimit-Remaining  requests left for this client
  RateLimit-Reset      seconds until the oldest counted request leaves the window
  Retry-After          429 responses only, same value as RateLimit-Reset
They are sent on every /auth response, errors included: enforce_rate_limit()
sets them on the route's response and leaves a copy on request.state for the
error handlers in api/errors.py.

enforce_rate_limit() is mounted as a router dependency on /auth so it runs
before schema validation: well-formed JSON that fails the schema is counted
and throttled. A body that is not valid JSON is rejected by FastAPI while
decoding, before any dependency runs, and is never counted.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable

from fastapi import Request, Response
from limits import RateLimitItemPerSecond
from limits.storage import storage_from_string
from limits.strategies import MovingWindowRateLimiter
from slowapi.util import get_remote_address

from core.errors import TooManyRequestsError

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later"


class RateLimiter:
    """Cap requests per client address over a trailing time window.

    Usage:
        limiter = RateLimiter(max_requests=100, window_seconds=900)
        rejection = limiter.hit(request)   # None, or TooManyRequestsError
        headers = limiter.headers(request)
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        storage_uri: str = "memory://",
        key_func: Callable[[Request], str] = get_remote_address,
        namespace: str = "auth",
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._key_func = key_func
        self._item = RateLimitItemPerSecond(max_requests, window_seconds, namespace=namespace)
        self._storage = storage_from_string(storage_uri)
        self._strategy = MovingWindowRateLimiter(self._storage)

    def hit(self, request: Request) -> TooManyRequestsError | None:
        """Record one request for the caller's address; return a rejection once over the cap.

        The rejection carries the RateLimit-* headers plus Retry-After.
        """
        if self._strategy.hit(self._item, self._key_func(request)):
            return None
        headers = self.headers(request)
        headers["Retry-After"] = headers["RateLimit-Reset"]
        return TooManyRequestsError(RATE_LIMIT_MESSAGE, headers=headers)

    def headers(self, request: Request) -> dict[str, str]:
        """RateLimit-* headers describing the caller's current window."""
        stats = self._strategy.get_window_stats(self._item, self._key_func(request))
        reset = max(0, math.ceil(stats.reset_time - time.time()))
        return {
            "RateLimit-Limit": str(self.max_requests),
            "RateLimit-Remaining": str(max(0, stats.remaining)),
            "RateLimit-Reset": str(reset),
        }

    def reset(self) -> None:
        """Drop every counter in the backing storage."""
        self._storage.reset()


def enforce_rate_limit(request: Request, response: Response) -> None:
    """FastAPI dependency: apply the app's RateLimiter to this request."""
    limiter: RateLimiter = request.app.state.rate_limiter
    rejection = limiter.hit(request)
    if rejection is not None:
        raise rejection
    headers = limiter.headers(request)
    request.state.rate_limit_headers = headers
    response.headers.update(headers)

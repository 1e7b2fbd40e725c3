#!/usr/bin/env python3
"""
server.py -- Run the backend under uvicorn.

Usage:
  python server.py

Environment variables (see .env.example):
  PORT                    Listening port (default 3000)
  HOST                    Bind address (default 0.0.0.0)
  JWT_SECRET              Token signing secret (required for /auth and protected routes)
  SHUTDOWN_GRACE_SECONDS  On SIGINT/SIGTERM uvicorn stops accepting connections,
                          drains in-flight requests, runs the app shutdown
                          (closes the database) and gives up waiting after
                          this many seconds (default 10).
"""

import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from core.config import get_settings


def main() -> None:
    settings = get_settings()

    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s %(levelprefix)s %(message)s"

    uvicorn.run(
        "asgi:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=log_config,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
    )


if __name__ == "__main__":
    main()

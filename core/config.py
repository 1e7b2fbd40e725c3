"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the backend happen here. No module should
call os.getenv() or os.environ.get() directly -- build a Settings (or call
get_settings()) and pass it down.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. asgi.py
      and server.py use it; tests construct Settings(...) directly and hand
      it to create_app() so each test app has its own secret and database.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET). Type coercion and validation are built in.

Security notes:
  A missing JWT_SECRET does not stop the process -- /health must keep
  answering -- but every route that signs or verifies a token answers 500
  until it is set. The validator logs the misconfiguration at load time.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("frenzy.config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    environment: str = "development"
    host: str = "0.0.0.0"  # nosec B104 -- container-friendly default
    port: int = 3000
    log_level: str = "info"
    database_url: str = "sqlite:///./frenzy.db"
    cors_origins: list[str] = ["*"]
    shutdown_grace_seconds: int = 10

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured".
    jwt_secret: str = ""
    token_expire_days: int = Field(default=7, ge=1)
    bcrypt_rounds: int = Field(default=10, ge=10, le=16)

    # ------------------------------------------------------------------
    # Rate limiting (applies to /auth/*)
    # ------------------------------------------------------------------

    rate_limit_max_requests: int = Field(default=100, ge=1)
    rate_limit_window_seconds: int = Field(default=15 * 60, ge=1)
    # Any `limits` storage URI: memory:// (single instance), redis://host:6379, ...
    rate_limit_storage_uri: str = "memory://"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @model_validator(mode="after")
    def check_jwt_secret(self) -> "Settings":
        """Log, but do not reject, a missing or weak signing secret."""
        if not self.jwt_secret:
            logger.warning("JWT_SECRET is not set. Auth routes will answer 500 until it is configured.")
        elif len(self.jwt_secret) < 32:
            logger.warning("JWT_SECRET is shorter than 32 characters. Use a longer random value.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() if you need to inject different
    environment variables, or better, construct Settings(...) directly.
    """
    return Settings()

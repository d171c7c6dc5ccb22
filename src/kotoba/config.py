"""Application configuration."""

import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Literal

import structlog
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEVELOPMENT_SECRET_KEY = "kotoba-development-secret-key-change-me"  # noqa: S105


class Settings(BaseSettings):
    """Client and reference server settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="KOTOBA_", extra="ignore"
    )

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = "development"

    # Client
    API_URL: str = "http://localhost:8080"
    REQUEST_TIMEOUT: float = 30.0
    REFRESH_TIMEOUT: float = 10.0
    MAX_PENDING_REQUESTS: int = 100
    LOGIN_PATH: str = "/login"
    SESSION_PROBE_PATH: str = "/api/auth/me"

    # Reference server auth
    SECRET_KEY: str = ""
    REFRESH_TOKEN_SECRET_KEY: str = ""
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    COOKIE_SECURE: bool = False
    COOKIE_DOMAIN: str | None = None
    PASSWORD_PEPPER: str = ""
    LOGIN_RATE_LIMIT: str = "5/minute"
    REFRESH_RATE_LIMIT: str = "10/minute"

    @field_validator("REQUEST_TIMEOUT", "REFRESH_TIMEOUT", mode="after")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Timeouts must be positive."""
        if value <= 0:
            msg = "timeouts must be positive"
            raise ValueError(msg)
        return value

    @field_validator("MAX_PENDING_REQUESTS", mode="after")
    @classmethod
    def validate_max_pending(cls, value: int) -> int:
        """The pending queue needs room for at least one request."""
        if value < 1:
            msg = "MAX_PENDING_REQUESTS must be at least 1"
            raise ValueError(msg)
        return value

    @field_validator("API_URL", mode="after")
    @classmethod
    def strip_api_url(cls, value: str) -> str:
        """Strip trailing slashes from the API origin."""
        return value.rstrip("/")

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Require a real signing secret in production."""
        if not self.SECRET_KEY:
            if self.ENVIRONMENT == "production":
                msg = "SECRET_KEY is required when ENVIRONMENT is 'production'"
                raise ValueError(msg)
            self.SECRET_KEY = DEVELOPMENT_SECRET_KEY
        return self

    @property
    def refresh_secret_key(self) -> str:
        """Secret used to sign refresh tokens."""
        return self.REFRESH_TOKEN_SECRET_KEY or self.SECRET_KEY


def configure_logging(environment: str = "development") -> None:
    """Configure structured logging with structlog."""
    # Determine if we should use JSON output (production) or console output (dev)
    use_json = environment == "production"

    # Configure stdlib logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )

    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Production may inject everything via env vars only
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    BaseSettings fields are filled from the environment, which static type
    checkers don't know about, hence the type ignore.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_rate_limit_settings() -> "AuthRateLimitSettings":
    return AuthRateLimitSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    mock_auth_enabled: bool = Field(
        True,
        description="Seed the in-memory user store with a demo account",
    )
    demo_user_email: str = Field(
        "demo@wardrobe.app",
        description="Email of the seeded demo account",
    )
    demo_user_password: str = Field(
        "Wardrobe!2024",
        description="Password of the seeded demo account",
    )
    demo_user_name: str = Field(
        "Demo User",
        description="Display name of the seeded demo account",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class AuthRateLimitSettings(BaseSettings):
    """Throttling of sign-in, sign-up and password reset attempts.

    Defaults: 5 failed attempts per 15 minutes, then a 30 minute lockout.
    """

    enabled: bool = Field(
        True,
        description="Enable attempt limiting on auth endpoints",
    )
    window_ms: int = Field(
        15 * 60 * 1000,
        description="Window in which failed attempts are counted (milliseconds)",
        ge=1,
    )
    max_attempts: int = Field(
        5,
        description="Failed attempts allowed per window before locking out",
        ge=1,
    )
    block_duration_ms: int | None = Field(
        30 * 60 * 1000,
        description="Lockout applied once max_attempts is reached (defaults to window_ms)",
        ge=1,
    )
    trust_forwarded_for: bool = Field(
        False,
        description="Use the first X-Forwarded-For hop as the client IP (behind a proxy)",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_RATE_LIMIT_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to receive and return the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid, so a
    misconfigured limiter never serves traffic.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    rate_limit: AuthRateLimitSettings = Field(default_factory=_build_rate_limit_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


settings = Settings()

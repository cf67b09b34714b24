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

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file and os.getenv("TESTING", "").lower() != "true":
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class PasteSettings(BaseSettings):
    """Limits and defaults applied to submitted pastes."""

    max_content_chars: int = Field(
        500_000,
        description="Maximum paste length in characters after trimming",
        ge=1,
    )
    body_overhead_bytes: int = Field(
        1000,
        description="Extra raw body bytes tolerated for JSON framing before parsing",
        ge=0,
    )
    id_max_attempts: int = Field(
        5,
        description="How many identifiers to try before giving up on a collision streak",
        ge=1,
    )
    default_language: str = Field(
        "plaintext",
        description="Language used when the submitted one is missing or unknown",
    )
    default_expiration: str = Field(
        "1d",
        description="Expiration token used when the submitted one is missing or unknown",
    )

    model_config = SettingsConfigDict(
        env_prefix="PASTE_",
        case_sensitive=False,
    )


class StoreSettings(BaseSettings):
    """Paste storage backend configuration."""

    backend: str = Field(
        "memory",
        description="Storage backend: 'memory' (single process) or 'redis'",
    )
    redis_url: str = Field(
        "redis://localhost:6379/0",
        description="Redis connection URL (use rediss:// for TLS)",
    )
    redis_socket_timeout_seconds: float = Field(
        5.0,
        description="Socket timeout for Redis commands",
        gt=0,
    )
    key_prefix: str = Field(
        "paste:",
        description="Namespace prepended to paste ids in the key-value store",
    )
    max_entries: int = Field(
        100_000,
        description="Maximum number of pastes held by the in-memory backend",
        ge=1,
    )
    reap_interval_seconds: int = Field(
        300,
        description="How often the in-memory backend sweeps expired pastes",
        ge=1,
    )
    max_retention_seconds: int = Field(
        30 * 24 * 60 * 60,
        description="Retention ceiling applied to pastes that never expire",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        case_sensitive=False,
    )


class RateLimitSettings(BaseSettings):
    """Write-path rate limiting configuration."""

    enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on paste creation",
    )
    requests: int = Field(
        10,
        description="Maximum number of pastes a client may create per window",
        ge=1,
    )
    window_seconds: int = Field(
        60,
        description="Rate limit window size in seconds",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: 'json' or 'plain'")
    output: str = Field("stdout", description="Log destination: 'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated log files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to receive and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    debug: bool = False
    paste: PasteSettings = Field(default_factory=PasteSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()

"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
- APP_ENV=production also switches the payment provider to live keys
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

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file and os.getenv("TESTING") != "true":
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment."""

    return AppSettings()


def _build_log_settings() -> "LogSettings":
    return LogSettings()


def _build_payment_settings() -> "PaymentSettings":
    return PaymentSettings()


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-endpoint sliding-window rate limiting",
    )
    json_content_type_required: bool = Field(
        True,
        description="Reject non-GET requests whose Content-Type is not application/json",
    )
    security_headers_enabled: bool = Field(
        True,
        description="Attach HSTS/CSP/X-Frame-Options headers to every response",
    )
    bcrypt_rounds: int = Field(
        12,
        description="bcrypt cost factor used when hashing passwords",
        ge=4,
        le=31,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(
        None,
        description="Log file path when output=file (default logs/app.log)",
    )
    max_bytes: int = Field(
        10_485_760,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Number of rotated files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class PaymentSettings(BaseSettings):
    """Payment provider configuration.

    Key selection and prefix validation happen in the payment client factory,
    so a missing key only fails the app when a payment client is built.
    """

    provider: str = Field(
        "stub",
        description="Payment provider name: stripe (live API) or stub (offline)",
    )
    api_version: str | None = Field(
        None,
        description="Pinned Stripe API version (SDK default when unset)",
    )
    test_secret_key: str | None = Field(
        None,
        description="Secret key used outside production (must start with sk_test_)",
    )
    live_secret_key: str | None = Field(
        None,
        description="Secret key used in production (must start with sk_live_)",
    )
    test_publishable_key: str | None = Field(None, description="Client-side test key")
    live_publishable_key: str | None = Field(None, description="Client-side live key")

    model_config = SettingsConfigDict(
        env_prefix="PAYMENT_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.

    Environments:
    - development: Local development
    - testing: Automated tests (conftest sets TESTING=true)
    - staging: Pre-production
    - production: Production deployment (live payment keys)
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)
    payment: PaymentSettings = Field(default_factory=_build_payment_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )

    @property
    def is_live(self) -> bool:
        """Whether the live payment environment is selected."""
        return self.app_env == "production"


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()

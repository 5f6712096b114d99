"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Provider credentials keep the variable names used by the hosting
dashboard (RESEND_API_KEY, MAILCHIMP_*, SENDER_API_TOKEN, RECIPIENT_EMAIL...).
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
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field(
        "json",
        description="Log format: 'json' (structured) or 'plain'",
    )
    output: str = Field(
        "stdout",
        description="Log destination: 'stdout' or 'file'",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output=file",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    site_name: str = Field(
        "iBuildWith.ai",
        description="Site name used in email copy and stripped from page titles",
    )
    display_timezone: str = Field(
        "America/Los_Angeles",
        description="IANA timezone used for timestamps in notification emails",
    )
    cors_allowed_origins: str = Field(
        "https://ibuildwith.ai,https://www.ibuildwith.ai",
        description="Comma-separated list of origins allowed to post the forms",
    )

    newsletter_provider: str = Field(
        "mailchimp",
        description="Subscriber provider for newsletter signups (mailchimp, sender)",
    )
    reminder_provider: str = Field(
        "sender",
        description="Subscriber provider for reminder requests (mailchimp, sender)",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-caller rate limiting on form endpoints",
    )
    trust_proxy_headers: bool = Field(
        False,
        description=(
            "Identify callers by the client-ip / x-forwarded-for headers. "
            "Enable only behind an edge proxy that sets them"
        ),
    )
    rate_limit_requests: int = Field(
        3,
        description="Maximum number of requests allowed per window (per caller)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        3600,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_sweep_interval_seconds: float | None = Field(
        None,
        description="Period of the expired-record sweep (defaults to the window size)",
        gt=0,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include Retry-After and X-RateLimit-Limit headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class ResendSettings(BaseSettings):
    """Transactional email (Resend) configuration."""

    api_key: str | None = Field(None, description="Resend API key")
    from_address: str = Field(
        "contact@send.ibuildwith.ai",
        description="Sender address; its domain must be verified in Resend",
    )

    model_config = SettingsConfigDict(
        env_prefix="RESEND_",
        case_sensitive=False,
    )


class NotificationSettings(BaseSettings):
    """Recipients of internal notification emails."""

    recipient_email: str | None = Field(
        None,
        description="Inbox notified about newsletter signups",
    )
    reminder_admin_email: str | None = Field(
        None,
        description="Inbox notified about reminder requests",
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


class MailchimpSettings(BaseSettings):
    """Mailchimp Marketing API configuration."""

    api_key: str | None = Field(None, description="Mailchimp API key")
    server_prefix: str | None = Field(
        None,
        description="Data center prefix (e.g., us21)",
    )
    list_id: str | None = Field(None, description="Audience (list) id")
    timeout_seconds: float = Field(10.0, description="Request timeout in seconds")

    model_config = SettingsConfigDict(
        env_prefix="MAILCHIMP_",
        case_sensitive=False,
    )


class SenderSettings(BaseSettings):
    """Sender.net API configuration."""

    api_token: str | None = Field(None, description="Sender.net API token")
    base_url: str = Field(
        "https://api.sender.net/v2",
        description="Sender.net API base URL",
    )
    timeout_seconds: float = Field(5.0, description="Request timeout in seconds")

    model_config = SettingsConfigDict(
        env_prefix="SENDER_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.

    Environments:
    - development: Local development (DEBUG=true)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    log: LogSettings = Field(default_factory=LogSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    resend: ResendSettings = Field(default_factory=ResendSettings)
    notification: NotificationSettings = Field(default_factory=NotificationSettings)
    mailchimp: MailchimpSettings = Field(default_factory=MailchimpSettings)
    sender: SenderSettings = Field(default_factory=SenderSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()

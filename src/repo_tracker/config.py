"""
Configuration management for the GitHub Repo Tracker.

This module handles environment variables, settings validation, and configuration
management using Pydantic Settings for type safety and validation.
"""

import re
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GITHUB_TOKEN_PLACEHOLDER = "your_github_personal_access_token_here"

_GITHUB_TOKEN_PATTERN = re.compile(
    r"^(?:gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})$"
)


def is_well_formed_github_token(token: str | None) -> bool:
    """Check that a token looks like a real GitHub token, not a placeholder."""
    if not token or token == GITHUB_TOKEN_PLACEHOLDER:
        return False
    return bool(_GITHUB_TOKEN_PATTERN.match(token))


class ServerConfig(BaseModel):
    """Web server configuration settings."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")


class PollingConfig(BaseModel):
    """Polling configuration settings."""

    batch_size: int = Field(
        default=5, description="Repositories checked concurrently per batch"
    )
    batch_delay_seconds: float = Field(
        default=2.0, description="Pause between consecutive batches"
    )
    rate_limit_cooldown_seconds: float = Field(
        default=60.0, description="Pause after the GitHub API signals rate limiting"
    )
    interval_minutes: int = Field(
        default=10, description="Expected cadence of the scheduled trigger"
    )


class NotificationConfig(BaseModel):
    """Notification channel configuration settings."""

    resend_api_key: str = Field(default="", description="Resend API key")
    resend_api_url: str = Field(
        default="https://api.resend.com", description="Resend API URL"
    )
    from_email: str = Field(
        default="GitHub Repo Tracker <onboarding@resend.dev>",
        description="Sender address for notification emails",
    )
    telegram_bot_token: str = Field(default="", description="Telegram bot token")
    telegram_chat_id: str = Field(default="", description="Telegram chat ID")
    telegram_api_url: str = Field(
        default="https://api.telegram.org", description="Telegram Bot API URL"
    )
    request_timeout: float = Field(
        default=10.0, description="Outbound notification request timeout"
    )

    @property
    def email_enabled(self) -> bool:
        """Check if the email channel has credentials."""
        return bool(self.resend_api_key)

    @property
    def telegram_enabled(self) -> bool:
        """Check if the Telegram channel has credentials."""
        return bool(self.telegram_bot_token and self.telegram_chat_id)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GitHub configuration
    github_token: str = Field(
        default="", description="GitHub personal access token (optional)"
    )
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub API URL"
    )
    github_request_timeout: float = Field(
        default=30.0, description="GitHub API request timeout in seconds"
    )

    # Scheduled trigger
    cron_secret: str = Field(
        default="", description="Shared secret required by the cron trigger"
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format")

    # Email notifications
    resend_api_key: str = Field(default="", description="Resend API key")
    resend_api_url: str = Field(
        default="https://api.resend.com", description="Resend API URL"
    )
    from_email: str = Field(
        default="GitHub Repo Tracker <onboarding@resend.dev>",
        description="Sender address for notification emails",
    )

    # Telegram notifications
    telegram_bot_token: str = Field(default="", description="Telegram bot token")
    telegram_chat_id: str = Field(default="", description="Telegram chat ID")
    telegram_api_url: str = Field(
        default="https://api.telegram.org", description="Telegram Bot API URL"
    )
    notification_timeout: float = Field(
        default=10.0, description="Notification request timeout in seconds"
    )

    # Security
    allowed_origins: str | list[str] = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)",
    )
    enable_cors: bool = Field(default=True, description="Enable CORS")

    # Polling Configuration
    polling_batch_size: int = Field(
        default=5, description="Repositories checked concurrently per batch"
    )
    polling_batch_delay_seconds: float = Field(
        default=2.0, description="Delay between batches in seconds"
    )
    polling_rate_limit_cooldown_seconds: float = Field(
        default=60.0, description="Cool-down after a rate limit response"
    )
    polling_interval_minutes: int = Field(
        default=10, description="Cadence of the scheduled poll trigger"
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v: Any) -> list[str]:
        """Parse allowed origins from comma-separated string or list."""
        if isinstance(v, str):
            # Handle comma-separated string format
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        elif isinstance(v, list):
            # Handle list format (from JSON or direct assignment)
            return v
        else:
            error_msg = f"allowed_origins must be a string or list, got {type(v)}"
            raise ValueError(error_msg)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in {"json", "console"}:
            raise ValueError(f"Invalid log format: {v}")
        return v

    @field_validator("polling_batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        """Validate polling batch size."""
        if v < 1:
            raise ValueError(f"Invalid polling batch size: {v}")
        return v

    @field_validator(
        "polling_batch_delay_seconds", "polling_rate_limit_cooldown_seconds"
    )
    @classmethod
    def validate_non_negative_delay(cls, v: float) -> float:
        """Validate that delays are not negative."""
        if v < 0:
            raise ValueError(f"Delay must not be negative: {v}")
        return v

    @property
    def has_github_token(self) -> bool:
        """Check if a usable GitHub token is configured."""
        return is_well_formed_github_token(self.github_token)

    @property
    def server_config(self) -> ServerConfig:
        """Get server configuration."""
        return ServerConfig(host=self.host, port=self.port, debug=self.debug)

    @property
    def polling_config(self) -> PollingConfig:
        """Get polling configuration."""
        return PollingConfig(
            batch_size=self.polling_batch_size,
            batch_delay_seconds=self.polling_batch_delay_seconds,
            rate_limit_cooldown_seconds=self.polling_rate_limit_cooldown_seconds,
            interval_minutes=self.polling_interval_minutes,
        )

    @property
    def notification_config(self) -> NotificationConfig:
        """Get notification configuration."""
        return NotificationConfig(
            resend_api_key=self.resend_api_key,
            resend_api_url=self.resend_api_url,
            from_email=self.from_email,
            telegram_bot_token=self.telegram_bot_token,
            telegram_chat_id=self.telegram_chat_id,
            telegram_api_url=self.telegram_api_url,
            request_timeout=self.notification_timeout,
        )


# Global settings instance - initialized lazily to avoid import-time errors
_settings_instance = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance

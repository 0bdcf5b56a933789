"""
Application settings with environment variable support.

All settings can be overridden via WEEKLY_AVAILABILITY_* environment variables
or a .env file. Supports both local (stdio) and HTTP transport.
"""

from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from weekly_availability.core.timezones import validate_timezone


class Settings(BaseSettings):
    """Weekly availability MCP configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WEEKLY_AVAILABILITY_",
        env_file=".env",
        extra="ignore",
    )

    # Transport mode
    transport_mode: Literal["stdio", "http"] = "stdio"
    http_host: str = "0.0.0.0"
    http_port: int = 8000

    # API key for HTTP transport (no auth when unset)
    api_key: Optional[str] = None

    # Zone used when a tool call does not pass one
    default_timezone: str = "UTC"

    # Free slots shorter than this are dropped by the free_slots action
    min_duration_minutes: int = 0

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("default_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        return validate_timezone(value)

    @field_validator("min_duration_minutes")
    @classmethod
    def _check_min_duration(cls, value: int) -> int:
        if value < 0:
            raise ValueError("min_duration_minutes must be >= 0")
        return value

    def is_http_mode(self) -> bool:
        """Check if running with HTTP transport."""
        return self.transport_mode == "http"


# Global settings instance
settings = Settings()

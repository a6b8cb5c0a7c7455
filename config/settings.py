"""Settings models."""

from datetime import time
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from .defaults import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_HOST,
    DEFAULT_JSONBIN_BASE_URL,
    DEFAULT_JSONBIN_TIMEOUT_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_RESET_HOUR,
    DEFAULT_RESET_MINUTE,
    DEFAULT_RESET_TIMEZONE,
    DEFAULT_SQLITE_PATH,
    DEFAULT_STORAGE,
)


class JsonBinConfig(BaseModel):
    """Remote JSONBin document store configuration."""

    bin_id: str | None = Field(default=None, description="JSONBin bin identifier")
    api_key: str | None = Field(default=None, description="JSONBin master key")
    base_url: str = Field(
        default=DEFAULT_JSONBIN_BASE_URL,
        description="Base URL of the bins API",
    )
    timeout: float = Field(
        default=DEFAULT_JSONBIN_TIMEOUT_SECONDS,
        gt=0,
        description="Request timeout in seconds",
    )


class ResetConfig(BaseModel):
    """Daily counter reset schedule."""

    enabled: bool = Field(default=True, description="Whether the daily reset runs")
    hour: int = Field(default=DEFAULT_RESET_HOUR, ge=0, le=23)
    minute: int = Field(default=DEFAULT_RESET_MINUTE, ge=0, le=59)
    timezone: str = Field(
        default=DEFAULT_RESET_TIMEZONE,
        description="IANA time zone the reset time is interpreted in",
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown time zone: {value}") from e
        return value

    @property
    def at(self) -> time:
        return time(self.hour, self.minute)


class Settings(BaseModel):
    """Main configuration model."""

    storage: Literal["sqlite", "memory", "jsonbin"] = Field(
        default=DEFAULT_STORAGE,
        description="Counter storage backend",
    )
    sqlite_path: str = Field(
        default=DEFAULT_SQLITE_PATH,
        description="Database file for the sqlite backend",
    )
    jsonbin: JsonBinConfig = Field(default_factory=JsonBinConfig)
    reset: ResetConfig = Field(default_factory=ResetConfig)
    host: str = Field(default=DEFAULT_HOST)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    cors_origins: list[str] = Field(
        default_factory=lambda: [DEFAULT_CORS_ORIGINS],
        description="Allowed CORS origins",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)

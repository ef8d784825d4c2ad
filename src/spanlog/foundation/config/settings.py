"""Environment-based configuration using pydantic-settings.

Settings only provide defaults: options passed to a logger constructor always win.

Example:
    >>> from spanlog.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.logging.min_level
    'info'
    >>> settings.remote.max_batch_count
    10

    # Or with environment variables:
    # SPANLOG_LOG_MIN_LEVEL=debug
    # SPANLOG_REMOTE_MAX_PAYLOAD_SIZE=250000
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, PositiveInt, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Defaults applied to every logger."""

    model_config = SettingsConfigDict(
        env_prefix="SPANLOG_LOG_",
        extra="ignore",
    )

    min_level: str = Field(default="info", description="Minimum level name when none is given")
    version: str = Field(default="0", description="Service version written as 'v' on every record")

    @field_validator("min_level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v


class TracingSettings(BaseSettings):
    """Trace correlation and uncaught-exception behavior."""

    model_config = SettingsConfigDict(
        env_prefix="SPANLOG_TRACING_",
        extra="ignore",
    )

    disabled: bool = Field(default=False, description="Default for disable_trace_logging")
    exit_grace_seconds: NonNegativeFloat = Field(default=5.0, description="Delay before exit after an uncaught exception")
    exit_code: int = 10


class RemoteSettings(BaseSettings):
    """Batching thresholds for the remote backend."""

    model_config = SettingsConfigDict(
        env_prefix="SPANLOG_REMOTE_",
        extra="ignore",
    )

    max_batch_count: PositiveInt = Field(default=10, description="Flush attempts before a batch is sent")
    max_payload_size: PositiveInt = Field(default=100_000, description="Buffered bytes that force a send")
    delivery: Literal["optimistic", "requeue"] = "optimistic"


class SpanlogSettings(BaseSettings):
    """Root settings for spanlog.

    Loads configuration from environment variables with SPANLOG_ prefix.
    Supports nested configuration and .env files.

    Example environment variables:
        SPANLOG_LOG_MIN_LEVEL=debug
        SPANLOG_LOG_VERSION=1.4.2
        SPANLOG_TRACING_DISABLED=true
        SPANLOG_REMOTE_MAX_BATCH_COUNT=20
    """

    model_config = SettingsConfigDict(
        env_prefix="SPANLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    tracing: TracingSettings = Field(default_factory=TracingSettings)
    remote: RemoteSettings = Field(default_factory=RemoteSettings)

    @computed_field
    @property
    def requeue_on_failure(self) -> bool:
        """Whether failed remote batches go back into the buffer by default."""
        return self.remote.delivery == "requeue"


@lru_cache(maxsize=1)
def get_settings() -> SpanlogSettings:
    """Get the global settings instance (cached)."""
    return SpanlogSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()

"""Configuration management using pydantic-settings."""

from .settings import (
    LoggingSettings,
    RemoteSettings,
    SpanlogSettings,
    TracingSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "RemoteSettings",
    "SpanlogSettings",
    "TracingSettings",
    "clear_settings_cache",
    "get_settings",
]

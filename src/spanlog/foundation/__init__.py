"""Foundation - Core building blocks for spanlog.

Contains: error handling, configuration, testing doubles.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "ErrorCode", "LoggerError", "SpanlogException", "NameRequired", "NoParentTrace", "UnimplementedBackend",
    "JsonDict", "JsonPrimitive", "JsonValue",
    # Config
    "SpanlogSettings", "LoggingSettings", "TracingSettings", "RemoteSettings",
    "get_settings", "clear_settings_cache",
    # Testing
    "MockTransport", "CapturedStream", "Post",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("ErrorCode", "LoggerError", "SpanlogException", "NameRequired", "NoParentTrace",
                "UnimplementedBackend", "JsonDict", "JsonPrimitive", "JsonValue"):
        from . import errors
        return getattr(errors, name)

    if name in ("SpanlogSettings", "LoggingSettings", "TracingSettings", "RemoteSettings",
                "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)

    if name in ("MockTransport", "CapturedStream", "Post"):
        from . import testing
        return getattr(testing, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

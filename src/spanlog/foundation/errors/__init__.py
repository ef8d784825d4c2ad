"""Unified error handling for spanlog.

- ErrorCode: Machine-readable error kinds
- LoggerError/SpanlogException: Structured errors and the exceptions carrying them
- NameRequired, NoParentTrace, UnimplementedBackend: Concrete failure kinds
- JsonDict/JsonValue: JSON type aliases
"""

from .errors import (
    ErrorCode,
    LoggerError,
    NameRequired,
    NoParentTrace,
    SpanlogException,
    UnimplementedBackend,
)
from .types import JsonDict, JsonPrimitive, JsonValue

__all__ = [
    # Errors
    "ErrorCode", "LoggerError", "SpanlogException",
    "NameRequired", "NoParentTrace", "UnimplementedBackend",
    # Types
    "JsonDict", "JsonPrimitive", "JsonValue",
]

"""spanlog - Structured, leveled JSON logging with trace correlation.

Every record is a JSON object with severity, default fields (name, pid,
hostname, service version) and, for loggers that belong to a trace tree, the
trace ids needed to stitch records together across services.

Quick Start:
    >>> from spanlog import ConsoleLogger
    >>>
    >>> log = ConsoleLogger("billing", min_level="debug", version="2.1.0")
    >>> log.info("invoice created", invoice_id="inv-7")
    >>>
    >>> root = log.create_root_trace_logger("POST /invoices")
    >>> span = root.create_child_trace_logger("charge_card")
    >>> span.complete("charged")
    >>> requests.post(url, headers=span.get_trace_context())

Batched HTTP delivery:
    >>> from spanlog import RemoteLogger, HttpxTransport
    >>>
    >>> log = RemoteLogger("billing", HttpxTransport(), {"url": "https://logs.example.com/ingest"})
    >>> log.info("invoice created")
    >>> await log.flush(force=True)  # nothing is flushed automatically at exit

Continuing a trace downstream:
    >>> from spanlog import trace_from_headers
    >>> root = log.create_root_trace_logger("handle", trace=trace_from_headers(request.headers))
"""

from __future__ import annotations

__version__ = "0.3.0"

# Backends
from .backends import (
    ConsoleLogger,
    DeliveryPolicy,
    HttpTarget,
    HttpTransport,
    HttpxTransport,
    RemoteBuffer,
    RemoteLogger,
)

# Core
from .core import LEVEL_NAMES, LEVELS, Backend, BaseLogger, Level, LoggerOptions, resolve_level

# Config
from .foundation.config import SpanlogSettings, clear_settings_cache, get_settings

# Errors
from .foundation.errors import ErrorCode, LoggerError, NameRequired, NoParentTrace, SpanlogException, UnimplementedBackend

# Runtime
from .runtime import listen_uncaught_exception, remove_uncaught_exception_listener
from .runtime.tracing import (
    TRACE_CONTEXT_HEADER,
    TRACE_PARENT_HEADER,
    TraceInfo,
    TraceStatus,
    new_span_id,
    new_trace_id,
    trace_from_headers,
)

__all__ = [
    "__version__",
    # Loggers
    "Backend", "BaseLogger", "ConsoleLogger", "RemoteLogger", "LoggerOptions",
    # Remote delivery
    "DeliveryPolicy", "HttpTarget", "HttpTransport", "HttpxTransport", "RemoteBuffer",
    # Levels
    "LEVELS", "LEVEL_NAMES", "Level", "resolve_level",
    # Tracing
    "TRACE_CONTEXT_HEADER", "TRACE_PARENT_HEADER", "TraceInfo", "TraceStatus",
    "new_span_id", "new_trace_id", "trace_from_headers",
    # Errors
    "ErrorCode", "LoggerError", "SpanlogException", "NameRequired", "NoParentTrace", "UnimplementedBackend",
    # Config
    "SpanlogSettings", "get_settings", "clear_settings_cache",
    # Process hooks
    "listen_uncaught_exception", "remove_uncaught_exception_listener",
]

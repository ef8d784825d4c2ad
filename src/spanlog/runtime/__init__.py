"""Runtime - tracing, process hooks and sync/async interop."""

from __future__ import annotations

from .hooks import (
    UncaughtExceptionListener,
    installed_listener,
    listen_uncaught_exception,
    remove_uncaught_exception_listener,
)

__all__ = [
    "UncaughtExceptionListener",
    "installed_listener",
    "listen_uncaught_exception",
    "remove_uncaught_exception_listener",
]

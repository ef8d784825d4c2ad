"""Concurrency helpers bridging synchronous log calls and asynchronous delivery."""

from .interop import background_loop, maybe_await, run_sync, shutdown_background_loop, spawn

__all__ = ["background_loop", "maybe_await", "run_sync", "shutdown_background_loop", "spawn"]

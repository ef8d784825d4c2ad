"""Shared fixtures: isolated settings, deterministic cleanup, captured streams."""

from __future__ import annotations

import os

import pytest

from spanlog import ConsoleLogger
from spanlog.foundation.config import clear_settings_cache
from spanlog.foundation.testing import CapturedStream
from spanlog.runtime import remove_uncaught_exception_listener
from spanlog.runtime.tracing import set_id_source


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch) -> object:
    """Drop SPANLOG_* env vars and reset process-wide state around each test."""
    for var in list(os.environ):
        if var.startswith("SPANLOG_"):
            monkeypatch.delenv(var)
    clear_settings_cache()
    yield
    clear_settings_cache()
    set_id_source(None)
    remove_uncaught_exception_listener()


@pytest.fixture
def stream() -> CapturedStream:
    return CapturedStream()


@pytest.fixture
def logger(stream: CapturedStream) -> ConsoleLogger:
    """General (non-traced) console logger writing both streams to `stream`."""
    return ConsoleLogger("general_logger_test", log_stream=stream, err_stream=stream)


@pytest.fixture
def root(logger: ConsoleLogger) -> ConsoleLogger:
    return logger.create_root_trace_logger("root_logger_test")

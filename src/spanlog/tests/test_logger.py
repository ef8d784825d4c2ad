"""Tests for BaseLogger behavior: filtering, records, trace derivation.

Exercised through ConsoleLogger with captured streams, since BaseLogger itself
has no backend.
"""

from __future__ import annotations

import os
import re
import socket
from datetime import UTC, datetime

import pytest

from spanlog import BaseLogger, ConsoleLogger, Level, TraceStatus
from spanlog.foundation.errors import ErrorCode, NameRequired, NoParentTrace, UnimplementedBackend
from spanlog.foundation.testing import CapturedStream
from spanlog.runtime.tracing import TRACE_CONTEXT_HEADER, TRACE_PARENT_HEADER

ROOT_ID = re.compile(r"^0x[0-9a-f]{32}$")
SPAN_ID = re.compile(r"^0x[0-9a-f]{16}$")


# ─────────────────────────────────────────────────────────────────────────────
# Construction
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("name", [None, ""])
def test_name_is_required(name: str | None) -> None:
    with pytest.raises(NameRequired) as exc_info:
        ConsoleLogger(name)
    assert str(exc_info.value) == "Missing mandatory parameter: name"
    assert exc_info.value.error.code is ErrorCode.NAME_REQUIRED


def test_base_logger_without_backend() -> None:
    """Every backend hook raises until a subclass supplies it."""
    log = BaseLogger("bare")
    with pytest.raises(UnimplementedBackend, match="emit") as exc_info:
        log.info("hello")
    assert exc_info.value.error.is_programming_error
    assert exc_info.value.error.logger_name == "bare"
    with pytest.raises(UnimplementedBackend, match="new_instance"):
        log.create_root_trace_logger("root")


@pytest.mark.asyncio
async def test_base_logger_flush_without_backend() -> None:
    with pytest.raises(UnimplementedBackend, match="flush"):
        await BaseLogger("bare").flush()


def test_default_min_level_is_info(logger: ConsoleLogger) -> None:
    assert logger.min_level is Level.INFO


def test_unknown_min_level_falls_back_to_info(stream: CapturedStream) -> None:
    log = ConsoleLogger("svc", min_level="loud", log_stream=stream)
    assert log.min_level is Level.INFO


def test_options_are_not_mutated(stream: CapturedStream) -> None:
    opts = {"min_level": "debug", "version": "1.0", "trace": {"id": "abc"}, "log_stream": stream}
    snapshot = {**opts, "trace": dict(opts["trace"])}
    log = ConsoleLogger("svc", **opts)
    log.create_root_trace_logger("root").create_child_trace_logger("child")
    assert opts == snapshot
    assert log.trace.current is not None


# ─────────────────────────────────────────────────────────────────────────────
# Filtering
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("min_level", list(Level))
@pytest.mark.parametrize("level", list(Level))
def test_level_filtering(min_level: Level, level: Level) -> None:
    """Exactly one record when level >= min_level, none otherwise."""
    stream = CapturedStream()
    log = ConsoleLogger("svc", min_level=min_level.label, log_stream=stream, err_stream=stream)
    getattr(log, level.label)("message")
    assert len(stream) == (1 if level >= min_level else 0)
    assert log.is_enabled_for(level) is (level >= min_level)


def test_info_logger_drops_debug(logger: ConsoleLogger, stream: CapturedStream) -> None:
    logger.debug("x")
    assert len(stream) == 0
    logger.info("y")
    assert len(stream) == 1
    assert stream.last["msg"] == "y"
    assert stream.last["level"] == 30


def test_log_with_unknown_level_counts_as_info(logger: ConsoleLogger, stream: CapturedStream) -> None:
    logger.log("loud", "hello")
    assert stream.last["level"] == 30


def test_warning_alias(logger: ConsoleLogger, stream: CapturedStream) -> None:
    logger.warning("careful")
    assert stream.last["level"] == 40


# ─────────────────────────────────────────────────────────────────────────────
# Records
# ─────────────────────────────────────────────────────────────────────────────

def test_record_default_fields(logger: ConsoleLogger, stream: CapturedStream) -> None:
    logger.info("hello", order_id=42)
    record = stream.last
    assert record["name"] == "general_logger_test"
    assert record["pid"] == os.getpid()
    assert record["hostname"] == socket.gethostname()
    assert record["v"] == "0"
    assert record["order_id"] == 42
    assert "trace" not in record


def test_version_is_written_as_v(stream: CapturedStream) -> None:
    ConsoleLogger("svc", version=3, log_stream=stream).info("hello")
    assert stream.last["v"] == "3"


def test_time_comes_from_clock(stream: CapturedStream) -> None:
    fixed = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    ConsoleLogger("svc", clock=lambda: fixed, log_stream=stream).info("hello")
    assert stream.last["time"] == "2024-01-02T03:04:05+00:00"


def test_caller_fields_win_over_defaults(logger: ConsoleLogger, stream: CapturedStream) -> None:
    logger.info("hello", hostname="elsewhere", name="renamed")
    assert stream.last["hostname"] == "elsewhere"
    assert stream.last["name"] == "renamed"


def test_non_json_fields_are_stringified(logger: ConsoleLogger, stream: CapturedStream) -> None:
    class Order:
        def __str__(self) -> str:
            return "Order#7"

    logger.info("hello", order=Order())
    assert stream.last["order"] == "Order#7"


# ─────────────────────────────────────────────────────────────────────────────
# Root trace loggers
# ─────────────────────────────────────────────────────────────────────────────

def test_plain_logger_has_no_trace(logger: ConsoleLogger) -> None:
    assert logger.trace is None
    assert logger.root_trace_id is None
    assert logger.current_trace_id is None


def test_root_trace_logger_ids(root: ConsoleLogger) -> None:
    assert ROOT_ID.match(root.root_trace_id)
    assert SPAN_ID.match(root.current_trace_id)
    assert root.trace.parent is None


def test_root_records_carry_trace(root: ConsoleLogger, stream: CapturedStream) -> None:
    root.info("hello")
    assert stream.last["trace"] == {"id": root.root_trace_id, "current": root.current_trace_id}
    assert stream.last["name"] == "root_logger_test"


def test_root_from_root_starts_new_tree(root: ConsoleLogger) -> None:
    other = root.create_root_trace_logger("other_root")
    assert other.root_trace_id != root.root_trace_id
    assert other.trace.parent is None


def test_root_with_explicit_trace(logger: ConsoleLogger) -> None:
    root = logger.create_root_trace_logger("root", trace={"id": 9999, "current": 8888})
    assert (root.root_trace_id, root.current_trace_id) == ("9999", "8888")


def test_root_inherits_options(stream: CapturedStream) -> None:
    log = ConsoleLogger("svc", min_level="debug", version="2.0", log_stream=stream)
    root = log.create_root_trace_logger("root")
    assert root.min_level is Level.DEBUG
    root.debug("hello")
    assert stream.last["v"] == "2.0"


def test_derived_min_level(logger: ConsoleLogger) -> None:
    assert logger.create_root_trace_logger("r", min_level="error").min_level is Level.ERROR
    assert logger.create_root_trace_logger("r", min_level="loud").min_level is Level.INFO


def test_root_requires_name(logger: ConsoleLogger) -> None:
    with pytest.raises(NameRequired):
        logger.create_root_trace_logger()


# ─────────────────────────────────────────────────────────────────────────────
# Child trace loggers
# ─────────────────────────────────────────────────────────────────────────────

def test_child_from_plain_logger(logger: ConsoleLogger) -> None:
    with pytest.raises(NoParentTrace) as exc_info:
        logger.create_child_trace_logger("child")
    assert str(exc_info.value) == "Can't create child trace logger from global logger."


def test_child_requires_name(root: ConsoleLogger) -> None:
    with pytest.raises(NameRequired):
        root.create_child_trace_logger()


def test_child_trace_links(root: ConsoleLogger, stream: CapturedStream) -> None:
    child = root.create_child_trace_logger("child_logger_test")
    assert child.root_trace_id == root.root_trace_id
    assert child.current_trace_id != root.current_trace_id
    assert child.trace.parent == root.current_trace_id
    child.info("working")
    assert stream.last["trace"] == {
        "id": root.root_trace_id,
        "current": child.current_trace_id,
        "parent": root.current_trace_id,
    }


def test_child_chain(root: ConsoleLogger) -> None:
    parent = root
    for depth in range(5):
        child = parent.create_child_trace_logger(f"span_{depth}")
        assert child.root_trace_id == root.root_trace_id
        assert child.trace.parent == parent.current_trace_id
        parent = child


def test_child_trace_override(root: ConsoleLogger) -> None:
    child = root.create_child_trace_logger("child", trace={"id": "1234", "current": "4321"})
    assert (child.root_trace_id, child.current_trace_id) == ("1234", "4321")
    assert child.trace.parent == root.current_trace_id


def test_child_inherits_min_level(stream: CapturedStream) -> None:
    root = ConsoleLogger("svc", min_level="warn", log_stream=stream).create_root_trace_logger("root")
    assert root.create_child_trace_logger("child").min_level is Level.WARN


# ─────────────────────────────────────────────────────────────────────────────
# Per-call trace, tags and span status
# ─────────────────────────────────────────────────────────────────────────────

def test_call_trace_and_tags(root: ConsoleLogger, stream: CapturedStream) -> None:
    root.info("hello", trace={"current": "manual"}, tags=["db", "slow"])
    assert stream.last["trace"]["current"] == "manual"
    assert stream.last["trace"]["tags"] == ["db", "slow"]
    assert root.current_trace_id != "manual"


def test_tags_on_plain_logger_are_ignored(logger: ConsoleLogger, stream: CapturedStream) -> None:
    logger.info("hello", tags=["a"])
    assert "trace" not in stream.last


@pytest.mark.parametrize("method, status", [("end", TraceStatus.END), ("complete", TraceStatus.COMPLETE)])
def test_span_status(root: ConsoleLogger, stream: CapturedStream, method: str, status: TraceStatus) -> None:
    child = root.create_child_trace_logger("child")
    getattr(child, method)("done", duration_ms=12)
    record = stream.last
    assert record["level"] == 30
    assert record["duration_ms"] == 12
    assert record["trace"]["status"] == status.value
    assert record["trace"]["current"] == child.current_trace_id


def test_span_status_ignores_min_level(stream: CapturedStream) -> None:
    root = ConsoleLogger("svc", min_level="error", log_stream=stream).create_root_trace_logger("root")
    root.info("dropped")
    root.complete("kept")
    assert [r["msg"] for r in stream.records] == ["kept"]


def test_span_status_on_plain_logger(logger: ConsoleLogger, stream: CapturedStream) -> None:
    logger.end("done")
    assert stream.last["msg"] == "done"
    assert "trace" not in stream.last


# ─────────────────────────────────────────────────────────────────────────────
# disable_trace_logging
# ─────────────────────────────────────────────────────────────────────────────

def test_disable_trace_logging(stream: CapturedStream) -> None:
    log = ConsoleLogger("svc", disable_trace_logging=True, log_stream=stream)
    root = log.create_root_trace_logger("root")
    child = root.create_child_trace_logger("child")
    root.info("a", tags=["t"])
    child.complete("b")
    assert all("trace" not in r for r in stream.records)
    assert child.root_trace_id == root.root_trace_id


# ─────────────────────────────────────────────────────────────────────────────
# Propagation headers
# ─────────────────────────────────────────────────────────────────────────────

def test_get_trace_context(root: ConsoleLogger) -> None:
    child = root.create_child_trace_logger("child")
    assert child.get_trace_context() == {
        TRACE_CONTEXT_HEADER: root.root_trace_id,
        TRACE_PARENT_HEADER: child.current_trace_id,
    }


def test_get_trace_context_extra_headers(stream: CapturedStream) -> None:
    log = ConsoleLogger("svc", headers={"x-tenant": "acme"}, log_stream=stream)
    headers = log.create_root_trace_logger("root").get_trace_context()
    assert headers["x-tenant"] == "acme"
    assert TRACE_CONTEXT_HEADER in headers


def test_get_trace_context_without_trace(logger: ConsoleLogger) -> None:
    with pytest.raises(NoParentTrace):
        logger.get_trace_context()

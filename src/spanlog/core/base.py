"""Base logger: level filtering, record assembly and trace derivation.

Concrete backends supply three hooks (see ``Backend``): ``emit`` writes a
finished record, ``flush`` delivers anything buffered, and ``new_instance``
builds a logger of the same backend for root/child derivation.

Quick Start:
    >>> from spanlog import ConsoleLogger
    >>>
    >>> logger = ConsoleLogger("checkout", min_level="debug", version="1.4.2")
    >>> logger.info("service started", port=8080)
    >>>
    >>> # Start a trace for an incoming request
    >>> root = logger.create_root_trace_logger("POST /orders")
    >>> root.info("validating order", order_id=42)
    >>>
    >>> # One span per unit of work
    >>> span = root.create_child_trace_logger("reserve_stock")
    >>> span.debug("querying inventory")
    >>> span.complete("stock reserved")
    >>>
    >>> # Continue the trace in a downstream service
    >>> headers = span.get_trace_context()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from spanlog.foundation.config import get_settings
from spanlog.foundation.errors import JsonDict, NameRequired, NoParentTrace, UnimplementedBackend
from spanlog.runtime import hooks
from spanlog.runtime.tracing import (
    TraceInfo,
    TraceLike,
    TraceStatus,
    as_trace,
    build_trace_object,
    derive_child,
    promote,
    trace_headers,
)

from .levels import Level, LevelLike, resolve_level
from .options import LoggerOptions
from .record import Clock, build_record, default_fields, utc_now

if TYPE_CHECKING:
    from spanlog.runtime.hooks import UncaughtExceptionListener


@runtime_checkable
class Backend(Protocol):
    """Hooks a concrete logger provides."""

    def emit(self, record: JsonDict, level: Level) -> None: ...
    async def flush(self, *, force: bool = False) -> object: ...
    def new_instance(self, name: str | None, options: JsonDict) -> BaseLogger: ...


class BaseLogger:
    """Abstract logger shared by all backends.

    Args:
        name: Mandatory logger name, written on every record
        **options: See LoggerOptions; unknown keys are kept for the backend
            and propagated to derived loggers

    Raises:
        NameRequired: name is empty or missing
    """

    __slots__ = ("_name", "_min_level", "_options", "_default_fields", "_trace", "_clock")

    def __init__(self, name: str | None = None, **options: Any) -> None:
        if not name:
            raise NameRequired.create()
        opts = LoggerOptions.model_validate(options)
        self._name = name
        self._min_level = resolve_level(opts.min_level, resolve_level(get_settings().logging.min_level))
        self._options = opts
        self._default_fields = default_fields(name, opts.version)
        self._trace: TraceInfo | None = promote(opts.trace) if opts.trace is not None else None
        self._clock: Clock = opts.extra("clock") or utc_now

    def __repr__(self) -> str:
        trace = f" trace={self._trace.id}/{self._trace.current}" if self._trace else ""
        return f"<{type(self).__name__} {self._name!r} min_level={self._min_level.label}{trace}>"

    # ─────────────────────────────────────────────────────────────────
    # Identity
    # ─────────────────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def min_level(self) -> Level:
        return self._min_level

    @property
    def options(self) -> JsonDict:
        """Options propagated to derived loggers (min_level and trace excluded)."""
        return self._options.retained()

    @property
    def default_fields(self) -> JsonDict:
        return dict(self._default_fields)

    @property
    def trace(self) -> TraceInfo | None:
        return self._trace

    @property
    def root_trace_id(self) -> str | None:
        return self._trace.id if self._trace else None

    @property
    def current_trace_id(self) -> str | None:
        return self._trace.current if self._trace else None

    # ─────────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────────

    def is_enabled_for(self, level: LevelLike) -> bool:
        return resolve_level(level) >= self._min_level

    def log(self, level: LevelLike, msg: Any, /, *, trace: TraceLike | None = None, tags: Any = None, **fields: Any) -> None:
        """Log at `level` (unknown level names count as info). Calls below min_level are dropped."""
        lvl = resolve_level(level)
        if lvl < self._min_level:
            return
        self.emit(self.create_record(lvl, msg, trace=trace, tags=tags, fields=fields), lvl)

    def verbose(self, msg: Any, /, **kw: Any) -> None: self.log(Level.VERBOSE, msg, **kw)
    def debug(self, msg: Any, /, **kw: Any) -> None: self.log(Level.DEBUG, msg, **kw)
    def info(self, msg: Any, /, **kw: Any) -> None: self.log(Level.INFO, msg, **kw)
    def warn(self, msg: Any, /, **kw: Any) -> None: self.log(Level.WARN, msg, **kw)
    def error(self, msg: Any, /, **kw: Any) -> None: self.log(Level.ERROR, msg, **kw)
    def fatal(self, msg: Any, /, **kw: Any) -> None: self.log(Level.FATAL, msg, **kw)

    warning = warn

    def end(self, msg: Any, /, *, trace: TraceLike | None = None, tags: Any = None, **fields: Any) -> None:
        """Info record marking the span as ended (trace.status = "end"). Not subject to min_level."""
        self._close_span(TraceStatus.END, msg, trace, tags, fields)

    def complete(self, msg: Any, /, *, trace: TraceLike | None = None, tags: Any = None, **fields: Any) -> None:
        """Info record marking the span as complete (trace.status = "complete"). Not subject to min_level."""
        self._close_span(TraceStatus.COMPLETE, msg, trace, tags, fields)

    def _close_span(self, status: TraceStatus, msg: Any, trace: TraceLike | None, tags: Any, fields: JsonDict) -> None:
        closing = (as_trace(trace) or TraceInfo()).merged({"status": status.value})
        self.emit(self.create_record(Level.INFO, msg, trace=closing, tags=tags, fields=fields), Level.INFO)

    def create_record(
        self,
        level: Level,
        msg: Any,
        *,
        trace: TraceLike | None = None,
        tags: Any = None,
        fields: JsonDict | None = None,
    ) -> JsonDict:
        """Assemble the record for one call (no filtering)."""
        record_trace = build_trace_object(self._trace, trace, tags, disabled=self._options.disable_trace_logging)
        return build_record(self._default_fields, level, msg, fields, record_trace, clock=self._clock)

    # ─────────────────────────────────────────────────────────────────
    # Backend hooks
    # ─────────────────────────────────────────────────────────────────

    def emit(self, record: JsonDict, level: Level) -> None:
        raise UnimplementedBackend.for_method("emit", logger_name=self._name)

    async def flush(self, *, force: bool = False) -> object:
        raise UnimplementedBackend.for_method("flush", logger_name=self._name)

    def new_instance(self, name: str | None, options: JsonDict) -> BaseLogger:
        raise UnimplementedBackend.for_method("new_instance", logger_name=self._name)

    # ─────────────────────────────────────────────────────────────────
    # Trace derivation
    # ─────────────────────────────────────────────────────────────────

    def _derived_options(self, min_level: LevelLike | None, options: JsonDict) -> JsonDict:
        level = resolve_level(min_level, self._min_level)
        return {**self._options.retained(), **options, "min_level": level.label}

    def create_root_trace_logger(self, name: str | None = None, /, *, min_level: LevelLike | None = None, **options: Any) -> BaseLogger:
        """Start a new trace tree.

        Fresh root and span ids are minted unless `trace` supplies them. Options
        of this logger are inherited; new options win. Callable on any logger.
        """
        merged = self._derived_options(min_level, options)
        if merged.get("trace") is None:
            merged["trace"] = {}
        return self.new_instance(name, merged)

    def create_child_trace_logger(
        self,
        name: str | None = None,
        /,
        *,
        min_level: LevelLike | None = None,
        trace: TraceLike | None = None,
        **options: Any,
    ) -> BaseLogger:
        """Open a span under this logger's trace.

        The child keeps the root id, records this logger's span as its parent and
        gets a fresh span id. `trace` fields override the derived ones.

        Raises:
            NoParentTrace: this logger carries no trace
        """
        if self._trace is None:
            raise NoParentTrace.create(logger_name=self._name)
        merged = self._derived_options(min_level, options)
        merged["trace"] = derive_child(self._trace, trace)
        return self.new_instance(name, merged)

    def get_trace_context(self) -> dict[str, str]:
        """Headers that let a downstream service continue this trace.

        Raises:
            NoParentTrace: this logger carries no trace
        """
        return trace_headers(self._trace, self._options.headers)

    def listen_uncaught_exception(self, exit_on_exception: bool = False) -> UncaughtExceptionListener:
        """Install the process-wide uncaught-exception listener (replaces any previous one)."""
        return hooks.listen_uncaught_exception(exit_on_exception)

"""Console backend: one JSON line per record, written immediately.

warn/error/fatal records go to the error stream, everything else to the log
stream. Streams are callables taking the JSON line or objects with ``write``
(stdout/stderr by default, looked up at write time).
"""

from __future__ import annotations

import sys
from typing import Any, Callable, TextIO

from spanlog.core import ERROR_STREAM_LEVELS, BaseLogger, Level, dumps
from spanlog.foundation.errors import JsonDict

LineWriter = Callable[[str], Any]
StreamLike = LineWriter | TextIO


def _stdout(line: str) -> None:
    print(line, file=sys.stdout)


def _stderr(line: str) -> None:
    print(line, file=sys.stderr)


def as_writer(stream: StreamLike | None, default: LineWriter) -> LineWriter:
    """Normalize a stream option to a callable taking one line."""
    if stream is None:
        return default
    if callable(stream):
        return stream
    if hasattr(stream, "write"):
        return lambda line: print(line, file=stream)  # type: ignore[arg-type]
    raise TypeError(f"Stream must be callable or have a write() method, got {type(stream).__name__}")


class ConsoleLogger(BaseLogger):
    """Logger writing JSON lines to a log stream and an error stream.

    Args:
        name: Mandatory logger name
        log_stream: Receives verbose/debug/info records (default: stdout)
        err_stream: Receives warn/error/fatal records (default: stderr)
        **options: See LoggerOptions

    Example:
        >>> lines: list[str] = []
        >>> log = ConsoleLogger("worker", log_stream=lines.append, err_stream=lines.append)
        >>> log.info("job picked up", job_id="j-1")
        >>> len(lines)
        1
    """

    __slots__ = ("_log_stream", "_err_stream")

    def __init__(
        self,
        name: str | None = None,
        *,
        log_stream: StreamLike | None = None,
        err_stream: StreamLike | None = None,
        **options: Any,
    ) -> None:
        # streams stay in the options so derived loggers write to the same place
        if log_stream is not None:
            options["log_stream"] = log_stream
        if err_stream is not None:
            options["err_stream"] = err_stream
        super().__init__(name, **options)
        self._log_stream = as_writer(self._options.extra("log_stream"), _stdout)
        self._err_stream = as_writer(self._options.extra("err_stream"), _stderr)

    def stream_for(self, level: Level) -> LineWriter:
        return self._err_stream if level in ERROR_STREAM_LEVELS else self._log_stream

    def emit(self, record: JsonDict, level: Level) -> None:
        self.stream_for(level)(dumps(record))

    async def flush(self, *, force: bool = False) -> None:
        """Nothing is buffered."""
        return None

    def new_instance(self, name: str | None, options: JsonDict) -> ConsoleLogger:
        return ConsoleLogger(name, **options)

"""Remote backend: buffer records and deliver them as one JSON array over HTTP.

Batching policy:
    - every record is encoded once and appended to a shared buffer with its size
    - flush() is an attempt: it only sends once the attempt counter reaches
      max_batch_count, or once the buffered size reaches max_payload_size
    - when an append pushes the size to max_payload_size a flush is triggered
      implicitly (as a task when a loop is running, on the shared background
      loop otherwise); only one is outstanding at a time and it does not count
      as an attempt
    - flush(force=True) sends whatever is buffered, e.g. at shutdown

Nothing is flushed automatically at process exit; call ``await logger.flush(force=True)``.

Every logger derived from a RemoteLogger (root or child) shares the buffer of
the logger it came from, so a span's records and its children's records are
delivered together.

Delivery policies:
    - OPTIMISTIC (default): the buffer is cleared before the post; a failed
      post loses the batch and the error propagates to the flush caller
    - REQUEUE: a failed or cancelled batch is put back at the front of the buffer before
      the error propagates
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Annotated, Any, Mapping, Protocol, runtime_checkable

import orjson
from pydantic import BaseModel, ConfigDict, Field

from spanlog.core import BaseLogger, Level, encode
from spanlog.foundation.config import get_settings
from spanlog.foundation.errors import JsonDict
from spanlog.runtime.concurrency import maybe_await, run_sync, spawn

logger = logging.getLogger("spanlog.remote")


@runtime_checkable
class HttpTransport(Protocol):
    """Capability used to deliver batches. post() may return a value or an awaitable."""

    def post(self, url: str, payload: str, options: Any) -> Any: ...


class HttpTarget(BaseModel):
    """Where batches are posted: url plus transport-specific request options."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    url: Annotated[str, Field(min_length=1)]
    options: Any = None

    @classmethod
    def of(cls, target: HttpTarget | Mapping[str, Any] | str) -> HttpTarget:
        match target:
            case HttpTarget(): return target
            case str(): return cls(url=target)
            case _: return cls.model_validate(dict(target))


class DeliveryPolicy(StrEnum):
    """What happens to a batch whose post fails."""

    OPTIMISTIC = "optimistic"
    REQUEUE = "requeue"


@dataclass(slots=True)
class RemoteBuffer:
    """Outbound queue shared by a remote logger and everything derived from it.

    Records are kept encoded, so the delivered payload is exactly what was
    measured at append time even if a caller later mutates a logged object.
    Append, size accounting, take-and-clear and requeue happen under one lock, so
    a flush never sees a half-appended record and no record is sent twice or lost
    across a flush boundary.
    """

    transport: HttpTransport
    target: HttpTarget
    max_batch_count: int = 10
    max_payload_size: int = 100_000
    delivery: DeliveryPolicy = DeliveryPolicy.OPTIMISTIC
    _chunks: list[bytes] = field(default_factory=list, init=False)
    _size: int = field(default=0, init=False)
    _flush_counter: int = field(default=0, init=False)
    _size_flush_scheduled: bool = field(default=False, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _pending: set[asyncio.Task[Any]] = field(default_factory=set, init=False, repr=False)

    @property
    def records(self) -> list[JsonDict]:
        """Snapshot of buffered records in emission order."""
        with self._lock:
            chunks = list(self._chunks)
        return [orjson.loads(chunk) for chunk in chunks]

    @property
    def size(self) -> int:
        """Sum of the encoded lengths of buffered records, in bytes."""
        return self._size

    @property
    def flush_counter(self) -> int:
        return self._flush_counter

    @property
    def pending(self) -> int:
        """Implicit flushes still in flight."""
        return len(self._pending)

    def __len__(self) -> int:
        return len(self._chunks)

    def append(self, record: JsonDict) -> bool:
        """Buffer a record.

        Returns True when the payload size threshold is reached and no
        size-triggered flush is outstanding; the caller then owes one flush_later().
        """
        chunk = encode(record)
        with self._lock:
            self._chunks.append(chunk)
            self._size += len(chunk)
            if self._size < self.max_payload_size or self._size_flush_scheduled:
                return False
            self._size_flush_scheduled = True
            return True

    def _take(self, force: bool, *, count: bool = True) -> tuple[list[bytes], int] | None:
        with self._lock:
            if count:
                self._flush_counter += 1
            if not (force or self._flush_counter >= self.max_batch_count or self._size >= self.max_payload_size):
                return None
            self._flush_counter = 0
            batch, size = self._chunks, self._size
            self._chunks, self._size = [], 0
            return batch, size

    def _requeue(self, batch: list[bytes], size: int) -> None:
        with self._lock:
            self._chunks[:0] = batch
            self._size += size

    async def flush(self, *, force: bool = False) -> Any:
        """Attempt delivery; returns the transport result, or None when nothing was sent."""
        return await self._deliver(self._take(force))

    async def _flush_for_size(self) -> Any:
        # not a caller attempt: leaves the flush counter alone
        try:
            return await self._deliver(self._take(False, count=False))
        finally:
            with self._lock:
                self._size_flush_scheduled = False

    async def _deliver(self, taken: tuple[list[bytes], int] | None) -> Any:
        if taken is None or not taken[0]:
            return None
        batch, size = taken
        payload = (b"[" + b",".join(batch) + b"]").decode()
        try:
            result = await maybe_await(self.transport.post(self.target.url, payload, self.target.options))
        except (Exception, asyncio.CancelledError) as e:
            if self.delivery is DeliveryPolicy.REQUEUE:
                self._requeue(batch, size)
                logger.warning("delivery of %d records to %s failed, requeued: %r", len(batch), self.target.url, e)
            else:
                logger.error("delivery of %d records to %s failed, batch dropped: %r", len(batch), self.target.url, e)
            raise
        logger.debug("delivered %d records (%d bytes) to %s", len(batch), len(payload), self.target.url)
        return result

    def flush_later(self) -> None:
        """Trigger a size-driven flush without blocking the caller on a running loop."""
        spawn(self._flush_for_size(), self._pending, self._report)

    async def drain(self) -> None:
        """Wait for implicit flushes still in flight."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _report(self, exc: BaseException) -> None:
        logger.error("implicit flush to %s failed: %s", self.target.url, exc)


class RemoteLogger(BaseLogger):
    """Logger that batches records and posts them to an HTTP endpoint.

    Args:
        name: Mandatory logger name
        transport: Object with post(url, payload, options); payload is a JSON array string
        target: HttpTarget, {"url": ..., "options": ...} mapping, or a bare url
        max_batch_count: Flush attempts before a batch is sent (default from settings, 10)
        max_payload_size: Buffered bytes that force a send (default from settings, 100000)
        delivery: DeliveryPolicy for failed posts (default from settings, optimistic)
        buffer: Share an existing buffer instead of creating one (used by derived loggers)
        **options: See LoggerOptions

    Example:
        >>> log = RemoteLogger("api", transport, {"url": "https://logs.example.com/ingest"})
        >>> root = log.create_root_trace_logger("GET /users")
        >>> root.info("request received")
        >>> await log.flush(force=True)
    """

    __slots__ = ("_buffer",)

    def __init__(
        self,
        name: str | None = None,
        transport: HttpTransport | None = None,
        target: HttpTarget | Mapping[str, Any] | str | None = None,
        *,
        max_batch_count: int | None = None,
        max_payload_size: int | None = None,
        delivery: DeliveryPolicy | str | None = None,
        buffer: RemoteBuffer | None = None,
        **options: Any,
    ) -> None:
        super().__init__(name, **options)
        if buffer is None:
            if transport is None or target is None:
                raise ValueError("RemoteLogger requires a transport and a target unless a buffer is shared")
            settings = get_settings().remote
            buffer = RemoteBuffer(
                transport=transport,
                target=HttpTarget.of(target),
                max_batch_count=settings.max_batch_count if max_batch_count is None else max_batch_count,
                max_payload_size=settings.max_payload_size if max_payload_size is None else max_payload_size,
                delivery=DeliveryPolicy(settings.delivery if delivery is None else delivery),
            )
        self._buffer = buffer

    @property
    def buffer(self) -> RemoteBuffer:
        return self._buffer

    def emit(self, record: JsonDict, level: Level) -> None:
        if self._buffer.append(record):
            self._buffer.flush_later()

    async def flush(self, *, force: bool = False) -> Any:
        return await self._buffer.flush(force=force)

    def flush_sync(self, *, force: bool = False) -> Any:
        """Blocking flush for code without an event loop."""
        return run_sync(self._buffer.flush(force=force))

    async def drain(self) -> None:
        await self._buffer.drain()

    def new_instance(self, name: str | None, options: JsonDict) -> RemoteLogger:
        return RemoteLogger(name, buffer=self._buffer, **options)

"""Sync/async interoperability for log delivery.

Log calls are synchronous, delivery is a coroutine. These helpers bridge the two:
    - run_sync: Run a coroutine to completion from sync code
    - spawn: Schedule a coroutine on the running loop, or run it inline when there is none
    - maybe_await: Await a value only if it is awaitable (sync or async transports)

Sync entry points all run on one long-lived background loop, so transports that
hold loop-bound resources (an httpx.AsyncClient) keep working across calls.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from typing import TYPE_CHECKING, Callable, Coroutine, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")

_background_loop: asyncio.AbstractEventLoop | None = None
_background_thread: threading.Thread | None = None
_loop_lock = threading.Lock()


def _serve(loop: asyncio.AbstractEventLoop) -> None:
    asyncio.set_event_loop(loop)
    try:
        loop.run_forever()
    finally:
        loop.close()


def background_loop() -> asyncio.AbstractEventLoop:
    """Get or start the shared loop running on a daemon thread."""
    global _background_loop, _background_thread
    if _background_loop is None:
        with _loop_lock:
            if _background_loop is None:
                loop = asyncio.new_event_loop()
                _background_thread = threading.Thread(target=_serve, args=(loop,), name="spanlog-loop", daemon=True)
                _background_thread.start()
                _background_loop = loop
    return _background_loop


def shutdown_background_loop() -> None:
    """Stop and close the shared loop; the next sync call starts a fresh one."""
    global _background_loop, _background_thread
    with _loop_lock:
        loop, thread = _background_loop, _background_thread
        _background_loop = _background_thread = None
    if loop is None or thread is None:
        return
    loop.call_soon_threadsafe(loop.stop)
    thread.join()


def run_sync(coro: Coroutine[object, object, T]) -> T:
    """Run async coroutine from synchronous context.

    The coroutine runs on the shared background loop and the caller blocks on
    the result. This works with or without a loop running in the calling thread,
    except on the background loop itself, where the coroutine must be awaited.
    """
    loop = background_loop()
    try:
        running = asyncio.get_running_loop()
    except RuntimeError:
        running = None
    if running is loop:
        coro.close()
        raise RuntimeError("run_sync() can't block the spanlog background loop; await the coroutine instead")
    return asyncio.run_coroutine_threadsafe(coro, loop).result()


def spawn(
    coro: Coroutine[object, object, T],
    pending: set[asyncio.Task[T]],
    on_error: Callable[[BaseException], None],
) -> asyncio.Task[T] | None:
    """Fire-and-forget a coroutine.

    With a running loop the coroutine becomes a task tracked in `pending` until
    done, so callers can await outstanding work. Without one it runs inline.
    Errors are reported to `on_error` instead of surfacing at the call site.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        try:
            run_sync(coro)
        except Exception as e:
            on_error(e)
        return None

    task = loop.create_task(coro)
    pending.add(task)

    def _done(t: asyncio.Task[T]) -> None:
        pending.discard(t)
        if not t.cancelled() and (exc := t.exception()) is not None:
            on_error(exc)

    task.add_done_callback(_done)
    return task


async def maybe_await(value: T | Awaitable[T]) -> T:
    """Await awaitables, pass plain values through."""
    if inspect.isawaitable(value):
        return await value  # type: ignore[no-any-return]
    return value  # type: ignore[return-value]

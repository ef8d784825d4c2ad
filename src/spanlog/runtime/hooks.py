"""Process-wide uncaught-exception listener.

There is a single owner: installing a listener replaces the previous one
instead of stacking. The listener chains to whatever hooks were in place when it
was installed (so tracebacks still print and other libraries' hooks still run)
and, when asked to, terminates the process after a grace delay so in-flight log
deliveries (remote flushes) get a chance to finish.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from spanlog.foundation.config import get_settings

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger("spanlog.hooks")

ExceptHook = Callable[[type[BaseException], BaseException, "TracebackType | None"], object]
ThreadingExceptHook = Callable[[threading.ExceptHookArgs], object]

_lock = threading.Lock()
_installed: UncaughtExceptionListener | None = None


@dataclass(slots=True)
class UncaughtExceptionListener:
    """Handler installed on sys.excepthook and threading.excepthook.

    Args:
        exit_on_exception: Schedule process exit after an uncaught exception
        grace_seconds: Delay before exit
        exit_code: Process exit status
        exit: Terminates the process (os._exit by default)
        chained_excepthook: sys.excepthook called before this listener
        chained_threading_excepthook: threading.excepthook called before this listener
    """

    exit_on_exception: bool = False
    grace_seconds: float = 5.0
    exit_code: int = 10
    exit: Callable[[int], None] = os._exit
    chained_excepthook: ExceptHook = sys.__excepthook__
    chained_threading_excepthook: ThreadingExceptHook = threading.__excepthook__
    _timer: threading.Timer | None = field(default=None, init=False, repr=False)

    @property
    def exit_scheduled(self) -> bool:
        return self._timer is not None

    def handle(self, exc_type: type[BaseException], exc: BaseException, tb: TracebackType | None) -> None:
        logger.critical("uncaught exception: %s: %s", exc_type.__name__, exc)
        if not self.exit_on_exception or self._timer is not None:
            return
        self._timer = threading.Timer(self.grace_seconds, self.exit, args=(self.exit_code,))
        self._timer.name = "spanlog-exit"
        self._timer.start()

    def cancel(self) -> None:
        """Cancel a scheduled exit."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _excepthook(self, exc_type: type[BaseException], exc: BaseException, tb: TracebackType | None) -> None:
        self.chained_excepthook(exc_type, exc, tb)
        self.handle(exc_type, exc, tb)

    def _threading_excepthook(self, args: threading.ExceptHookArgs) -> None:
        self.chained_threading_excepthook(args)
        # SystemExit only ends the thread
        if args.exc_value is None or issubclass(args.exc_type, SystemExit):
            return
        self.handle(args.exc_type, args.exc_value, args.exc_traceback)


def listen_uncaught_exception(
    exit_on_exception: bool = False,
    *,
    grace_seconds: float | None = None,
    exit_code: int | None = None,
    exit: Callable[[int], None] | None = None,
) -> UncaughtExceptionListener:
    """Install the process-wide listener, replacing any previous one.

    The hooks current at install time are chained; a replaced listener's own
    hooks are skipped in favor of the ones it was chaining to.
    """
    global _installed
    settings = get_settings().tracing
    with _lock:
        prev_hook, prev_threading_hook = sys.excepthook, threading.excepthook
        if _installed is not None:
            _installed.cancel()
            if prev_hook == _installed._excepthook:
                prev_hook = _installed.chained_excepthook
            if prev_threading_hook == _installed._threading_excepthook:
                prev_threading_hook = _installed.chained_threading_excepthook
        listener = UncaughtExceptionListener(
            exit_on_exception=exit_on_exception,
            grace_seconds=settings.exit_grace_seconds if grace_seconds is None else grace_seconds,
            exit_code=settings.exit_code if exit_code is None else exit_code,
            exit=exit or os._exit,
            chained_excepthook=prev_hook,
            chained_threading_excepthook=prev_threading_hook,
        )
        _installed = listener
        sys.excepthook = listener._excepthook
        threading.excepthook = listener._threading_excepthook
    return listener


def remove_uncaught_exception_listener() -> None:
    """Uninstall the listener and restore the hooks it was chaining to."""
    global _installed
    with _lock:
        if _installed is None:
            return
        _installed.cancel()
        if sys.excepthook == _installed._excepthook:
            sys.excepthook = _installed.chained_excepthook
        if threading.excepthook == _installed._threading_excepthook:
            threading.excepthook = _installed.chained_threading_excepthook
        _installed = None


def installed_listener() -> UncaughtExceptionListener | None:
    return _installed

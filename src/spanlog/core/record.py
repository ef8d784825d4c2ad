"""Log record assembly and JSON encoding.

Precedence, lowest to highest: logger defaults (name, pid, hostname, v) <
time/level/msg < caller fields. The ``trace`` field is computed separately and
can't be overridden by caller fields.
"""

from __future__ import annotations

import os
import socket
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any, Callable, Mapping

import orjson

from spanlog.foundation.errors import JsonDict
from spanlog.runtime.tracing import TraceInfo

from .levels import Level

Clock = Callable[[], datetime]

_ORJSON_OPTS = orjson.OPT_NON_STR_KEYS


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


@lru_cache(maxsize=1)
def _hostname() -> str:
    return socket.gethostname()


def default_fields(name: str, version: str) -> JsonDict:
    """Fields written on every record of a logger."""
    return {"name": name, "pid": os.getpid(), "hostname": _hostname(), "v": version}


def build_record(
    defaults: Mapping[str, Any],
    level: Level,
    msg: Any,
    fields: Mapping[str, Any] | None = None,
    trace: TraceInfo | None = None,
    *,
    clock: Clock = utc_now,
) -> JsonDict:
    record: JsonDict = {**defaults, "time": clock(), "level": int(level), "msg": msg, **(fields or {})}
    record.pop("trace", None)
    if trace is not None:
        record["trace"] = trace.as_dict()
    return record


def encode(obj: Any) -> bytes:
    """JSON-encode a record or a batch; unknown types fall back to str()."""
    return orjson.dumps(obj, default=str, option=_ORJSON_OPTS)


def dumps(obj: Any) -> str:
    return encode(obj).decode()

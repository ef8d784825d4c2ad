"""Trace and span id generation.

Ids use a single scheme: ``0x`` followed by fixed-width lowercase hex digits
(32 for root trace ids, 16 for span ids). They are opaque strings, safe in JSON
and HTTP headers.
"""

from __future__ import annotations

import secrets
from typing import Callable

ROOT_ID_WIDTH = 32
SPAN_ID_WIDTH = 16

# Random source: takes a bit count, returns a non-negative int below 2**bits
IdSource = Callable[[int], int]

_id_source: IdSource = secrets.randbits


def hex_id(width: int, *, randbits: IdSource | None = None) -> str:
    """Random id of `width` hex digits, prefixed with 0x."""
    return f"0x{(randbits or _id_source)(width * 4):0{width}x}"


def new_trace_id() -> str:
    return hex_id(ROOT_ID_WIDTH)


def new_span_id() -> str:
    return hex_id(SPAN_ID_WIDTH)


def set_id_source(source: IdSource | None) -> IdSource:
    """Replace the random source used for ids (None restores the default). Returns the previous one."""
    global _id_source
    previous, _id_source = _id_source, source or secrets.randbits
    return previous

"""Tracing module: trace fields, id generation and header propagation."""

from .context import (
    TRACE_CONTEXT_HEADER,
    TRACE_PARENT_HEADER,
    TraceInfo,
    TraceLike,
    TraceStatus,
    as_trace,
    build_trace_object,
    derive_child,
    promote,
    trace_from_headers,
    trace_headers,
)
from .ids import ROOT_ID_WIDTH, SPAN_ID_WIDTH, IdSource, hex_id, new_span_id, new_trace_id, set_id_source

__all__ = [
    # Context
    "TraceInfo",
    "TraceLike",
    "TraceStatus",
    "as_trace",
    "build_trace_object",
    "derive_child",
    "promote",
    # Propagation
    "TRACE_CONTEXT_HEADER",
    "TRACE_PARENT_HEADER",
    "trace_from_headers",
    "trace_headers",
    # Ids
    "IdSource",
    "ROOT_ID_WIDTH",
    "SPAN_ID_WIDTH",
    "hex_id",
    "new_span_id",
    "new_trace_id",
    "set_id_source",
]

"""Trace context model: the trace fields a logger carries and how they derive.

A trace tree shares one root ``id``. Each logger instance in the tree owns a
``current`` span id; child loggers record their parent's ``current`` as
``parent``. Per-call overrides merge on top of the logger's stored trace.

Propagation across processes uses two headers:
    x-cloud-trace-context: root trace id
    x-trace-parent-id:     span id of the calling logger
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict

from spanlog.foundation.errors import JsonDict, NoParentTrace

from .ids import new_span_id, new_trace_id

TRACE_CONTEXT_HEADER = "x-cloud-trace-context"
TRACE_PARENT_HEADER = "x-trace-parent-id"


class TraceStatus(StrEnum):
    """Markers written on trace.status when a span closes."""

    END = "end"
    COMPLETE = "complete"


class TraceInfo(BaseModel):
    """Trace fields attached to records. Immutable; merging returns a new instance.

    Attributes:
        id: Root trace id, shared by the whole tree
        current: Span id of the emitting logger
        parent: Span id of the logger this one was derived from
        tags: Arbitrary caller tags
        status: Span close marker (see TraceStatus)

    Extra keys supplied by callers are kept and serialized as-is.
    """

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    id: str | None = None
    current: str | None = None
    parent: str | None = None
    tags: Any = None
    status: str | None = None

    def as_dict(self) -> JsonDict:
        """Fields that are set, including extras."""
        return self.model_dump(exclude_none=True)

    def merged(self, override: TraceLike | None) -> TraceInfo:
        """New trace with override fields winning field-by-field."""
        if not override:
            return self
        return TraceInfo(**{**self.as_dict(), **_as_dict(override)})


TraceLike = TraceInfo | Mapping[str, Any]


def _as_dict(trace: TraceLike | None) -> JsonDict:
    match trace:
        case None: return {}
        case TraceInfo(): return trace.as_dict()
        case _: return {k: v for k, v in trace.items() if v is not None}


def as_trace(trace: TraceLike | None) -> TraceInfo | None:
    """Coerce a mapping to TraceInfo (copying it); None stays None."""
    if trace is None or isinstance(trace, TraceInfo):
        return trace
    return TraceInfo(**_as_dict(trace))


def promote(trace: TraceLike | None = None) -> TraceInfo:
    """Full TraceInfo from a partial one, minting any missing id/current."""
    fields = _as_dict(trace)
    fields["id"] = fields.get("id") or new_trace_id()
    fields["current"] = fields.get("current") or new_span_id()
    return TraceInfo(**fields)


def derive_child(parent: TraceInfo, override: TraceLike | None = None) -> TraceInfo:
    """Trace for a child span: same id, parent = parent's current, fresh current.

    Override fields win, so callers may force a specific id or current.
    """
    fields = parent.as_dict()
    fields["parent"] = fields.pop("current", None)
    fields.update(_as_dict(override))
    return promote(fields)


def build_trace_object(
    logger_trace: TraceInfo | None,
    call_trace: TraceLike | None = None,
    call_tags: Any = None,
    *,
    disabled: bool = False,
) -> TraceInfo | None:
    """Trace to attach to a single record, or None when the record gets no trace.

    None when tracing is disabled, when nothing is left to write, or when the
    logger was never part of a trace tree (no root id).
    """
    if disabled:
        return None
    fields = {**_as_dict(logger_trace), **_as_dict(call_trace)}
    tags = call_tags if call_tags is not None else fields.get("tags")
    if not fields and tags is None:
        return None
    if logger_trace is None or not logger_trace.id:
        return None
    if tags is not None:
        fields["tags"] = tags
    return TraceInfo(**fields)


def trace_headers(trace: TraceInfo | None, extra: Mapping[str, str] | None = None) -> dict[str, str]:
    """Propagation headers for outbound requests. Extra headers are merged last."""
    if trace is None or not trace.id:
        raise NoParentTrace.create("Can't build trace context headers from a logger without trace.")
    headers = {TRACE_CONTEXT_HEADER: trace.id}
    if trace.current:
        headers[TRACE_PARENT_HEADER] = trace.current
    return {**headers, **(extra or {})}


def trace_from_headers(headers: Mapping[str, str]) -> TraceInfo | None:
    """Continue an upstream trace from inbound request headers.

    Returns a partial trace (id + parent) suitable as the ``trace`` option of a
    root logger, or None when the request carries no trace.
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    if not (trace_id := lowered.get(TRACE_CONTEXT_HEADER)):
        return None
    return TraceInfo(id=trace_id, parent=lowered.get(TRACE_PARENT_HEADER) or None)

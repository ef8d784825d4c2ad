"""Logger options: validated, frozen copy of what the caller passed.

Backend-specific keys (console streams, for example) are accepted as extras and
propagate to derived loggers with the rest of the retained options.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spanlog.foundation.config import get_settings
from spanlog.foundation.errors import JsonDict
from spanlog.runtime.tracing import TraceInfo, as_trace

# Consumed by the logger itself, never propagated verbatim
_CONSUMED = frozenset({"min_level", "trace"})


class LoggerOptions(BaseModel):
    """Recognized logger options.

    Attributes:
        min_level: Level name below which calls are dropped (falls back to settings, then info)
        version: Service version written as 'v' on every record
        disable_trace_logging: Omit the trace field from records
        trace: Explicit trace; missing id/current are minted by the logger
        headers: Extra headers merged into get_trace_context()
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        arbitrary_types_allowed=True,
        coerce_numbers_to_str=True,
    )

    min_level: Any = None
    version: str = Field(default_factory=lambda: get_settings().logging.version)
    disable_trace_logging: bool = Field(default_factory=lambda: get_settings().tracing.disabled)
    trace: TraceInfo | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("trace", mode="before")
    @classmethod
    def _coerce_trace(cls, v: object) -> object:
        return as_trace(v) if isinstance(v, dict) else v

    @field_validator("version", mode="before")
    @classmethod
    def _falsy_version(cls, v: object) -> object:
        return "0" if v is None or v == "" else v

    def retained(self) -> JsonDict:
        """Options kept for propagation to derived loggers (shallow copy, extras included)."""
        kept = {name: getattr(self, name) for name in type(self).model_fields if name not in _CONSUMED}
        kept["headers"] = dict(self.headers)
        return {**kept, **(self.model_extra or {})}

    def extra(self, key: str, default: Any = None) -> Any:
        """Backend-specific option by key."""
        return (self.model_extra or {}).get(key, default)

"""Level table: level names <-> numeric severities.

Resolution is deliberately permissive: an unknown name never raises, it falls
back to the supplied default.
"""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


class Level(IntEnum):
    """Record severities, lowest to highest."""

    VERBOSE = 10
    DEBUG = 20
    INFO = 30
    WARN = 40
    ERROR = 50
    FATAL = 60

    @property
    def label(self) -> str:
        """Lowercase level name as used in options and method names."""
        return self.name.lower()


LEVELS: Mapping[str, int] = MappingProxyType({lvl.label: lvl.value for lvl in Level})
LEVEL_NAMES: Mapping[int, str] = MappingProxyType({lvl.value: lvl.label for lvl in Level})

# Levels written to the error stream by the console backend
ERROR_STREAM_LEVELS: frozenset[Level] = frozenset({Level.WARN, Level.ERROR, Level.FATAL})

LevelLike = Level | str | int


def is_level(value: object) -> bool:
    """Whether value names (or is) one of the known levels."""
    match value:
        case Level(): return True
        case bool(): return False
        case int(): return value in LEVEL_NAMES
        case str(): return value.strip().lower() in LEVELS
        case _: return False


def resolve_level(value: object, default: Level = Level.INFO) -> Level:
    """Resolve a level name, severity or Level; unknown values return default."""
    if not is_level(value):
        return default
    if isinstance(value, str):
        return Level(LEVELS[value.strip().lower()])
    return Level(value)  # type: ignore[arg-type]


def level_name(severity: int) -> str | None:
    """Level name for a severity, None for unknown severities."""
    return LEVEL_NAMES.get(severity)

"""Core - level table, options, record assembly and the base logger."""

from .base import Backend, BaseLogger
from .levels import ERROR_STREAM_LEVELS, LEVEL_NAMES, LEVELS, Level, LevelLike, is_level, level_name, resolve_level
from .options import LoggerOptions
from .record import build_record, default_fields, dumps, encode, utc_now

__all__ = [
    # Logger
    "Backend", "BaseLogger", "LoggerOptions",
    # Levels
    "ERROR_STREAM_LEVELS", "LEVELS", "LEVEL_NAMES", "Level", "LevelLike", "is_level", "level_name", "resolve_level",
    # Records
    "build_record", "default_fields", "dumps", "encode", "utc_now",
]

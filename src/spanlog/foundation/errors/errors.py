"""Typed failures for logger misuse.

Every failure carries a frozen ``LoggerError`` with a machine-readable ``ErrorCode``
so callers can branch on the kind without string matching.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ErrorCode(StrEnum):
    """Error kinds raised by spanlog."""
    NAME_REQUIRED = "NAME_REQUIRED"
    NO_PARENT_TRACE = "NO_PARENT_TRACE"
    UNIMPLEMENTED_BACKEND = "UNIMPLEMENTED_BACKEND"


class LoggerError(BaseModel):
    """Structured description of a logger failure.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error kind
        logger_name: Name of the logger involved, when known
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "title": "Logger Error",
            "examples": [{"message": "Missing mandatory parameter: name", "code": "NAME_REQUIRED"}],
        },
    )

    message: Annotated[str, Field(min_length=1)]
    code: ErrorCode
    logger_name: str | None = None

    @computed_field
    @property
    def is_programming_error(self) -> bool:
        """Misuse that should be fixed in code rather than handled at runtime."""
        return self.code == ErrorCode.UNIMPLEMENTED_BACKEND

    def render(self) -> str:
        where = f" (logger={self.logger_name})" if self.logger_name else ""
        return f"{self.message}{where}"


class SpanlogException(Exception):
    """Base exception wrapping a LoggerError."""

    __slots__ = ("error",)

    code: ClassVar[ErrorCode]
    default_message: ClassVar[str] = ""

    def __init__(self, error: LoggerError) -> None:
        self.error = error
        super().__init__(error.message)

    @classmethod
    def create(cls, message: str | None = None, *, logger_name: str | None = None) -> Self:
        return cls(LoggerError(message=message or cls.default_message, code=cls.code, logger_name=logger_name))


class NameRequired(SpanlogException):
    """A logger was constructed without a non-empty name."""

    code = ErrorCode.NAME_REQUIRED
    default_message = "Missing mandatory parameter: name"


class NoParentTrace(SpanlogException):
    """A trace-only operation was called on a logger that carries no trace."""

    code = ErrorCode.NO_PARENT_TRACE
    default_message = "Can't create child trace logger from global logger."


class UnimplementedBackend(SpanlogException):
    """A backend hook was not supplied by the concrete logger class."""

    code = ErrorCode.UNIMPLEMENTED_BACKEND
    default_message = "Unimplemented backend method"

    @classmethod
    def for_method(cls, method: str, *, logger_name: str | None = None) -> Self:
        return cls.create(f"Unimplemented backend method: {method}", logger_name=logger_name)

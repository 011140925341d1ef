"""Whatsupdoc error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Source parsing
- 9xxx: Internal

Structural problems inside a documentation comment (unknown tags, unmatched
braces, malformed ``@param`` text) are never raised. They are recorded as
diagnostic strings on the owning document instead.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Source parsing (3xxx)
    SOURCE_SYNTAX_ERROR = 3001
    SOURCE_UNSUPPORTED = 3002
    SOURCE_GRAMMAR_UNAVAILABLE = 3003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class WhatsupdocError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(WhatsupdocError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class SourceParseError(WhatsupdocError):
    """The external parser could not produce a usable syntax tree."""

    @classmethod
    def syntax_error(
        cls, source: str | None, error_count: int, line: int | None
    ) -> "SourceParseError":
        where = source or "<source>"
        return cls(
            code=ErrorCode.SOURCE_SYNTAX_ERROR,
            message=f"Syntax errors in {where} ({error_count} error nodes, first at line {line})",
            details={"source": source, "error_count": error_count, "line": line},
        )

    @classmethod
    def unsupported(cls, path: str) -> "SourceParseError":
        return cls(
            code=ErrorCode.SOURCE_UNSUPPORTED,
            message=f"Unsupported source file: {path}",
            details={"path": path},
        )

    @classmethod
    def grammar_unavailable(cls, module: str) -> "SourceParseError":
        return cls(
            code=ErrorCode.SOURCE_GRAMMAR_UNAVAILABLE,
            message=f"Grammar module not installed: {module}",
            details={"module": module},
        )


class InternalError(WhatsupdocError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

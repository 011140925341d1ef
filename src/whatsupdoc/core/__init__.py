"""Core module exports."""

from whatsupdoc.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    SourceParseError,
    WhatsupdocError,
)
from whatsupdoc.core.logging import (
    clear_current_source,
    configure_logging,
    get_current_source,
    get_logger,
    set_current_source,
)

__all__ = [
    # Errors
    "WhatsupdocError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "SourceParseError",
    # Logging
    "clear_current_source",
    "configure_logging",
    "get_current_source",
    "get_logger",
    "set_current_source",
]

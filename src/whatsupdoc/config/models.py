"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (WHATSUPDOC__SECTION__KEY)
3. Project YAML (.whatsupdoc.yaml in the config root)
4. Global YAML (~/.config/whatsupdoc/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    WHATSUPDOC__<SECTION>__<KEY>=<VALUE>

Examples:
    WHATSUPDOC__LOGGING__LEVEL=DEBUG
    WHATSUPDOC__PARSER__TAB_WIDTH=8
    WHATSUPDOC__PARSER__MAX_WORKERS=1
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from whatsupdoc.config.constants import TAB_WIDTH_MAX, TAB_WIDTH_MIN

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        WHATSUPDOC__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG reports every declaration and binding.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ParserConfig(BaseModel):
    """Documentation extraction configuration.

    Env vars:
        WHATSUPDOC__PARSER__TAB_WIDTH: Columns per tab stop when trimming margins
        WHATSUPDOC__PARSER__ALLOW_SYNTAX_ERRORS: Document files tree-sitter only partially parsed
        WHATSUPDOC__PARSER__REQUIRE_ANNOTATION: Skip files without a /*whatsupdoc*/ comment
        WHATSUPDOC__PARSER__MAX_WORKERS: Thread pool size for batch parsing
    """

    tab_width: int = Field(
        default=4,
        description="Tab stop width. Tabs are expanded before comment margins are measured.",
    )
    doc_marker: str = Field(
        default="*",
        description="Character that must open a block comment body to mark it as documentation.",
    )
    allow_syntax_errors: bool = Field(
        default=False,
        description="Produce a best-effort tree for sources with syntax errors instead of failing.",
    )
    require_annotation: bool = Field(
        default=False,
        description="Batch parsing skips files that lack a /*whatsupdoc*/ opt-in comment.",
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".js", ".mjs", ".cjs", ".jsx"],
        description="Extensions treated as JavaScript and stripped from module ids.",
    )
    max_workers: int = Field(
        default=4,
        description="Worker threads for batch parsing. 1 disables the thread pool.",
    )

    @field_validator("tab_width")
    @classmethod
    def validate_tab_width(cls, v: int) -> int:
        if not (TAB_WIDTH_MIN <= v <= TAB_WIDTH_MAX):
            raise ValueError(f"Tab width must be {TAB_WIDTH_MIN}-{TAB_WIDTH_MAX}, got {v}")
        return v

    @field_validator("doc_marker")
    @classmethod
    def validate_doc_marker(cls, v: str) -> str:
        if len(v) != 1 or v.isspace():
            raise ValueError(f"Doc marker must be a single non-space character, got {v!r}")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be at least 1, got {v}")
        return v


class WhatsupdocConfig(BaseModel):
    """Root configuration for whatsupdoc.

    All settings can be configured via:
    1. Environment variables: WHATSUPDOC__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)

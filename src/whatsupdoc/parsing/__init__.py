"""Tree-sitter parsing for JavaScript sources."""

from whatsupdoc.parsing.treesitter import (
    JavaScriptParser,
    ParseResult,
    RawComment,
    node_text,
)

__all__ = [
    "JavaScriptParser",
    "ParseResult",
    "RawComment",
    "node_text",
]

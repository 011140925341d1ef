"""Tree-sitter parsing for JavaScript sources.

This module is the boundary to the external parser. It provides:
- A syntax tree (tree-sitter ``Node`` objects with stable ``type`` tags)
- The flat, source-ordered list of comments, each with the raw horizontal
  text preceding it on its first line (needed to measure comment margins)
- Error accounting, so callers can refuse sources that did not parse

Usage::

    parser = JavaScriptParser()
    result = parser.parse("/** doc */\\nvar x = 1;")
    result.root_node.type      # "program"
    result.comments[0].text    # "* doc "
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from typing import Any, Literal

import tree_sitter

from whatsupdoc.core.errors import SourceParseError

GRAMMAR_MODULE = "tree_sitter_javascript"

# Node types tree-sitter-javascript emits for comments (extras).
_COMMENT_TYPES = frozenset({"comment", "html_comment"})


@dataclass(frozen=True)
class RawComment:
    """A comment as found in the source, before any trimming."""

    text: str  # Body without the /* */ or // delimiters
    kind: Literal["block", "line"]
    line: int  # 1-indexed
    column: int
    end_line: int
    prefix: str  # Raw text before the opener on its starting line


@dataclass
class ParseResult:
    """Result of parsing a source text."""

    tree: Any  # Tree-sitter Tree (not serializable)
    root_node: Any  # Tree-sitter Node
    content: bytes
    comments: list[RawComment] = field(default_factory=list)
    error_count: int = 0
    total_nodes: int = 0
    first_error_line: int | None = None

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


def node_text(node: Any) -> str:
    """Decode a node's source text."""
    return node.text.decode("utf-8") if node.text else ""


@dataclass
class JavaScriptParser:
    """
    Tree-sitter parser for JavaScript documentation extraction.

    One instance owns one ``tree_sitter.Parser``; instances are cheap and
    should not be shared across threads.
    """

    _parser: Any = field(default=None, repr=False)
    _language: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._language = self._load_language()
        self._parser = tree_sitter.Parser()
        self._parser.language = self._language

    @staticmethod
    def _load_language() -> Any:
        try:
            mod = importlib.import_module(GRAMMAR_MODULE)
        except ImportError as err:
            raise SourceParseError.grammar_unavailable(GRAMMAR_MODULE) from err
        return tree_sitter.Language(mod.language())

    def parse(self, content: str | bytes) -> ParseResult:
        """
        Parse JavaScript source.

        Args:
            content: Source text (str is encoded as UTF-8).

        Returns:
            ParseResult with tree, comments and error info. Tree-sitter
            always produces a tree; syntax errors surface as ``ERROR`` or
            missing nodes and are counted in ``error_count``.
        """
        if isinstance(content, str):
            content = content.encode("utf-8")

        tree = self._parser.parse(content)
        lines = content.split(b"\n")
        result = ParseResult(tree=tree, root_node=tree.root_node, content=content)

        # Explicit stack: expression nesting depth is unbounded.
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            result.total_nodes += 1
            if node.type == "ERROR" or node.is_missing:
                result.error_count += 1
                if result.first_error_line is None:
                    result.first_error_line = node.start_point[0] + 1
            if node.type in _COMMENT_TYPES:
                result.comments.append(_make_comment(node, lines))
                continue
            stack.extend(reversed(node.children))
        return result


def _make_comment(node: Any, lines: list[bytes]) -> RawComment:
    row, column = node.start_point[0], node.start_point[1]
    raw = node_text(node)
    if raw.startswith("/*"):
        kind: Literal["block", "line"] = "block"
        body = raw[2:-2] if raw.endswith("*/") and len(raw) >= 4 else raw[2:]
    else:
        kind = "line"
        body = raw[2:] if raw.startswith("//") else raw
    prefix = lines[row][:column].decode("utf-8", errors="replace") if row < len(lines) else ""
    return RawComment(
        text=body,
        kind=kind,
        line=row + 1,
        column=column,
        end_line=node.end_point[0] + 1,
        prefix=prefix,
    )

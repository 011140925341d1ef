"""Tests for pairing doc comments with declarations."""

from __future__ import annotations

from typing import Literal

from whatsupdoc.extraction.locator import is_doc_comment, locate_comments
from whatsupdoc.extraction.scanner import DeclarationEvent
from whatsupdoc.extraction.scope import ScopeTree
from whatsupdoc.parsing.treesitter import RawComment


def _comment(
    text: str, line: int, kind: Literal["block", "line"] = "block", prefix: str = ""
) -> RawComment:
    return RawComment(
        text=text, kind=kind, line=line, column=len(prefix), end_line=line, prefix=prefix
    )


def _events(tree: ScopeTree, *lines: int) -> list[DeclarationEvent]:
    return [
        DeclarationEvent(
            name=f"d{line}",
            line=line,
            column=0,
            scope=tree.lookup_or_create(tree.root, f"d{line}"),
            kind="variable",
        )
        for line in lines
    ]


class TestIsDocComment:
    def test_only_marked_block_comments_are_documentation(self) -> None:
        assert is_doc_comment(_comment("* doc ", 1))
        assert is_doc_comment(_comment("**", 1))
        assert not is_doc_comment(_comment(" plain ", 1))
        assert not is_doc_comment(_comment("", 1))
        assert not is_doc_comment(_comment("* looks like doc", 1, kind="line"))

    def test_custom_marker(self) -> None:
        assert is_doc_comment(_comment("! doc ", 1), doc_marker="!")
        assert not is_doc_comment(_comment("* doc ", 1), doc_marker="!")


class TestLocateComments:
    def test_given_comments_between_declarations_then_neighbours_found(self) -> None:
        tree = ScopeTree()
        events = _events(tree, 2, 5, 9)
        comments = [_comment("* a ", 1), _comment("* b ", 4), _comment("* c ", 12)]

        located = locate_comments(comments, events)

        assert [(c.before, c.after) for c in located] == [
            (None, events[0]),
            (events[0], events[1]),
            (events[2], None),
        ]
        assert [c.text for c in located] == ["a\n", "b\n", "c\n"]

    def test_given_same_line_declaration_then_it_follows(self) -> None:
        tree = ScopeTree()
        events = _events(tree, 3)

        [located] = locate_comments([_comment("* x ", 3)], events)

        assert located.after is events[0]
        assert located.line == 3

    def test_given_plain_comments_then_skipped(self) -> None:
        tree = ScopeTree()
        located = locate_comments([_comment(" nope ", 1), _comment("* yes ", 2)], _events(tree, 3))

        assert [c.line for c in located] == [2]

    def test_given_no_declarations_then_both_neighbours_none(self) -> None:
        [located] = locate_comments([_comment("* lonely ", 1)], [])
        assert located.before is None
        assert located.after is None

    def test_given_unordered_events_then_sorted_before_search(self) -> None:
        tree = ScopeTree()
        late, early = _events(tree, 8, 2)

        [located] = locate_comments([_comment("* x ", 5)], [late, early])

        assert located.before is early
        assert located.after is late

    def test_given_prefix_and_tab_width_then_margin_measured_in_columns(self) -> None:
        comment = _comment("*\n\t * a\n\t ", 1, prefix="\t")

        [located] = locate_comments([comment], [], tab_width=8)

        assert located.text == "a\n"

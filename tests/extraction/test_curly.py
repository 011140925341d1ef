"""Tests for balanced curly-brace scanning."""

from __future__ import annotations

import pytest

from whatsupdoc.extraction.curly import parse_curly


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("{test}", ("test", "")),
        ("{{test}}", ("{test}", "")),
        ("{{test}{test}}", ("{test}{test}", "")),
        ("{test} x", ("test", " x")),
        ("{{test}} x", ("{test}", " x")),
        ("{{test}{test}} x", ("{test}{test}", " x")),
        ("{ test } x", (" test ", " x")),
        ("{ {test} } x", (" {test} ", " x")),
        ("{ {test} { test }} x", (" {test} { test }", " x")),
    ],
)
def test_balanced_braces(text: str, expected: tuple[str, str]) -> None:
    errors: list[str] = []
    assert parse_curly(text, errors) == expected
    assert errors == []


def test_unmatched_brace_reports_and_returns_empty() -> None:
    errors: list[str] = []

    assert parse_curly("{{test} x", errors) == ("", "")
    assert errors == ['Unmatched `{` in "{{test} x"']


def test_text_without_opening_brace_is_a_programming_error() -> None:
    with pytest.raises(ValueError, match="curly brace"):
        parse_curly("test}", [])

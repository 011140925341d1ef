"""Tests for comment margin trimming."""

from __future__ import annotations

import pytest

from whatsupdoc.extraction.trimmer import expand_tabs, trim_comment, trim_margin


class TestTrimComment:
    """Comment bodies as the parser hands them over (after ``/*``)."""

    @pytest.mark.parametrize(
        ("body", "prefix", "expected"),
        [
            ("* hi \n", "    ", "hi\n"),
            ("*\n * hi\n ", "", "hi\n"),
            ("*\n    hi\n", "", "hi\n"),
            ("* leader\n     - hi\n", "", "leader\n - hi\n"),
            ("* leader\n        - hi\n   ", "   ", "leader\n - hi\n"),
            ("* leader\n\t   - hi\n  ", "  ", "leader\n - hi\n"),
        ],
        ids=["single-line", "asterisk-box", "indent", "leader", "indented-leader", "tab-leader"],
    )
    def test_margin_styles(self, body: str, prefix: str, expected: str) -> None:
        assert trim_comment(body, prefix) == expected

    def test_given_empty_body_when_trimmed_then_empty(self) -> None:
        assert trim_comment("* ") == ""
        assert trim_comment("*") == ""

    def test_given_tab_prefix_when_trimmed_then_matches_space_prefix(self) -> None:
        tabbed = trim_comment("*\n\t * a\n\t *   b\n\t ", "\t")
        spaced = trim_comment("*\n     * a\n     *   b\n     ", "    ")

        assert tabbed == spaced == "a\n  b\n"

    def test_given_inner_blank_lines_when_trimmed_then_kept(self) -> None:
        assert trim_comment("*\n * a\n *\n * b\n ") == "a\n\nb\n"


class TestTrimMargin:
    def test_given_margin_free_text_when_trimmed_then_fixed_point(self) -> None:
        text = "plain\ntext\n"
        assert trim_margin(text) == text
        assert trim_margin(trim_margin(text)) == text

    def test_given_deep_indent_when_trimmed_then_excess_survives(self) -> None:
        assert trim_margin("         code") == "     code\n"

    def test_given_trailing_blank_lines_when_trimmed_then_dropped(self) -> None:
        assert trim_margin(" * a\n *\n \n") == "a\n"


class TestExpandTabs:
    @pytest.mark.parametrize(
        ("text", "width", "expected"),
        [
            ("\tx", 4, "    x"),
            ("ab\tx", 4, "ab  x"),
            ("\tx", 8, "        x"),
            ("a\n\tb", 2, "a\n  b"),
        ],
    )
    def test_expands_to_next_stop(self, text: str, width: int, expected: str) -> None:
        assert expand_tabs(text, width) == expected

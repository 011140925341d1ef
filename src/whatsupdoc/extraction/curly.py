"""Balanced curly-brace scanning for ``{type}`` annotations."""

from __future__ import annotations

import json


def parse_curly(text: str, errors: list[str]) -> tuple[str, str]:
    """Split a leading brace-delimited annotation from the text after it.

    Args:
        text: A string starting with ``{``. Nested, balanced braces may
            appear before the matching ``}``.
        errors: Diagnostic list; an unmatched brace is reported here.

    Returns:
        ``(enclosed, remainder)``: the text between the outer braces and
        everything after the closing brace. ``("", "")`` if the opening
        brace is never closed.

    Raises:
        ValueError: If ``text`` does not start with ``{``.
    """
    if not text.startswith("{"):
        raise ValueError("parse_curly must receive a string that starts with a curly brace")
    depth = 0
    for index, char in enumerate(text):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[1:index], text[index + 1 :]
    errors.append(f"Unmatched `{{` in {json.dumps(text)}")
    return "", ""

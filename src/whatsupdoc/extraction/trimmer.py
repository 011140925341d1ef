"""Comment margin trimming.

Comment margins come in two major flavors, with varying amounts of white
space expected to be trimmed from each line depending on the indentation
of the comment opener::

    /**
     * Asterisk box
     */

    /**
        Indentation
    */

Tabs are expanded before any margin is measured, because margins are
counted in columns rather than characters.
"""

from __future__ import annotations

import re

# Box art ("* " or " *") or up to three spaces, then one optional space.
# Anything indented beyond that is content and survives.
_COMMENT_MARGIN = re.compile(r"^(\* | \*| ? ? ?)? ?")


def expand_tabs(text: str, tab_width: int = 4) -> str:
    """Expand tabs to the next tab stop, column-aware per line."""
    return text.expandtabs(tab_width)


def trim_margin(text: str, prefix_width: int = 0) -> str:
    """Strip the opener indentation and comment-art margin from every line.

    Trailing blank lines are dropped and each retained line ends in ``\\n``.
    Text without margins is returned unchanged (modulo line terminators).
    """
    prefix_re = re.compile(r"^ {0,%d}" % prefix_width)
    lines = [_COMMENT_MARGIN.sub("", prefix_re.sub("", line), count=1) for line in text.split("\n")]
    return _finish(lines)


def trim_comment(comment: str, prefix: str = "", tab_width: int = 4) -> str:
    """Normalize a raw documentation comment body into doc text.

    Args:
        comment: The comment body between ``/*`` and ``*/``, starting with
            the doc marker.
        prefix: Raw text preceding the opener on its first line.
        tab_width: Tab stop width.

    Returns:
        Trimmed text; every line terminated by ``\\n``, or ``""``.
    """
    first, _, rest = expand_tabs(comment, tab_width).partition("\n")
    first = first[1:].strip()
    body = trim_margin(rest, len(expand_tabs(prefix, tab_width))) if rest else ""
    if first:
        return first + "\n" + body
    return body


def _finish(lines: list[str]) -> str:
    lines = [line.rstrip() for line in lines]
    while lines and not lines[-1]:
        lines.pop()
    return "".join(line + "\n" for line in lines)

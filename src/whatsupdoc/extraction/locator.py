"""Correlates documentation comments with the declarations they precede."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from whatsupdoc.core.logging import get_logger
from whatsupdoc.extraction.scanner import DeclarationEvent
from whatsupdoc.extraction.trimmer import trim_comment
from whatsupdoc.parsing.treesitter import RawComment

log = get_logger(__name__)


@dataclass
class LocatedComment:
    """A trimmed documentation comment and its neighbouring declarations."""

    comment: RawComment
    text: str
    before: DeclarationEvent | None
    after: DeclarationEvent | None

    @property
    def line(self) -> int:
        return self.comment.line


def is_doc_comment(comment: RawComment, doc_marker: str = "*") -> bool:
    """Block comments whose body opens with the doc marker (``/** ... */``)."""
    return comment.kind == "block" and comment.text.startswith(doc_marker)


def locate_comments(
    comments: Iterable[RawComment],
    events: Sequence[DeclarationEvent],
    *,
    tab_width: int = 4,
    doc_marker: str = "*",
) -> list[LocatedComment]:
    """Pair every documentation comment with the declarations around it.

    ``after`` is the first declaration starting on or after the comment's
    first line, ``before`` the one preceding it. Events must be in source
    order; the scanner guarantees this and an unordered list is repaired
    with a stable sort (and a warning).
    """
    if any(a.line > b.line for a, b in zip(events, events[1:])):
        log.warning("declarations_out_of_order", count=len(events))
        events = sorted(events, key=lambda e: e.line)
    lines = [event.line for event in events]

    located: list[LocatedComment] = []
    for comment in comments:
        if not is_doc_comment(comment, doc_marker):
            continue
        index = bisect_left(lines, comment.line)
        located.append(
            LocatedComment(
                comment=comment,
                text=trim_comment(comment.text, comment.prefix, tab_width),
                before=events[index - 1] if index > 0 else None,
                after=events[index] if index < len(events) else None,
            )
        )
    return located

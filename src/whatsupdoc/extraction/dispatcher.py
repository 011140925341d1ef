"""Splits documentation text into tag blocks and applies tag handlers.

A comment body is a sequence of blank-line separated blocks. A block that
starts with ``@`` holds one or more tags, one per line start::

    Free text, possibly over
    several paragraphs.

    @param {String} name the name
    @returns {Boolean}

Free-text blocks become ``document.doc``. A leading ``{Type}`` in that text
is moved to ``document.js_type``.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping

from whatsupdoc.core.errors import InternalError, WhatsupdocError
from whatsupdoc.core.logging import get_logger
from whatsupdoc.extraction.curly import parse_curly
from whatsupdoc.extraction.document import Document
from whatsupdoc.extraction.locator import LocatedComment
from whatsupdoc.extraction.scanner import DeclarationEvent
from whatsupdoc.extraction.scope import ScopeNode, ScopeTree
from whatsupdoc.extraction.tags import DEFAULT_TAG_HANDLERS, TagContext, TagHandler

log = get_logger(__name__)

_TAG_LINE = re.compile(r"\n *@")
_BLOCK_BREAK = re.compile(r"\n\n+")
_TAG = re.compile(r"^(\S+)(?:\s+([\s\S]*))?")


def parse_document(
    text: str,
    document: Document,
    scope: ScopeNode,
    tree: ScopeTree,
    source: str | None = None,
    tag_handlers: Mapping[str, TagHandler] | None = None,
    after: DeclarationEvent | None = None,
) -> Document:
    """Apply the ``@`` metadata in ``text`` to ``document``.

    Args:
        text: Trimmed documentation text.
        document: The node to populate.
        scope: File scope that tag paths resolve against.
        tree: Scope tree owning ``scope``.
        source: Module id, for diagnostics.
        tag_handlers: Mapping of tag name to handler. Defaults to
            ``DEFAULT_TAG_HANDLERS``.
        after: The declaration following the comment. Documents that no
            tag bound explicitly are bound to it.

    Returns:
        ``document``. ``document.accounted`` tells whether it was bound
        (or deliberately suppressed).
    """
    handlers = DEFAULT_TAG_HANDLERS if tag_handlers is None else tag_handlers
    context = TagContext(scope=scope, tree=tree, source=source)

    docs: list[str] = []
    for block in _BLOCK_BREAK.split(_TAG_LINE.sub("\n\n\n@", text)):
        if not block.startswith("@"):
            if block.strip():
                docs.append(block)
            continue
        for tag_block in block[1:].split("\n@"):
            match = _TAG.match(tag_block)
            if match is None:
                document.errors.append(f"Empty tag in {json.dumps('@' + tag_block.strip())}")
                continue
            tag, tag_text = match.group(1), (match.group(2) or "").rstrip()
            handler = handlers.get(tag)
            if handler is None:
                document.errors.append(f"Did not recognize {json.dumps(tag)} tag.")
                continue
            try:
                handler(tag_text, document, context)
            except WhatsupdocError:
                raise
            except Exception as e:
                raise InternalError.unexpected(
                    f"@{tag} handler failed: {e}", tag=tag, line=document.line
                ) from e

    document.doc = "\n\n".join(docs).strip()
    if document.doc.startswith("{"):
        js_type, rest = parse_curly(document.doc, document.errors)
        document.js_type = js_type
        document.doc = rest.strip()

    if not document.accounted and after is not None:
        if tree.bind(after.scope, document, "positional") and document.type is None:
            document.type = after.kind
    return document


def parse_documents(
    located: Iterable[LocatedComment],
    tree: ScopeTree,
    scope: ScopeNode | None = None,
    source: str | None = None,
    tag_handlers: Mapping[str, TagHandler] | None = None,
) -> list[str]:
    """Parse every located comment, in source order.

    Documents that end up bound to nothing are orphans. An orphan with an
    explicit ``@name`` is placed under the file scope by that name; any
    other orphan is dropped.

    Returns:
        File-level diagnostics (one per dropped orphan).
    """
    scope = scope or tree.root
    diagnostics: list[str] = []
    for item in located:
        document = Document(line=item.line, source=source)
        parse_document(item.text, document, scope, tree, source, tag_handlers, after=item.after)
        if document.accounted:
            continue
        if document.name and tree.bind(tree.declare(scope, document.name), document, "positional"):
            continue
        diagnostics.append(
            f"Documentation comment at line {item.line} is not attached to any declaration"
        )
        log.warning("orphaned_documentation", line=item.line, errors=document.errors)
    return diagnostics

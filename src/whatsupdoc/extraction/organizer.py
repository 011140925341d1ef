"""Folds a scope tree into the public document tree."""

from __future__ import annotations

from collections.abc import Iterable

from whatsupdoc.extraction.document import Document
from whatsupdoc.extraction.scope import ScopeNode, ScopeTree


def organize(
    tree: ScopeTree,
    module_id: str | None = None,
    diagnostics: Iterable[str] = (),
) -> Document:
    """Build the document tree for one file.

    Scope nodes carrying a document become tree nodes; the others are
    transparent and their documented descendants are hoisted to the nearest
    documented ancestor. The root is always present: the ``@module``
    document if there is one, otherwise an empty document.
    """
    root = tree.root.document or Document()
    root.id = module_id
    if module_id is not None:
        root.name = module_id
    root.type = "module"
    root.errors.extend(diagnostics)
    root.children = {}
    _fold(tree.root, root)
    return root


def _fold(scope: ScopeNode, into: Document) -> None:
    # Pre-order over the scope tree; one entry per child scope so that a
    # transparent subtree is hoisted before its later siblings are placed.
    stack = [(name, child, into) for name, child in reversed(scope.children.items())]
    while stack:
        name, child, parent = stack.pop()
        target = parent
        document = child.document
        if document is not None:
            if document.name is None:
                document.name = name
            key = document.name
            existing = parent.children.get(key)
            if existing is not None and existing is not document:
                parent.errors.append(f"Duplicate documentation for {key!r}; keeping the first")
            else:
                parent.children[key] = document
                document.children = {}
                target = document
        stack.extend((n, c, target) for n, c in reversed(child.children.items()))

"""Hierarchical namespace model used to anchor documentation.

A ``ScopeTree`` owns every ``ScopeNode`` in an arena (a flat list). Each
node owns its children by name and refers to its parent only through an
integer id into that arena, so the tree holds no reference cycles.

Name lookup is prototypal: a node sees its own children first, then its
parent's, and so on up to the root. Lookups never copy bindings; creation
always happens on the node where the lookup started.

Paths use ``.`` for members and ``#`` for instance members, which is
rewritten to ``.prototype.``::

    tree.lookup_path(root, "Foo#bar")   # same node as "Foo.prototype.bar"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from whatsupdoc.core.logging import get_logger

if TYPE_CHECKING:
    from whatsupdoc.extraction.document import Document

log = get_logger(__name__)

Binding = Literal["positional", "explicit"]

# Names that resolve to the scope they are looked up from (CommonJS exports).
_SELF_NAMES = frozenset({"exports"})


@dataclass(eq=False)
class ScopeNode:
    """A position in the namespace hierarchy."""

    id: int
    name: str | None
    parent_id: int | None  # Index into the owning ScopeTree; None for the root
    syntax: Any = field(default=None, repr=False)  # Syntax node that first bound the name
    children: dict[str, ScopeNode] = field(default_factory=dict, repr=False)
    document: Document | None = field(default=None, repr=False)
    binding: Binding | None = None


class ScopeTree:
    """Arena of scope nodes rooted at a single synthetic root."""

    def __init__(self, root_name: str | None = None) -> None:
        self._nodes: list[ScopeNode] = []
        self.root = self._new_node(root_name, None, None)

    def __len__(self) -> int:
        return len(self._nodes)

    def _new_node(self, name: str | None, parent: ScopeNode | None, syntax: Any) -> ScopeNode:
        node = ScopeNode(
            id=len(self._nodes),
            name=name,
            parent_id=parent.id if parent is not None else None,
            syntax=syntax,
        )
        self._nodes.append(node)
        return node

    def node(self, node_id: int) -> ScopeNode:
        return self._nodes[node_id]

    def parent(self, scope: ScopeNode) -> ScopeNode | None:
        if scope.parent_id is None:
            return None
        return self._nodes[scope.parent_id]

    def ancestors(self, scope: ScopeNode) -> list[ScopeNode]:
        """Parent chain from the immediate parent up to the root."""
        chain: list[ScopeNode] = []
        current = self.parent(scope)
        while current is not None:
            chain.append(current)
            current = self.parent(current)
        return chain

    def find(self, scope: ScopeNode, name: str) -> ScopeNode | None:
        """Resolve ``name`` along the chain without creating anything."""
        current: ScopeNode | None = scope
        while current is not None:
            child = current.children.get(name)
            if child is not None:
                return child
            current = self.parent(current)
        return None

    def lookup_or_create(self, scope: ScopeNode, name: str | None, syntax: Any = None) -> ScopeNode:
        """Return the node visible as ``name`` from ``scope``, creating it locally if absent.

        ``None`` (a computed member) and ``exports`` resolve to ``scope`` itself.
        """
        if name is None or name in _SELF_NAMES:
            return scope
        found = self.find(scope, name)
        if found is not None:
            return found
        return self._create_child(scope, name, syntax)

    def declare(self, scope: ScopeNode, name: str, syntax: Any = None) -> ScopeNode:
        """Return the node bound to ``name`` directly on ``scope``, shadowing any ancestor."""
        child = scope.children.get(name)
        if child is not None:
            return child
        return self._create_child(scope, name, syntax)

    def _create_child(self, scope: ScopeNode, name: str, syntax: Any) -> ScopeNode:
        child = self._new_node(name, scope, syntax)
        scope.children[name] = child
        return child

    def lookup_path(self, scope: ScopeNode, path: str) -> ScopeNode:
        """Walk a dotted path from ``scope``; always returns a node."""
        current = scope
        for segment in path.replace("#", ".prototype.").split("."):
            part = segment.split(":")[-1].strip()
            if not part:
                continue
            current = self.lookup_or_create(current, part)
        return current

    def qualified_name(self, scope: ScopeNode) -> str:
        """Dotted path of ``scope`` below the root, for diagnostics."""
        if scope.parent_id is None:
            return scope.name or ""
        names = [a.name or "" for a in reversed(self.ancestors(scope)[:-1])]
        return ".".join([*names, scope.name or ""])

    def bind(self, scope: ScopeNode, document: Document, binding: Binding) -> bool:
        """Attach ``document`` to ``scope``.

        Explicit bindings always win. A positional binding never displaces an
        explicit one; between two positional documents the later one wins.
        Every collision is recorded on the document that ends up bound (or on
        the refused one).

        Returns:
            True if ``document`` is now attached to ``scope``.
        """
        existing = scope.document
        where = self.qualified_name(scope)
        if existing is not None and existing is not document:
            if binding == "positional" and scope.binding == "explicit":
                document.errors.append(
                    f"Documentation for {where!r} was already bound explicitly; "
                    "this comment was not attached"
                )
                log.warning("binding_refused", target=where, line=document.line)
                return False
            document.errors.append(
                f"Replaced earlier documentation for {where!r}"
                + (f" from line {existing.line}" if existing.line is not None else "")
            )
            log.warning("binding_replaced", target=where, line=document.line, binding=binding)
        scope.document = document
        scope.binding = binding
        document.accounted = True
        log.debug("document_bound", target=where, binding=binding, line=document.line)
        return True

"""Documentation node model.

A ``Document`` is created for every documentation comment, mutated by each
tag handler in turn, and finally folded into the public document tree by
the organizer. The same class represents tree nodes, so ``children`` is
only populated after organizing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Param:
    """A documented parameter (``@param`` / ``@params``)."""

    name: str
    type: str | None = None
    doc: str | None = None
    variadic: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {"name": self.name, "type": self.type, "doc": self.doc, "variadic": self.variadic}
        )


@dataclass
class Returns:
    """A documented return value (``@returns``)."""

    type: str | None = None
    doc: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"type": self.type, "doc": self.doc})


@dataclass
class Throws:
    """A documented exception (``@throws``)."""

    type: str | None = None
    doc: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"type": self.type, "doc": self.doc})


# Name (url) <email>, each part optional.
_AUTHOR_RE = re.compile(r"(?:([^(<]*) ?)?(?:\(([^)]*)\))? ?(?:<([^>]*)>)?")


@dataclass
class Author:
    """A person credited by ``@author`` or ``@contributor``."""

    name: str
    url: str | None = None
    email: str | None = None

    @classmethod
    def parse(cls, text: str) -> Author:
        """Parse ``Author Name (http://example.com) <author@example.com>``."""
        match = _AUTHOR_RE.match(text.strip())
        if match is None:  # pragma: no cover - the pattern matches the empty string
            return cls(name=text.strip())
        name, url, email = match.groups()
        return cls(name=(name or "").strip(), url=url, email=email)

    def __str__(self) -> str:
        parts = [
            self.name,
            f"({self.url})" if self.url else None,
            f"<{self.email}>" if self.email else None,
        ]
        return " ".join(p for p in parts if p)

    def to_dict(self) -> dict[str, Any]:
        return _compact({"name": self.name, "url": self.url, "email": self.email})


@dataclass(eq=False)
class Document:
    """Structured documentation for one code point."""

    name: str | None = None
    type: str | None = None
    doc: str = ""
    js_type: str | None = None
    params: list[Param] = field(default_factory=list)
    returns: Returns | None = None
    throws: list[Throws] = field(default_factory=list)
    examples: list[str] = field(default_factory=list)
    see: list[str] = field(default_factory=list)
    requires: list[str] = field(default_factory=list)
    author: Author | None = None
    contributors: list[Author] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    # Flags
    constructor: bool = False
    deprecated: bool = False
    module: bool = False
    private: bool = False
    external: bool = False

    # Parse state
    accounted: bool = False
    line: int | None = None
    source: str | None = None

    # Tree shape (set by the organizer)
    id: str | None = None
    children: dict[str, Document] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the subtree; empty optional fields are omitted."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "jsType": self.js_type,
            "params": [p.to_dict() for p in self.params],
            "returns": self.returns.to_dict() if self.returns else None,
            "throws": [t.to_dict() for t in self.throws],
            "examples": list(self.examples),
            "see": list(self.see),
            "requires": list(self.requires),
            "author": self.author.to_dict() if self.author else None,
            "contributors": [c.to_dict() for c in self.contributors],
            "constructor": self.constructor,
            "deprecated": self.deprecated,
            "module": self.module,
            "line": self.line,
            "source": self.source,
        }
        result = {"name": self.name, "doc": self.doc, **_compact(data)}
        result["errors"] = list(self.errors)
        result["children"] = {key: child.to_dict() for key, child in self.children.items()}
        return result


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None and v is not False and v != []}

"""Handlers for ``@tag`` directives in documentation comments.

Every handler takes ``(text, document, context)``: the text following the
tag (trailing white space removed), the document being built, and the
``TagContext`` holding the file scope and scope tree. Handlers mutate the
document and may bind it into the scope tree. They never raise for bad
input; problems are appended to ``document.errors``.

``DEFAULT_TAG_HANDLERS`` is read-only. To add or override tags, pass an
extended copy to ``parse_document``::

    handlers = {**DEFAULT_TAG_HANDLERS, "since": handle_since}
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from whatsupdoc.extraction.curly import parse_curly
from whatsupdoc.extraction.document import Author, Document, Param, Returns, Throws
from whatsupdoc.extraction.scope import ScopeNode, ScopeTree


@dataclass(frozen=True)
class TagContext:
    """Parse state shared by the handlers of one file."""

    scope: ScopeNode  # The file scope; paths resolve from here
    tree: ScopeTree
    source: str | None = None


TagHandler = Callable[[str, Document, TagContext], None]

_PARAM_RE = re.compile(r"^([\w$]+)(?:\s+([\s\S]*))?$")


def _one_line(text: str) -> str:
    return " ".join(text.split("\n")).strip()


def _split_type(text: str, document: Document) -> tuple[str | None, str]:
    """Peel a leading ``{type}`` off tag text."""
    text = _one_line(text)
    if text.startswith("{"):
        js_type, rest = parse_curly(text, document.errors)
        return js_type, rest.strip()
    return None, text


def _add_param(text: str, document: Document, variadic: bool) -> None:
    js_type, text = _split_type(text, document)
    match = _PARAM_RE.match(text)
    if match is None:
        document.errors.append(f"Could not recognize `@param` {json.dumps(text)}")
        return
    name, doc = match.groups()
    document.params.append(Param(name=name, type=js_type, doc=doc or None, variadic=variadic))


def handle_param(text: str, document: Document, context: TagContext) -> None:
    """``@param {Type} name description``"""
    _add_param(text, document, variadic=False)


def handle_params(text: str, document: Document, context: TagContext) -> None:
    """``@params {Type} name description`` for variadic parameters."""
    _add_param(text, document, variadic=True)


def handle_returns(text: str, document: Document, context: TagContext) -> None:
    js_type, doc = _split_type(text, document)
    document.returns = Returns(type=js_type, doc=doc or None)


def handle_throws(text: str, document: Document, context: TagContext) -> None:
    js_type, doc = _split_type(text, document)
    document.throws.append(Throws(type=js_type, doc=doc or None))


def handle_example(text: str, document: Document, context: TagContext) -> None:
    document.examples.append(text)


def handle_see(text: str, document: Document, context: TagContext) -> None:
    document.see.append(_one_line(text))


def handle_type(text: str, document: Document, context: TagContext) -> None:
    js_type, rest = _split_type(text, document)
    document.js_type = js_type if js_type is not None else rest or None


def handle_name(text: str, document: Document, context: TagContext) -> None:
    """Overrides the name inferred from the declaration."""
    document.name = text.strip()


def handle_author(text: str, document: Document, context: TagContext) -> None:
    """``@author Name (http://example.com) <name@example.com>``, each part optional."""
    document.author = Author.parse(_one_line(text))


def handle_contributor(text: str, document: Document, context: TagContext) -> None:
    document.contributors.append(Author.parse(_one_line(text)))


def _flag(tag: str, attribute: str) -> TagHandler:
    def handler(text: str, document: Document, context: TagContext) -> None:
        if text.strip():
            document.errors.append(f"`@{tag}` tag had superfluous text")
        setattr(document, attribute, True)

    handler.__name__ = f"handle_{tag}"
    handler.__doc__ = f"Flags the document as ``{attribute}``."
    return handler


handle_constructor = _flag("constructor", "constructor")
handle_deprecated = _flag("deprecated", "deprecated")


def _module(tag: str) -> TagHandler:
    flag = _flag(tag, "module")

    def handler(text: str, document: Document, context: TagContext) -> None:
        flag(text, document, context)
        document.type = "module"
        context.tree.bind(context.scope, document, "explicit")

    handler.__name__ = f"handle_{tag}"
    handler.__doc__ = "Documents the file itself; binds to the file scope."
    return handler


handle_module = _module("module")
handle_fileoverview = _module("fileoverview")


def _bind_path(tag: str, text: str, document: Document, context: TagContext) -> ScopeNode | None:
    path = text.strip()
    if not path:
        document.errors.append(f"`@{tag}` tag requires a name path")
        return None
    node = context.tree.lookup_path(context.scope, path)
    context.tree.bind(node, document, "explicit")
    return node


def handle_member(text: str, document: Document, context: TagContext) -> None:
    """``@member Foo#bar`` documents the named member instead of the next declaration."""
    node = _bind_path("member", text, document, context)
    if node is not None:
        document.name = node.name


def handle_lends(text: str, document: Document, context: TagContext) -> None:
    _bind_path("lends", text, document, context)


def handle_function(text: str, document: Document, context: TagContext) -> None:
    if not document.js_type:
        document.js_type = "Function"
    if text.strip():
        _bind_path("function", text, document, context)


def handle_private(text: str, document: Document, context: TagContext) -> None:
    document.private = True
    document.accounted = True


def handle_external(text: str, document: Document, context: TagContext) -> None:
    document.external = True
    document.accounted = True


def handle_requires(text: str, document: Document, context: TagContext) -> None:
    document.requires.append(text.strip())


DEFAULT_TAG_HANDLERS: Mapping[str, TagHandler] = MappingProxyType(
    {
        "param": handle_param,
        "argument": handle_param,
        "params": handle_params,
        "returns": handle_returns,
        "return": handle_returns,
        "throws": handle_throws,
        "exception": handle_throws,
        "example": handle_example,
        "see": handle_see,
        "type": handle_type,
        "name": handle_name,
        "author": handle_author,
        "contributor": handle_contributor,
        "constructor": handle_constructor,
        "deprecated": handle_deprecated,
        "module": handle_module,
        "fileoverview": handle_fileoverview,
        "member": handle_member,
        "lends": handle_lends,
        "function": handle_function,
        "private": handle_private,
        "external": handle_external,
        "requires": handle_requires,
    }
)

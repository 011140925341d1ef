"""Declaration scanning over tree-sitter JavaScript syntax trees.

The scanner walks the tree in source order and records a
``DeclarationEvent`` every time code binds a name: function and class
declarations, variable declarators, object-literal properties, class
members and assignment targets. As it goes it populates the ``ScopeTree``
so that each bound name has a node, and nested code is visited under the
node of the name it is being bound to. A function literal assigned to
``var x`` is therefore scanned inside ``x``'s scope, and the members of
``exports.Foo = {...}`` land under ``Foo``.

Dispatch is by node type: ``_visit_<type>``. Node types that can never
introduce a name are listed in ``_INERT_TYPES``. Anything else is an
unsupported kind: it is reported once per file and its named children are
still visited, so declarations nested inside are not lost.

Visitors never recurse. ``_visit`` queues a child and ``scan`` drains the
queue through an explicit stack, so long ``+`` chains and promise chains
cost heap rather than Python stack frames.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from whatsupdoc.core.logging import get_logger
from whatsupdoc.extraction.scope import ScopeNode, ScopeTree
from whatsupdoc.parsing.treesitter import node_text

log = get_logger(__name__)


# Leaves and constructs that never bind a documentable name.
_INERT_TYPES = frozenset(
    {
        "comment",
        "html_comment",
        "hash_bang_line",
        "identifier",
        "property_identifier",
        "private_property_identifier",
        "shorthand_property_identifier",
        "statement_identifier",
        "this",
        "super",
        "number",
        "string",
        "regex",
        "true",
        "false",
        "null",
        "undefined",
        "import",
        "meta_property",
        "empty_statement",
        "break_statement",
        "continue_statement",
        "debugger_statement",
        "import_statement",
        "export_clause",
        "update_expression",
        "formal_parameters",
        "object_pattern",
        "array_pattern",
        "assignment_pattern",
        "rest_pattern",
        "jsx_text",
        "jsx_closing_element",
    }
)

_FUNCTION_TYPES = frozenset(
    {"function_expression", "function", "arrow_function", "generator_function"}
)
_CLASS_TYPES = frozenset({"class"})

_Visitor = Callable[[Any, ScopeNode], None]


@dataclass(frozen=True, eq=False)
class DeclarationEvent:
    """A point in the source where a name is bound."""

    name: str | None
    line: int  # 1-indexed
    column: int
    scope: ScopeNode  # Node the name is bound to
    kind: str  # function, class, method, variable, property, assignment
    syntax: Any = field(default=None, repr=False)


class DeclarationScanner:
    """Collects declaration events and builds the scope tree for one file."""

    def __init__(self, tree: ScopeTree) -> None:
        self.tree = tree
        self.events: list[DeclarationEvent] = []
        self._unsupported: dict[str, int] = {}
        self._queued: list[tuple[_Visitor, Any, ScopeNode]] = []

    @property
    def diagnostics(self) -> list[str]:
        """One message per unsupported node type, with its first line."""
        return [f"Can't traverse {kind} (line {line})" for kind, line in self._unsupported.items()]

    def scan(self, root_node: Any, scope: ScopeNode | None = None) -> list[DeclarationEvent]:
        """Scan a syntax tree; returns the events in source order."""
        stack: list[tuple[_Visitor, Any, ScopeNode]] = [
            (self._dispatch, root_node, scope or self.tree.root)
        ]
        while stack:
            visitor, node, node_scope = stack.pop()
            self._queued = []
            visitor(node, node_scope)
            # Reversed so the first queued child is scanned next.
            stack.extend(reversed(self._queued))
        log.debug("declarations_scanned", count=len(self.events), scopes=len(self.tree))
        return self.events

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _visit(self, node: Any, scope: ScopeNode) -> None:
        if node is None or node.type in _INERT_TYPES:
            return
        self._queued.append((self._dispatch, node, scope))

    def _defer(self, visitor: _Visitor, node: Any, scope: ScopeNode) -> None:
        self._queued.append((visitor, node, scope))

    def _dispatch(self, node: Any, scope: ScopeNode) -> None:
        visitor = getattr(self, f"_visit_{node.type}", None)
        if visitor is None:
            self._report_unsupported(node)
            self._visit_children(node, scope)
            return
        visitor(node, scope)

    def _report_unsupported(self, node: Any) -> None:
        if node.type in self._unsupported:
            return
        line = node.start_point[0] + 1
        self._unsupported[node.type] = line
        log.debug("unsupported_syntax", kind=node.type, line=line)

    def _visit_children(self, node: Any, scope: ScopeNode) -> None:
        for child in node.named_children:
            self._visit(child, scope)

    def _emit(self, name: str | None, node: Any, scope: ScopeNode, kind: str) -> None:
        self.events.append(
            DeclarationEvent(
                name=name,
                line=node.start_point[0] + 1,
                column=node.start_point[1],
                scope=scope,
                kind=kind,
                syntax=node,
            )
        )

    # Statements and expressions whose only job is to contain other code.
    _visit_program = _visit_children
    _visit_statement_block = _visit_children
    _visit_expression_statement = _visit_children
    _visit_parenthesized_expression = _visit_children
    _visit_if_statement = _visit_children
    _visit_else_clause = _visit_children
    _visit_switch_statement = _visit_children
    _visit_switch_body = _visit_children
    _visit_switch_case = _visit_children
    _visit_switch_default = _visit_children
    _visit_for_statement = _visit_children
    _visit_for_in_statement = _visit_children
    _visit_while_statement = _visit_children
    _visit_do_statement = _visit_children
    _visit_try_statement = _visit_children
    _visit_catch_clause = _visit_children
    _visit_finally_clause = _visit_children
    _visit_with_statement = _visit_children
    _visit_labeled_statement = _visit_children
    _visit_return_statement = _visit_children
    _visit_throw_statement = _visit_children
    _visit_export_statement = _visit_children
    _visit_sequence_expression = _visit_children
    _visit_binary_expression = _visit_children
    _visit_unary_expression = _visit_children
    _visit_ternary_expression = _visit_children
    _visit_await_expression = _visit_children
    _visit_yield_expression = _visit_children
    _visit_spread_element = _visit_children
    _visit_arguments = _visit_children
    _visit_array = _visit_children
    _visit_template_string = _visit_children
    _visit_template_substitution = _visit_children
    _visit_class_heritage = _visit_children
    _visit_decorator = _visit_children
    _visit_jsx_element = _visit_children
    _visit_jsx_self_closing_element = _visit_children
    _visit_jsx_opening_element = _visit_children
    _visit_jsx_attribute = _visit_children
    _visit_jsx_expression = _visit_children
    _visit_ERROR = _visit_children

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _visit_function_declaration(self, node: Any, scope: ScopeNode) -> None:
        name_node = node.child_by_field_name("name")
        subscope = scope
        if name_node is not None:
            name = node_text(name_node)
            subscope = self.tree.declare(scope, name, node)
            self._emit(name, node, subscope, "function")
        self._visit(node.child_by_field_name("body"), subscope)

    _visit_generator_function_declaration = _visit_function_declaration

    def _visit_function_expression(self, node: Any, scope: ScopeNode) -> None:
        # The expression's own name is local to its body; the enclosing
        # binding (declarator, property, assignment) already chose the scope.
        self._visit(node.child_by_field_name("body"), scope)

    _visit_function = _visit_function_expression
    _visit_generator_function = _visit_function_expression
    _visit_arrow_function = _visit_function_expression

    def _visit_variable_declaration(self, node: Any, scope: ScopeNode) -> None:
        for declarator in node.named_children:
            if declarator.type == "variable_declarator":
                self._defer(self._visit_variable_declarator, declarator, scope)
            else:
                self._visit(declarator, scope)

    _visit_lexical_declaration = _visit_variable_declaration

    def _visit_variable_declarator(self, node: Any, scope: ScopeNode) -> None:
        name_node = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        subscope = scope
        if name_node is not None and name_node.type == "identifier":
            name = node_text(name_node)
            subscope = self.tree.declare(scope, name, node)
            self._emit(name, node, subscope, _value_kind(value, "variable"))
        self._visit(value, subscope)

    def _visit_class_declaration(self, node: Any, scope: ScopeNode) -> None:
        name_node = node.child_by_field_name("name")
        subscope = scope
        if name_node is not None:
            name = node_text(name_node)
            subscope = self.tree.declare(scope, name, node)
            self._emit(name, node, subscope, "class")
        for child in node.named_children:
            if child.type == "class_heritage":
                self._visit(child, scope)
        self._visit(node.child_by_field_name("body"), subscope)

    def _visit_class(self, node: Any, scope: ScopeNode) -> None:
        self._visit(node.child_by_field_name("body"), scope)

    def _visit_class_body(self, node: Any, scope: ScopeNode) -> None:
        """Instance members live on ``prototype``; static members on the class."""
        for member in node.named_children:
            if member.type in ("method_definition", "field_definition"):
                self._defer(self._visit_class_member, member, scope)
            elif member.type == "class_static_block":
                self._visit(member.child_by_field_name("body"), scope)
            else:
                self._visit(member, scope)

    def _visit_class_member(self, node: Any, scope: ScopeNode) -> None:
        target = scope if _is_static(node) else self.tree.declare(scope, "prototype")
        if node.type == "method_definition":
            self._visit_method_definition(node, target)
        else:
            self._visit_field_definition(node, target)

    def _visit_method_definition(self, node: Any, scope: ScopeNode) -> None:
        name = _property_name(node.child_by_field_name("name"))
        subscope = scope
        if name is not None:
            subscope = self.tree.declare(scope, name, node)
            self._emit(name, node, subscope, "method")
        self._visit(node.child_by_field_name("body"), subscope)

    def _visit_field_definition(self, node: Any, scope: ScopeNode) -> None:
        name = _property_name(node.child_by_field_name("property"))
        value = node.child_by_field_name("value")
        subscope = scope
        if name is not None:
            subscope = self.tree.declare(scope, name, node)
            self._emit(name, node, subscope, _value_kind(value, "property"))
        self._visit(value, subscope)

    def _visit_object(self, node: Any, scope: ScopeNode) -> None:
        for member in node.named_children:
            if member.type == "pair":
                self._defer(self._visit_pair, member, scope)
            elif member.type == "shorthand_property_identifier":
                self._defer(self._visit_shorthand_property, member, scope)
            elif member.type == "method_definition":
                self._defer(self._visit_method_definition, member, scope)
            else:
                self._visit(member, scope)

    def _visit_shorthand_property(self, node: Any, scope: ScopeNode) -> None:
        name = node_text(node)
        self._emit(name, node, self.tree.declare(scope, name, node), "property")

    def _visit_pair(self, node: Any, scope: ScopeNode) -> None:
        name = _property_name(node.child_by_field_name("key"))
        value = node.child_by_field_name("value")
        subscope = scope
        if name is not None:
            subscope = self.tree.declare(scope, name, node)
            self._emit(name, node, subscope, _value_kind(value, "property"))
        self._visit(value, subscope)

    # ------------------------------------------------------------------
    # Assignments and calls
    # ------------------------------------------------------------------

    def _visit_assignment_expression(self, node: Any, scope: ScopeNode) -> None:
        value = node.child_by_field_name("right")
        found = self.resolve(scope, node.child_by_field_name("left"))
        subscope = scope
        if found is not None:
            self._emit(found.name, node, found, _value_kind(value, "assignment"))
            subscope = found
        self._visit(value, subscope)

    def _visit_augmented_assignment_expression(self, node: Any, scope: ScopeNode) -> None:
        self._visit(node.child_by_field_name("right"), scope)

    def _visit_call_expression(self, node: Any, scope: ScopeNode) -> None:
        """Arguments are scanned in the scope of the callee when it resolves.

        Documentation on a callback or options object passed to ``Foo.extend``
        then lands under ``Foo.extend``. The callee's own subexpressions
        (an IIFE body, a chained call) are scanned first, in place.
        """
        self._visit_invocation(node.child_by_field_name("function"), node, scope)

    def _visit_new_expression(self, node: Any, scope: ScopeNode) -> None:
        self._visit_invocation(node.child_by_field_name("constructor"), node, scope)

    def _visit_invocation(self, callee: Any, node: Any, scope: ScopeNode) -> None:
        if callee is not None and callee.type not in ("identifier", "import"):
            self._visit(callee, scope)
        self._defer(self._visit_call_arguments, node, scope)

    def _visit_call_arguments(self, node: Any, scope: ScopeNode) -> None:
        """Runs after the callee has been scanned, so its bindings are visible."""
        field_name = "constructor" if node.type == "new_expression" else "function"
        subscope = self.resolve(scope, node.child_by_field_name(field_name)) or scope
        self._visit(node.child_by_field_name("arguments"), subscope)

    def _visit_member_expression(self, node: Any, scope: ScopeNode) -> None:
        self._visit(node.child_by_field_name("object"), scope)

    def _visit_subscript_expression(self, node: Any, scope: ScopeNode) -> None:
        self._visit(node.child_by_field_name("object"), scope)
        self._visit(node.child_by_field_name("index"), scope)

    # ------------------------------------------------------------------
    # Path resolution
    # ------------------------------------------------------------------

    def resolve(self, scope: ScopeNode, node: Any) -> ScopeNode | None:
        """Resolve an identifier/member path expression to a scope node.

        Intermediate nodes are created on demand. Returns None for
        expressions with no static path (``this.x``, ``f().y``).
        """
        steps: list[Any] = []
        base: ScopeNode | None = None
        while node is not None:
            kind = node.type
            if kind == "parenthesized_expression":
                node = node.named_children[0] if node.named_child_count else None
                continue
            if kind in ("member_expression", "subscript_expression"):
                obj = node.child_by_field_name("object")
                if kind == "member_expression" and _is_module_exports(
                    obj, node.child_by_field_name("property")
                ):
                    base = scope
                    break
                steps.append(node)
                node = obj
                continue
            if kind == "identifier":
                base = self.tree.lookup_or_create(scope, node_text(node), node)
            elif kind in ("string", "number"):
                base = self.tree.lookup_or_create(scope, _literal_value(node), node)
            break
        if base is None:
            return None
        # Innermost object first: ``a.b.c`` creates ``a``, then ``b``, then ``c``.
        for step in reversed(steps):
            base = self.tree.lookup_or_create(base, _step_name(step), step)
        return base


_MEMBER_NAME_TYPES = frozenset({"property_identifier", "private_property_identifier"})


def _value_kind(value: Any, default: str) -> str:
    if value is None:
        return default
    if value.type in _FUNCTION_TYPES:
        return "function"
    if value.type in _CLASS_TYPES:
        return "class"
    return default


def _is_static(member: Any) -> bool:
    return any(child.type == "static" for child in member.children)


def _is_module_exports(obj: Any, prop: Any) -> bool:
    return (
        obj is not None
        and prop is not None
        and obj.type == "identifier"
        and node_text(obj) == "module"
        and node_text(prop) == "exports"
    )


def _literal_value(node: Any) -> str | None:
    """Static value of a string or number literal; None for anything else."""
    if node is None:
        return None
    if node.type == "string":
        fragments = [node_text(c) for c in node.named_children if c.type == "string_fragment"]
        return "".join(fragments) if fragments else node_text(node)[1:-1]
    if node.type == "number":
        return node_text(node)
    return None


def _property_name(node: Any) -> str | None:
    """Name of an object key or class member; None when computed."""
    if node is None:
        return None
    if node.type in ("property_identifier", "identifier", "private_property_identifier"):
        return node_text(node)
    return _literal_value(node)


def _step_name(node: Any) -> str | None:
    """Segment name of a member or subscript step; None when computed."""
    if node.type == "subscript_expression":
        return _literal_value(node.child_by_field_name("index"))
    prop = node.child_by_field_name("property")
    return node_text(prop) if prop is not None and prop.type in _MEMBER_NAME_TYPES else None

"""Tests for declaration scanning."""

from __future__ import annotations

from whatsupdoc.extraction.scanner import DeclarationScanner
from whatsupdoc.extraction.scope import ScopeTree
from whatsupdoc.parsing.treesitter import JavaScriptParser


def _scan(js_parser: JavaScriptParser, source: str) -> tuple[ScopeTree, DeclarationScanner]:
    tree = ScopeTree("test")
    scanner = DeclarationScanner(tree)
    scanner.scan(js_parser.parse(source).root_node)
    return tree, scanner


def _names(scanner: DeclarationScanner) -> list[tuple[str | None, int, str]]:
    return [(e.name, e.line, e.kind) for e in scanner.events]


class TestDeclarations:
    """Events for the common binding forms."""

    def test_given_var_and_function_when_scanned_then_events_in_order(
        self, js_parser: JavaScriptParser
    ) -> None:
        _, scanner = _scan(js_parser, "var a = 1;\nfunction b() {}\nlet c = () => 1;\n")

        assert _names(scanner) == [
            ("a", 1, "variable"),
            ("b", 2, "function"),
            ("c", 3, "function"),
        ]

    def test_given_exports_assignment_when_scanned_then_bound_at_file_scope(
        self, js_parser: JavaScriptParser
    ) -> None:
        tree, scanner = _scan(js_parser, "exports.blah = {};\nmodule.exports.other = 1;\n")

        assert [e.name for e in scanner.events] == ["blah", "other"]
        assert set(tree.root.children) == {"blah", "other"}

    def test_given_object_literal_when_scanned_then_members_nested(
        self, js_parser: JavaScriptParser
    ) -> None:
        source = "var api = {\n  get: function () {},\n  'put': 1,\n  list() {},\n  short\n};\n"
        tree, scanner = _scan(js_parser, source)

        api = tree.root.children["api"]
        assert set(api.children) == {"get", "put", "list", "short"}
        assert scanner.events[1].scope is api.children["get"]
        assert scanner.events[1].kind == "function"

    def test_given_nested_function_when_scanned_then_locals_inside_function_scope(
        self, js_parser: JavaScriptParser
    ) -> None:
        tree, _ = _scan(js_parser, "function outer() {\n  var inner = 1;\n}\n")

        outer = tree.root.children["outer"]
        assert "inner" in outer.children
        assert "inner" not in tree.root.children

    def test_given_assignment_to_outer_name_when_scanned_then_resolves_to_ancestor(
        self, js_parser: JavaScriptParser
    ) -> None:
        source = "var Foo = {};\nfunction setup() {\n  Foo.bar = function () {};\n}\n"
        tree, _ = _scan(js_parser, source)

        assert "bar" in tree.root.children["Foo"].children
        assert "Foo" not in tree.root.children["setup"].children

    def test_given_subscript_with_literal_when_scanned_then_named_member(
        self, js_parser: JavaScriptParser
    ) -> None:
        tree, scanner = _scan(js_parser, "var o = {};\no['key'] = 1;\no[k] = 2;\n")

        o = tree.root.children["o"]
        assert "key" in o.children
        # A computed index resolves to the object itself.
        assert scanner.events[-1].scope is o


class TestClasses:
    """Class members."""

    def test_given_class_when_scanned_then_instance_members_on_prototype(
        self, js_parser: JavaScriptParser
    ) -> None:
        source = (
            "class Foo extends Base {\n"
            "  constructor() {}\n"
            "  bar() {}\n"
            "  static baz() {}\n"
            "  count = 0;\n"
            "}\n"
        )
        tree, scanner = _scan(js_parser, source)

        foo = tree.root.children["Foo"]
        assert set(foo.children["prototype"].children) == {"constructor", "bar", "count"}
        assert "baz" in foo.children
        assert scanner.events[0].kind == "class"

    def test_given_class_expression_when_scanned_then_members_under_binding(
        self, js_parser: JavaScriptParser
    ) -> None:
        tree, scanner = _scan(js_parser, "var Widget = class {\n  draw() {}\n};\n")

        widget = tree.root.children["Widget"]
        assert "draw" in widget.children["prototype"].children
        assert scanner.events[0].kind == "class"


class TestCalls:
    """Call expressions."""

    def test_given_iife_when_scanned_then_body_declarations_found(
        self, js_parser: JavaScriptParser
    ) -> None:
        tree, _ = _scan(js_parser, "(function () {\n  var hidden = 1;\n})();\n")

        assert "hidden" in tree.root.children

    def test_given_extend_call_when_scanned_then_arguments_under_callee(
        self, js_parser: JavaScriptParser
    ) -> None:
        tree, _ = _scan(js_parser, "Base.extend({\n  method: function () {}\n});\n")

        extend = tree.root.children["Base"].children["extend"]
        assert "method" in extend.children

    def test_given_new_expression_when_scanned_then_arguments_under_constructor(
        self, js_parser: JavaScriptParser
    ) -> None:
        tree, _ = _scan(js_parser, "var w = new Widget({\n  color: 'red'\n});\n")

        widget = tree.root.children["w"].children["Widget"]
        assert "color" in widget.children


class TestTraversal:
    """Containers and traversal gaps."""

    def test_given_for_of_loop_when_scanned_then_body_visited(
        self, js_parser: JavaScriptParser
    ) -> None:
        tree, scanner = _scan(js_parser, "for (const a of xs) {\n  var x = 1;\n}\n")

        assert "x" in tree.root.children
        assert scanner.diagnostics == []

    def test_given_unhandled_kind_when_scanned_then_reported_once(
        self, js_parser: JavaScriptParser
    ) -> None:
        source = "export * as ns from 'a';\nexport * as other from 'b';\nvar after = 1;\n"
        tree, scanner = _scan(js_parser, source)

        assert scanner.diagnostics == ["Can't traverse namespace_export (line 1)"]
        assert "after" in tree.root.children

    def test_given_nested_object_when_scanned_then_events_in_source_order(
        self, js_parser: JavaScriptParser
    ) -> None:
        source = "var a = {\n  x: {\n    y: 1\n  },\n  z: 2\n};\nvar b;\n"
        _, scanner = _scan(js_parser, source)

        assert [(e.name, e.line) for e in scanner.events] == [
            ("a", 1),
            ("x", 2),
            ("y", 3),
            ("z", 5),
            ("b", 7),
        ]

    def test_given_long_binary_chain_when_scanned_then_no_recursion_limit(
        self, js_parser: JavaScriptParser
    ) -> None:
        terms = " + ".join(["1"] * 2000)
        tree, scanner = _scan(js_parser, f"var total = {terms};\nvar after = function () {{}};\n")

        assert _names(scanner) == [("total", 1, "variable"), ("after", 2, "function")]
        assert set(tree.root.children) == {"total", "after"}
        assert scanner.diagnostics == []

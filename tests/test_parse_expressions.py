"""Tests for expressions: literals, precedence, application, lambdas, products."""

from __future__ import annotations

from lenfront.ast import NodeKind

from .conftest import sexpr, statements


def parse_one(parse_source, source: str) -> str:
    tree, diagnostics = parse_source(source)
    assert diagnostics == [], diagnostics
    stmts = statements(tree)
    assert len(stmts) == 1
    return sexpr(tree, stmts[0].index)


class TestLiterals:
    def test_number(self, parse_source):
        assert parse_one(parse_source, "42") == "42"

    def test_string(self, parse_source):
        assert parse_one(parse_source, '"hi"') == "'hi'"

    def test_booleans(self, parse_source):
        tree, _ = parse_source("true; false")
        kinds = [n.kind for n in statements(tree)]
        assert kinds == [NodeKind.BOOLEAN, NodeKind.BOOLEAN]

    def test_identifier(self, parse_source):
        assert parse_one(parse_source, "foo") == "foo"


class TestBinary:
    def test_simple_addition(self, parse_source):
        tree, diagnostics = parse_source("1 + 2")
        assert diagnostics == []
        (stmt,) = statements(tree)
        assert stmt.kind is NodeKind.BINARY
        assert stmt.text == "+"
        left, right = tree.children(stmt.index)
        assert (left.kind, left.text) == (NodeKind.NUMBER, "1")
        assert (right.kind, right.text) == (NodeKind.NUMBER, "2")

    def test_multiplication_binds_tighter(self, parse_source):
        assert parse_one(parse_source, "a + b * c") == "(binary + a (binary * b c))"

    def test_left_associative(self, parse_source):
        assert parse_one(parse_source, "a - b - c") == "(binary - (binary - a b) c)"

    def test_power_right_associative(self, parse_source):
        assert parse_one(parse_source, "a ^ b ^ c") == "(binary ^ a (binary ^ b c))"

    def test_dollar_lowest_and_right_associative(self, parse_source):
        assert parse_one(parse_source, "f $ g $ x + 1") == "(binary $ f (binary $ g (binary + x 1)))"

    def test_comparison_and_logic(self, parse_source):
        assert (
            parse_one(parse_source, "a < b && c == d || e")
            == "(binary || (binary && (binary < a b) (binary == c d)) e)"
        )

    def test_concat(self, parse_source):
        assert parse_one(parse_source, '"a" ++ "b"') == "(binary ++ 'a' 'b')"

    def test_grouping_overrides_precedence(self, parse_source):
        assert parse_one(parse_source, "(a + b) * c") == "(binary * (group (binary + a b)) c)"

    def test_span_covers_operands(self, parse_source):
        tree, _ = parse_source("  1 + 22")
        (stmt,) = statements(tree)
        assert stmt.span.start.column == 3
        assert stmt.span.end.column == 9


class TestUnary:
    def test_negation(self, parse_source):
        assert parse_one(parse_source, "-x") == "(unary - x)"

    def test_binds_tighter_than_binary(self, parse_source):
        assert parse_one(parse_source, "-a * b") == "(binary * (unary - a) b)"

    def test_chained_prefix(self, parse_source):
        assert parse_one(parse_source, "!!-x") == "(unary ! (unary ! (unary - x)))"

    def test_minus_after_operand_is_binary(self, parse_source):
        assert parse_one(parse_source, "f -x") == "(binary - f x)"

    def test_glued_operators(self, parse_source):
        assert parse_one(parse_source, "1+-2") == "(binary + 1 (unary - 2))"


class TestApplication:
    def test_single_argument(self, parse_source):
        assert parse_one(parse_source, "foo 1") == "(call foo 1)"

    def test_left_associative(self, parse_source):
        assert parse_one(parse_source, "f a b c") == "(call (call (call f a) b) c)"

    def test_grouped_argument(self, parse_source):
        assert parse_one(parse_source, "foo (bar baz)") == "(call foo (group (call bar baz)))"

    def test_binds_tighter_than_operators(self, parse_source):
        assert parse_one(parse_source, "f x + g y") == "(binary + (call f x) (call g y))"


class TestLambda:
    def test_identity(self, parse_source):
        assert parse_one(parse_source, "x => x") == "(lambda x x)"

    def test_body_extends_right(self, parse_source):
        assert parse_one(parse_source, "x => x + 1") == "(lambda x (binary + x 1))"

    def test_curried(self, parse_source):
        assert parse_one(parse_source, "a => b => a") == "(lambda a (lambda b a))"

    def test_applied_lambda(self, parse_source):
        assert parse_one(parse_source, "(x => x) 1") == "(call (group (lambda x x)) 1)"


class TestProduct:
    def test_simple(self, parse_source):
        assert parse_one(parse_source, "{a: b}") == "(product (field a b))"

    def test_multiple_fields(self, parse_source):
        assert (
            parse_one(parse_source, "{a: 1, b: x + 2}")
            == "(product (field a 1) (field b (binary + x 2)))"
        )

    def test_trailing_comma(self, parse_source):
        assert parse_one(parse_source, "{a: 1,}") == "(product (field a 1))"

    def test_empty(self, parse_source):
        assert parse_one(parse_source, "{}") == "(product)"

    def test_nested(self, parse_source):
        assert parse_one(parse_source, "{p: {q: 1}}") == "(product (field p (product (field q 1))))"

    def test_duplicate_field_warns(self, parse_source):
        from lenfront.errors import Severity

        tree, diagnostics = parse_source("{a: 1, a: 2}")
        assert len(diagnostics) == 1
        assert diagnostics[0].severity is Severity.WARNING
        assert "duplicate field 'a'" in diagnostics[0].message
        assert len(tree.find(NodeKind.FIELD)) == 2

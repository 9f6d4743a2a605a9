"""Tests for expression trees: parsing, classification and precedence."""

import pytest
from stepwise import E, parse_sexpr, format_sexpr, node_kind
from stepwise.expr import (
    is_fraction, is_operator, is_unary_minus, make_nary, negate, needs_parens, unwrap,
)


class TestParsing:
    """Tests for the s-expression parser and builder."""

    def test_parse_numbers_and_symbols(self):
        """Integers, floats and symbols parse to their Python values."""
        assert E("(+ 2 2)") == ["+", 2, 2]
        assert E("(^ x 0.5)") == ["^", "x", 0.5]
        assert E("-3") == -3
        assert E("y") == "y"

    def test_parse_nested(self):
        """Nested lists parse recursively."""
        assert E("(* (+ (* 2 x) 3) (+ x 4))") == [
            "*", ["+", ["*", 2, "x"], 3], ["+", "x", 4]
        ]

    def test_parse_pattern_syntax(self):
        """Rule DSL pattern forms are converted."""
        assert parse_sexpr("?x") == ["?", "x"]
        assert parse_sexpr("?n:const") == ["?c", "n"]
        assert parse_sexpr("?v:var") == ["?v", "v"]
        assert parse_sexpr("?xs...") == ["?...", "xs"]
        assert parse_sexpr(":x") == [":", "x"]

    def test_parse_blank(self):
        """Blank input parses to None."""
        assert parse_sexpr("   ") is None

    def test_builder_helpers(self):
        """E.op, E.group and E.neg build plain lists."""
        assert E.op("*", 2, "x") == ["*", 2, "x"]
        assert E.group("x") == ["paren", "x"]
        assert E.neg("x") == ["-", "x"]

    def test_format_round_trip(self):
        """format_sexpr prints what parse_sexpr reads."""
        text = "(+ (* 2 x) (- y) 3)"
        assert format_sexpr(E(text)) == text
        assert format_sexpr(["?c", "n"]) == "?n:const"


class TestNodeKind:
    """Tests for node classification."""

    @pytest.mark.parametrize("expr, kind", [
        (3, "number"),
        (0.5, "number"),
        ("x", "symbol"),
        (["paren", "x"], "group"),
        (["-", "x"], "unary"),
        (["-", "x", 1], "operator"),
        (["+", 1, 2, 3], "operator"),
        (["abs", "x"], "function"),
    ])
    def test_kinds(self, expr, kind):
        """Every tree node has exactly one kind."""
        assert node_kind(expr) == kind

    @pytest.mark.parametrize("value", [None, True, [], {"a": 1}, [1, 2]])
    def test_not_a_node(self, value):
        """Values that are not tree nodes raise TypeError."""
        with pytest.raises(TypeError):
            node_kind(value)

    def test_unary_minus_is_not_an_operator(self):
        """Negation and subtraction share a head but not a kind."""
        assert is_unary_minus(["-", "x"])
        assert not is_operator(["-", "x"])
        assert is_operator(["-", "x", "y"], "-")

    def test_fraction_needs_integers(self):
        """Only integer over integer is a fraction."""
        assert is_fraction(["/", 1, 2])
        assert not is_fraction(["/", 1.0, 2])
        assert not is_fraction(["/", "x", 2])


class TestHelpers:
    """Tests for tree construction helpers."""

    def test_make_nary(self):
        """No operands gives the identity, one gives itself."""
        assert make_nary("+", []) == 0
        assert make_nary("*", []) == 1
        assert make_nary("+", ["x"]) == "x"
        assert make_nary("*", ["x", "y"]) == ["*", "x", "y"]

    def test_negate(self):
        """negate folds numbers and double negation."""
        assert negate(3) == -3
        assert negate(["-", "x"]) == "x"
        assert negate("x") == ["-", "x"]

    def test_unwrap(self):
        """unwrap strips stacked grouping."""
        assert unwrap(["paren", ["paren", "x"]]) == "x"
        assert unwrap(["+", "x", 1]) == ["+", "x", 1]


class TestPrecedence:
    """Tests for needs_parens."""

    def test_sum_inside_product(self):
        """A sum under a product needs parentheses."""
        parent = ["*", 2, ["+", "x", 1]]
        assert needs_parens(parent, 1, parent[2])

    def test_product_inside_sum(self):
        """A product under a sum does not."""
        parent = ["+", "x", ["*", 2, "y"]]
        assert not needs_parens(parent, 1, parent[2])

    def test_right_side_of_subtraction(self):
        """Subtraction binds left to right."""
        right = ["-", "a", ["-", "b", "c"]]
        left = ["-", ["-", "a", "b"], "c"]
        assert needs_parens(right, 1, right[2])
        assert not needs_parens(left, 0, left[1])

    def test_power_binds_right(self):
        """Exponentiation binds right to left."""
        left = ["^", ["^", "x", 2], 3]
        right = ["^", "x", ["^", 2, 3]]
        assert needs_parens(left, 0, left[1])
        assert not needs_parens(right, 1, right[2])

    def test_negation_of_sum(self):
        """A negated sum needs parentheses, a negated symbol does not."""
        assert needs_parens(["-", ["+", "a", "b"]], 0, ["+", "a", "b"])
        assert not needs_parens(["-", "x"], 0, "x")

    def test_function_arguments(self):
        """Function arguments never need parentheses."""
        assert not needs_parens(["abs", ["+", "x", 1]], 0, ["+", "x", 1])

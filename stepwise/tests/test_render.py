"""Tests for infix rendering."""

import pytest
from stepwise import E, render


class TestRender:
    """Tests for render()."""

    @pytest.mark.parametrize("text, expected", [
        ("4", "4"),
        ("0.5", "0.5"),
        ("-3", "-3"),
        ("x", "x"),
        ("(+ 2 2)", "2 + 2"),
        ("(+ (* 2 (^ x 2)) (* 11 x) 12)", "2x^2 + 11x + 12"),
        ("(+ x -5)", "x - 5"),
        ("(+ x (- y))", "x - y"),
        ("(+ x (* -3 y))", "x - 3y"),
        ("(* -1 x)", "-x"),
        ("(* -1 (^ x 2))", "-x^2"),
        ("(+ a (* -1 x))", "a - x"),
        ("(+ a (* -1 x y))", "a - x * y"),
        ("(* 2 (paren (+ x 1)))", "2 * (x + 1)"),
        ("(* 2 (+ x 1))", "2 * (x + 1)"),
        ("(* 2 x x)", "2x * x"),
        ("(- x)", "-x"),
        ("(- (+ x 1))", "-(x + 1)"),
        ("(/ x (* 2 y))", "x / (2y)"),
        ("(- a (- b c))", "a - (b - c)"),
        ("(^ (- x) 2)", "(-x)^2"),
        ("(sqrt 9)", "sqrt(9)"),
        ("(nthRoot 27 3)", "nthRoot(27, 3)"),
    ])
    def test_render(self, text, expected):
        """Trees render as canonical infix text."""
        assert render(E(text)) == expected

    def test_integral_float(self):
        """Whole floats print without a fraction part."""
        assert render(4.0) == "4"

    def test_not_a_tree(self):
        """Rendering a non-tree raises TypeError."""
        with pytest.raises(TypeError):
            render(None)

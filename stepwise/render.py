"""
Canonical infix rendering of expression trees.

    render(E("(+ (* 2 (^ x 2)) (* 11 x) 12)"))   # "2x^2 + 11x + 12"
    render(E("(+ x -5)"))                        # "x - 5"
    render(E("(* 2 (paren (+ x 1)))"))           # "2 * (x + 1)"

Parentheses are printed for grouping wrappers and wherever precedence
demands them, so a tree without wrappers still renders unambiguously.
"""

from .expr import (
    is_number, is_operator, is_symbol, is_unary_minus, make_nary, needs_parens, node_kind,
)
from .rewriter import ExprType


def render(expr: ExprType) -> str:
    """Render a tree as infix text."""
    kind = node_kind(expr)
    if kind == "number":
        return _format_number(expr)
    if kind == "symbol":
        return expr
    if kind == "group":
        return f"({render(expr[1])})"
    if kind == "function":
        return f"{expr[0]}({', '.join(render(arg) for arg in expr[1:])})"
    if kind == "unary":
        return "-" + _operand(expr, 0, expr[1])

    op = expr[0]
    if op == "+":
        return _render_sum(expr)
    if op == "*":
        return _render_product(expr)
    if op == "^":
        return f"{_operand(expr, 0, expr[1])}^{_operand(expr, 1, expr[2])}"
    return f"{_operand(expr, 0, expr[1])} {op} {_operand(expr, 1, expr[2])}"


def _format_number(n) -> str:
    if isinstance(n, float) and n.is_integer() and abs(n) < 1e16:
        return str(int(n))
    return str(n)


def _operand(parent: ExprType, index: int, child: ExprType) -> str:
    text = render(child)
    if needs_parens(parent, index, child):
        return f"({text})"
    return text


def _render_sum(expr: ExprType) -> str:
    parts = [_operand(expr, 0, expr[1])]
    for index, term in enumerate(expr[2:], 1):
        subtracted = _subtracted(term)
        if subtracted is None:
            parts.append(" + " + _operand(expr, index, term))
        else:
            # print as the right operand of a subtraction
            parts.append(" - " + _operand(["-", 0, subtracted], 1, subtracted))
    return "".join(parts)


def _subtracted(term: ExprType):
    """For a term that reads as `- t`, return t; otherwise None."""
    if is_number(term) and term < 0:
        return -term
    if is_unary_minus(term):
        return term[1]
    if is_operator(term, "*") and is_number(term[1]) and term[1] < 0:
        if term[1] == -1:
            return make_nary("*", term[2:])
        return ["*", -term[1]] + term[2:]
    return None


def _render_product(expr: ExprType) -> str:
    factors = expr[1:]
    parts = [_operand(expr, index, factor) for index, factor in enumerate(factors)]
    if len(factors) >= 2 and is_number(factors[0]) and _implicit(factors[1]):
        # -1x reads as -x
        coefficient = "-" if factors[0] == -1 else parts[0]
        parts[0:2] = [coefficient + parts[1]]
    return " * ".join(parts)


def _implicit(factor: ExprType) -> bool:
    """A coefficient is written right next to a symbol or a symbol power: 2x, 3x^2."""
    return is_symbol(factor) or (is_operator(factor, "^") and is_symbol(factor[1]))

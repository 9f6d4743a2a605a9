"""Numeric evaluation of operators and built-in functions."""

from ..changes import ChangeRecord, ChangeType
from ..expr import is_function, is_number, is_operator, is_unary_minus, unwrap
from ..rewriter import ARITHMETIC_PRELUDE, FUNCTION_PRELUDE, fold
from .search import preorder


def _numeric_args(node: list):
    args = [unwrap(arg) for arg in node[1:]]
    if all(is_number(arg) for arg in args):
        return args
    return None


@preorder
def evaluate_arithmetic(node: list) -> ChangeRecord:
    """
    Evaluate the first operator whose operands are all numbers.

    Results are exact: 2/4 and 2^-1 are left for the fraction rules.
    """
    if is_operator(node) or is_unary_minus(node):
        args = _numeric_args(node)
        if args is not None:
            value = fold(node[0], args, ARITHMETIC_PRELUDE)
            if value is not None:
                return ChangeRecord(ChangeType.SIMPLIFY_ARITHMETIC, node, value)
    return ChangeRecord.no_change(node)


@preorder
def evaluate_functions(node: list) -> ChangeRecord:
    """abs(-4) -> 4, sqrt(9) -> 3, nthRoot(27, 3) -> 3; inexact roots stay."""
    if is_function(node) and node[0] in FUNCTION_PRELUDE:
        args = _numeric_args(node)
        if args is not None:
            value = fold(node[0], args, FUNCTION_PRELUDE)
            if value is not None:
                change = ChangeType.ABSOLUTE_VALUE if node[0] == "abs" else ChangeType.ROOT_VALUE
                return ChangeRecord(change, node, value)
    return ChangeRecord.no_change(node)

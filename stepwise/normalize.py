"""
Normalization passes run between rewrite attempts.

Both passes are pure and idempotent, and return new trees.
"""

from .expr import (
    GROUP, NARY_OPERATORS, is_group, is_operator, make_nary, needs_parens, unwrap,
)
from .rewriter import ExprType


def flatten(expr: ExprType) -> ExprType:
    """
    Collapse nested chains of the same associative operator.

        (+ a (+ b c))          -> (+ a b c)
        (* 2 (paren (* x y)))  -> (* 2 x y)
        (+ x)                  -> x
    """
    if not isinstance(expr, list) or not expr:
        return expr

    head = expr[0]
    children = [flatten(child) for child in expr[1:]]
    if head not in NARY_OPERATORS:
        return [head] + children

    items = []
    for child in children:
        core = unwrap(child)
        if is_operator(core, head):
            items.extend(core[1:])
        else:
            items.append(child)
    return make_nary(head, items)


def strip_redundant_grouping(expr: ExprType) -> ExprType:
    """
    Remove grouping wrappers that do not change how the tree reads.

    A wrapper stays only where the child would otherwise bind too loosely
    for its parent, e.g. the sum in (* 2 (paren (+ x 1))). Stacked
    wrappers collapse to one, and the root is never wrapped.
    """
    return _strip(unwrap(expr))


def _strip(expr: ExprType) -> ExprType:
    if not isinstance(expr, list) or not expr:
        return expr

    result = [expr[0]]
    for index, child in enumerate(expr[1:]):
        core = _strip(unwrap(child))
        if is_group(child) and needs_parens(expr, index, core):
            result.append([GROUP, core])
        else:
            result.append(core)
    return result


def normalize(expr: ExprType) -> ExprType:
    """Flatten, then strip redundant grouping."""
    return strip_redundant_grouping(flatten(expr))

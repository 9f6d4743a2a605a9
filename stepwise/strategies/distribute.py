"""
Distribution of products and negation over sums.

    -(a + b)            ->  -a + -b
    2 * (x + 1)         ->  2x + 2
    (a + b) * (c + d)   ->  a*c + a*d + b*c + b*d

Multiplying two sums is explained term by term: one substep distributes
the first sum over the second, then one substep per term multiplies it
through.
"""

from typing import List

from ..changes import ChangeRecord, ChangeType
from ..expr import is_operator, is_unary_minus, make_nary, negate, unwrap
from ..rewriter import ExprType
from .search import first_change, preorder


def _factors(expr: ExprType) -> List:
    expr = unwrap(expr)
    if is_operator(expr, "*"):
        return expr[1:]
    return [expr]


def times(a: ExprType, b: ExprType) -> ExprType:
    """Multiply two trees into one flat product."""
    return make_nary("*", _factors(a) + _factors(b))


def distribute_negation(node: list) -> ChangeRecord:
    if is_unary_minus(node) and is_operator(unwrap(node[1]), "+"):
        result = ["+"] + [negate(term) for term in unwrap(node[1])[1:]]
        return ChangeRecord(ChangeType.DISTRIBUTE_NEGATIVE_ONE, node, result)
    return ChangeRecord.no_change(node)


def distribute_product(node: list) -> ChangeRecord:
    """
    Distribute the first sum in a product together with its neighbor.

    The neighbor is the factor to the left of the sum, or the one to its
    right when the sum comes first. Other factors are left in place.
    """
    if not is_operator(node, "*"):
        return ChangeRecord.no_change(node)
    factors = node[1:]
    sums = [i for i, f in enumerate(factors) if is_operator(unwrap(f), "+")]
    if not sums:
        return ChangeRecord.no_change(node)

    left = max(sums[0] - 1, 0)
    a, b = unwrap(factors[left]), unwrap(factors[left + 1])

    def within(expr: ExprType) -> ExprType:
        return make_nary("*", factors[:left] + [expr] + factors[left + 2:])

    if not (is_operator(a, "+") and is_operator(b, "+")):
        if is_operator(a, "+"):
            expanded = ["+"] + [times(term, b) for term in a[1:]]
        else:
            expanded = ["+"] + [times(a, term) for term in b[1:]]
        return ChangeRecord(ChangeType.DISTRIBUTE, node, within(expanded))

    # Sum times sum: a1*(b) + a2*(b) + ..., then expand each term
    rows = [[times(term, b)] for term in a[1:]]
    states = [["+"] + [t for row in rows for t in row]]
    for index, term in enumerate(a[1:]):
        rows[index] = [times(term, other) for other in b[1:]]
        states.append(["+"] + [t for row in rows for t in row])

    substeps = [ChangeRecord(ChangeType.DISTRIBUTE, node, within(states[0]))]
    for before, after in zip(states, states[1:]):
        substeps.append(ChangeRecord(ChangeType.EXPAND_TERM, within(before), within(after)))
    return ChangeRecord(ChangeType.DISTRIBUTE, node, within(states[-1]), substeps)


@preorder
def distribute(node: list) -> ChangeRecord:
    return first_change(node, distribute_negation, distribute_product)

"""
Collecting and combining like terms.

In a sum, terms with the same symbolic part are added:

    2x + 3 + x      ->  3x + 3
    2x + 4x^2 + x   ->  4x^2 + 3x

The result lists the highest degree first and constants last.

In a product, numbers are multiplied together and powers of the same
symbol have their exponents added:

    2 * x * 4 * x^2 ->  8x^3

When the like terms are not already next to each other the record holds
two substeps, one collecting them and one combining them.
"""

from typing import Dict, List, Optional, Tuple

from ..changes import ChangeRecord, ChangeType
from ..expr import (
    format_sexpr, is_number, is_operator, is_symbol, is_unary_minus, make_nary, unwrap,
)
from ..rewriter import ExprType
from .search import first_change, preorder


def _collected(node: list, ordered: List, combined: List, change: ChangeType) -> ChangeRecord:
    op = node[0]
    result = make_nary(op, combined)
    if ordered == node[1:]:
        return ChangeRecord(change, node, result)
    collected = [op] + ordered
    return ChangeRecord(ChangeType.COLLECT_AND_COMBINE_LIKE_TERMS, node, result, [
        ChangeRecord(ChangeType.COLLECT_LIKE_TERMS, node, collected),
        ChangeRecord(change, collected, result),
    ])


# ============================================================
# Sums
# ============================================================

def split_term(term: ExprType) -> Tuple:
    """
    Split a term into (coefficient, symbolic part).

    The symbolic part is None for a plain number.

        (* 3 x y)   -> (3, (* x y))
        (- x)       -> (-1, x)
        x           -> (1, x)
    """
    term = unwrap(term)
    if is_number(term):
        return term, None
    if is_unary_minus(term):
        coefficient, rest = split_term(term[1])
        return -coefficient, rest
    if is_operator(term, "*") and is_number(term[1]):
        return term[1], make_nary("*", term[2:])
    return 1, term


def build_term(coefficient, rest: Optional[ExprType]) -> ExprType:
    if rest is None:
        return coefficient
    if coefficient == 1:
        return rest
    if coefficient == -1:
        return ["-", rest]
    if is_operator(rest, "*"):
        return ["*", coefficient] + rest[1:]
    return ["*", coefficient, rest]


def _like_key(rest: ExprType) -> str:
    """Factor order does not matter: x*y and y*x are like terms."""
    factors = rest[1:] if is_operator(rest, "*") else [rest]
    return " ".join(sorted(format_sexpr(unwrap(f)) for f in factors))


def _degree(rest: Optional[ExprType]):
    """Sum of the numeric exponents of a symbolic part; 0 for a constant."""
    if rest is None:
        return 0
    factors = rest[1:] if is_operator(rest, "*") else [rest]
    total = 0
    for factor in factors:
        base, exponent = split_factor(factor)
        if is_symbol(base):
            total += exponent
    return total


def add_like_terms(node: list) -> ChangeRecord:
    if not is_operator(node, "+"):
        return ChangeRecord.no_change(node)

    # keyed by symbolic part; plain numbers go under None
    groups: Dict[Optional[str], List] = {}
    for term in node[1:]:
        coefficient, rest = split_term(term)
        key = None if rest is None else _like_key(rest)
        groups.setdefault(key, []).append((term, coefficient, rest))
    if all(len(group) == 1 for group in groups.values()):
        return ChangeRecord.no_change(node)

    # highest degree first, constants last, ties in order of appearance
    keys = sorted(
        groups,
        key=lambda k: (k is None, -_degree(groups[k][0][2])),
    )

    ordered, combined = [], []
    for key in keys:
        group = groups[key]
        ordered.extend(term for term, _, _ in group)
        if len(group) == 1:
            combined.append(group[0][0])
            continue
        total = sum(coefficient for _, coefficient, _ in group)
        if total != 0:
            combined.append(build_term(total, group[0][2]))

    return _collected(node, ordered, combined, ChangeType.ADD_LIKE_TERMS)


# ============================================================
# Products
# ============================================================

def split_factor(factor: ExprType) -> Tuple:
    """(^ x 3) -> (x, 3); x -> (x, 1)"""
    factor = unwrap(factor)
    if is_operator(factor, "^") and is_number(factor[2]):
        return factor[1], factor[2]
    return factor, 1


def multiply_like_terms(node: list) -> ChangeRecord:
    if not is_operator(node, "*"):
        return ChangeRecord.no_change(node)

    numbers = [f for f in node[1:] if is_number(f)]
    # powers of a symbol group by the symbol; any other factor stands alone
    groups: Dict[str, List] = {}
    for index, factor in enumerate(node[1:]):
        if is_number(factor):
            continue
        base, exponent = split_factor(factor)
        key = base if is_symbol(base) else f"#{index}"
        groups.setdefault(key, []).append((factor, base, exponent))
    if len(numbers) < 2 and all(len(group) == 1 for group in groups.values()):
        return ChangeRecord.no_change(node)

    ordered = list(numbers)
    combined = []
    if numbers:
        coefficient = 1
        for n in numbers:
            coefficient *= n
        if coefficient != 1 or not groups:
            combined.append(coefficient)

    for group in groups.values():
        ordered.extend(factor for factor, _, _ in group)
        if len(group) == 1:
            combined.append(group[0][0])
            continue
        base = group[0][1]
        exponent = sum(e for _, _, e in group)
        if exponent == 1:
            combined.append(base)
        elif exponent != 0:
            combined.append(["^", base, exponent])

    return _collected(node, ordered, combined, ChangeType.MULTIPLY_LIKE_TERMS)


def rearrange_coefficient(node: list) -> ChangeRecord:
    """(* x 3) -> (* 3 x) for a single numeric factor that is not first."""
    if not is_operator(node, "*"):
        return ChangeRecord.no_change(node)
    numbers = [i for i, f in enumerate(node[1:], 1) if is_number(f)]
    if len(numbers) != 1 or numbers[0] == 1:
        return ChangeRecord.no_change(node)
    index = numbers[0]
    result = ["*", node[index]] + node[1:index] + node[index + 1:]
    return ChangeRecord(ChangeType.REARRANGE_COEFFICIENT, node, result)


@preorder
def collect_and_combine(node: list) -> ChangeRecord:
    return first_change(node, add_like_terms, multiply_like_terms, rearrange_coefficient)

"""
Fraction strategies.

simplify_fractions cancels common factors of a fraction and adds
numeric fractions in a sum; break_up_numerator splits a sum over its
denominator; multiply_fractions merges a product of fractions into one fraction.
"""

import copy
import math
from typing import List, Tuple

from ..changes import ChangeRecord, ChangeType
from ..expr import is_fraction, is_integer, is_operator, make_nary, negate, unwrap
from .search import first_change, preorder


# ============================================================
# Reducing and adding fractions
# ============================================================

def _split_factors(side) -> Tuple[int, List]:
    """(* 2 x 3 y) -> (6, [x, y]); the integer factors are multiplied."""
    side = unwrap(side)
    factors = [unwrap(f) for f in side[1:]] if is_operator(side, "*") else [side]
    coefficient = 1
    rest = []
    for factor in factors:
        if is_integer(factor):
            coefficient *= factor
        else:
            rest.append(factor)
    return coefficient, rest


def reduce_fraction(node: list) -> ChangeRecord:
    """
    Cancel what the numerator and denominator have in common: the gcd
    of their integer coefficients and any equal factors. A negative
    denominator moves its sign up.

        (/ 6 8)              -> (/ 3 4)
        (/ (* 4 x) 6)        -> (/ (* 2 x) 3)
        (/ (* 2 x) x)        -> 2
        (/ 2 (* 4 x))        -> (/ 1 (* 2 x))
        (/ (* 6 x) (* 5 x))  -> (/ 6 5)
    """
    if not is_operator(node, "/"):
        return ChangeRecord.no_change(node)
    num_coefficient, num_rest = _split_factors(node[1])
    den_coefficient, den_rest = _split_factors(node[2])
    if den_coefficient == 0:
        return ChangeRecord.no_change(node)

    remaining = list(den_rest)
    kept = []
    for factor in num_rest:
        if factor in remaining:
            remaining.remove(factor)
        else:
            kept.append(factor)

    divisor = math.gcd(num_coefficient, den_coefficient)
    if den_coefficient < 0:
        divisor = -divisor
    if divisor == 1 and len(kept) == len(num_rest):
        return ChangeRecord.no_change(node)

    num_coefficient //= divisor
    den_coefficient //= divisor
    if num_coefficient == -1 and kept:
        numerator = negate(make_nary("*", kept))
    elif num_coefficient == 1 and kept:
        numerator = make_nary("*", kept)
    else:
        numerator = make_nary("*", [num_coefficient] + kept)

    if den_coefficient == 1 and not remaining:
        return ChangeRecord(ChangeType.SIMPLIFY_FRACTION, node, numerator)
    if den_coefficient == 1:
        denominator = make_nary("*", remaining)
    else:
        denominator = make_nary("*", [den_coefficient] + remaining)
    return ChangeRecord(ChangeType.SIMPLIFY_FRACTION, node, ["/", numerator, denominator])


def _as_fraction(term) -> Tuple[int, int]:
    if is_fraction(term):
        return term[1], term[2]
    return term, 1


def add_constant_fractions(node: list) -> ChangeRecord:
    """
    Add the integer fractions (and integers) of a sum.

    With unlike denominators the record carries two substeps: rewriting
    over the least common denominator, then adding the numerators.
    """
    if not is_operator(node, "+"):
        return ChangeRecord.no_change(node)
    terms = node[1:]
    positions = [i for i, t in enumerate(terms) if is_fraction(t) or is_integer(t)]
    if len(positions) < 2 or not any(is_fraction(terms[i]) for i in positions):
        return ChangeRecord.no_change(node)
    if any(is_fraction(terms[i]) and terms[i][2] == 0 for i in positions):
        return ChangeRecord.no_change(node)

    parts = [_as_fraction(terms[i]) for i in positions]
    lcd = 1
    for _, den in parts:
        lcd = lcd * abs(den) // math.gcd(lcd, abs(den))

    common = list(terms)
    numerators = []
    for i, (num, den) in zip(positions, parts):
        factor = lcd // den
        numerators.append(num * factor)
        if factor != 1 or not is_fraction(terms[i]):
            common[i] = ["/", num * factor, lcd]

    combined = ["/", make_nary("+", numerators), lcd]
    rest = [t for i, t in enumerate(terms) if i not in positions[1:]]
    rest[positions[0]] = combined
    result = make_nary("+", rest)

    if common == list(terms):
        return ChangeRecord(ChangeType.ADD_FRACTIONS, node, result)
    common_sum = ["+"] + common
    return ChangeRecord(ChangeType.ADD_FRACTIONS, node, result, [
        ChangeRecord(ChangeType.COMMON_DENOMINATOR, node, common_sum),
        ChangeRecord(ChangeType.ADD_NUMERATORS, common_sum, result),
    ])


@preorder
def simplify_fractions(node: list) -> ChangeRecord:
    return first_change(node, add_constant_fractions, reduce_fraction)


# ============================================================
# Splitting numerators
# ============================================================

@preorder
def break_up_numerator(node: list) -> ChangeRecord:
    """(/ (+ a b) d) -> (+ (/ a d) (/ b d))"""
    if is_operator(node, "/") and is_operator(unwrap(node[1]), "+"):
        denominator = node[2]
        terms = [["/", term, copy.deepcopy(denominator)] for term in unwrap(node[1])[1:]]
        return ChangeRecord(ChangeType.BREAK_UP_FRACTION, node, ["+"] + terms)
    return ChangeRecord.no_change(node)


# ============================================================
# Multiplying fractions
# ============================================================

@preorder
def multiply_fractions(node: list) -> ChangeRecord:
    """(* (/ a b) c (/ d e)) -> (/ (* a c d) (* b e))"""
    if not is_operator(node, "*"):
        return ChangeRecord.no_change(node)
    factors = [unwrap(f) for f in node[1:]]
    if not any(is_operator(f, "/") for f in factors):
        return ChangeRecord.no_change(node)

    numerators: List = []
    denominators: List = []
    for factor in factors:
        if is_operator(factor, "/"):
            numerators.append(factor[1])
            denominators.append(factor[2])
        else:
            numerators.append(factor)
    result = ["/", make_nary("*", numerators), make_nary("*", denominators)]
    return ChangeRecord(ChangeType.MULTIPLY_FRACTIONS, node, result)

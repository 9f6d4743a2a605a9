"""
Basic simplifications, always tried first.

    x^0 -> 1     x^1 -> x     1^x -> 1     x/1 -> x     0/x -> 0
    --x -> x     a - b -> a + -b     -1 * x -> -x     x / -1 -> -x
    x + 0 -> x   x * 1 -> x   x * 0 -> 0
"""

from ..changes import ChangeRecord, ChangeType
from ..expr import is_number, is_operator, is_unary_minus, make_nary, unwrap
from ..rules import RuleSet
from .search import first_change, preorder, rule_rewrite

BASIC_RULES = RuleSet.from_dsl('''
    [basics]
    @power-zero "power of zero reduced to one": (^ ?x 0) => 1 when (! not (! zero? :x))
    @power-one "exponent of one removed": (^ ?x 1) => :x
    @base-one "power of one reduced to one": (^ 1 ?x) => 1
    @divide-by-one "division by one removed": (/ ?x 1) => :x
    @zero-numerator "zero numerator reduced to zero": (/ 0 ?x) => 0 when (! not (! zero? :x))
    @double-minus "double negation resolved": (- (- ?x)) => :x
    @divide-by-negative-one "division by negative one rewritten as negation": (/ ?x -1) => (- :x)

    # A leading number after -1 is left to arithmetic
    @times-negative-one "multiplication by negative one rewritten as negation": (* -1 ?x) => (- :x) when (! not (! const? :x))
    @times-negative-one-many "multiplication by negative one rewritten as negation": (* -1 ?x ?xs...) => (- (* :x :xs...)) when (! not (! const? :x))

    # Both operands numeric is left to arithmetic
    @subtract-constant "subtraction rewritten as adding the opposite": (- ?a ?b:const) => (+ :a (! - :b)) when (! not (! const? :a))
    @subtract-term "subtraction rewritten as adding the opposite": (- ?a ?b) => (+ :a (- :b)) when (! not (! const? :b))
''')


def _is_zero(expr) -> bool:
    return is_number(expr) and expr == 0


def _is_one(expr) -> bool:
    return is_number(expr) and expr == 1


def reduce_multiplication_by_zero(node: list) -> ChangeRecord:
    if is_operator(node, "*") and any(_is_zero(f) for f in node[1:]):
        return ChangeRecord(ChangeType.REDUCE_MULTIPLICATION_BY_ZERO, node, 0)
    return ChangeRecord.no_change(node)


def remove_multiplying_by_one(node: list) -> ChangeRecord:
    if is_operator(node, "*") and any(_is_one(f) for f in node[1:]):
        kept = [f for f in node[1:] if not _is_one(f)]
        return ChangeRecord(ChangeType.REMOVE_MULTIPLYING_BY_ONE, node, make_nary("*", kept))
    return ChangeRecord.no_change(node)


def remove_adding_zero(node: list) -> ChangeRecord:
    if is_operator(node, "+") and any(_is_zero(t) for t in node[1:]):
        kept = [t for t in node[1:] if not _is_zero(t)]
        return ChangeRecord(ChangeType.REMOVE_ADDING_ZERO, node, make_nary("+", kept))
    return ChangeRecord.no_change(node)


def pull_negation_out(node: list) -> ChangeRecord:
    """
    Move negated factors' signs out of a product; an odd count goes onto
    a leading number, or around the whole product.

        (* 2 (- x))        -> (* -2 x)
        (* x (- y))        -> (- (* x y))
        (* (- x) (- x))    -> (* x x)
    """
    if not is_operator(node, "*"):
        return ChangeRecord.no_change(node)
    factors = [unwrap(f) for f in node[1:]]
    negated = sum(1 for f in factors if is_unary_minus(f))
    if not negated:
        return ChangeRecord.no_change(node)

    factors = [f[1] if is_unary_minus(f) else f for f in factors]
    if negated % 2 == 0:
        result = ["*"] + factors
    elif is_number(factors[0]):
        result = ["*", -factors[0]] + factors[1:]
    else:
        result = ["-", ["*"] + factors]
    return ChangeRecord(ChangeType.NEGATION_OUT_OF_PRODUCT, node, result)


_apply_basic_rules = rule_rewrite(BASIC_RULES)


@preorder
def simplify_basics(node: list) -> ChangeRecord:
    return first_change(
        node,
        _apply_basic_rules,
        reduce_multiplication_by_zero,
        remove_multiplying_by_one,
        remove_adding_zero,
        pull_negation_out,
    )

"""
Change records: what one rewrite did to an expression tree.

A strategy answers every probe with a ChangeRecord. A record with
`changed` false is the ordinary "nothing to do" answer, not an error.
A changed record may carry substeps, finer-grained records that explain
a composite rewrite one piece at a time; they are for the trace only and
never count as rewrites of their own.
"""

from enum import Enum
from typing import List, Optional

from .expr import format_sexpr
from .rewriter import ExprType


class ChangeType(Enum):
    """Which rule produced a rewrite. Descriptive only."""

    # simplify basics
    REDUCE_EXPONENT_BY_ZERO = "power of zero reduced to one"
    REMOVE_EXPONENT_BY_ONE = "exponent of one removed"
    REMOVE_EXPONENT_BASE_ONE = "power of one reduced to one"
    REDUCE_MULTIPLICATION_BY_ZERO = "product with zero reduced to zero"
    REMOVE_MULTIPLYING_BY_ONE = "multiplication by one removed"
    REMOVE_ADDING_ZERO = "addition of zero removed"
    REMOVE_DIVISION_BY_ONE = "division by one removed"
    REDUCE_ZERO_NUMERATOR = "zero numerator reduced to zero"
    RESOLVE_DOUBLE_MINUS = "double negation resolved"
    REMOVE_MULTIPLYING_BY_NEGATIVE_ONE = "multiplication by negative one rewritten as negation"
    REMOVE_DIVISION_BY_NEGATIVE_ONE = "division by negative one rewritten as negation"
    NEGATION_OUT_OF_PRODUCT = "negation moved out of the product"
    SUBTRACTION_TO_ADDITION = "subtraction rewritten as adding the opposite"

    # division chains
    SIMPLIFY_DIVISION = "division chain simplified"
    MULTIPLY_BY_INVERSE = "division by a fraction rewritten as multiplication"

    # fractions
    SIMPLIFY_FRACTION = "fraction reduced to lowest terms"
    ADD_FRACTIONS = "fractions added"
    COMMON_DENOMINATOR = "fractions rewritten over a common denominator"
    ADD_NUMERATORS = "numerators added over the common denominator"

    # arithmetic
    SIMPLIFY_ARITHMETIC = "arithmetic evaluated"

    # like terms
    COLLECT_AND_COMBINE_LIKE_TERMS = "like terms collected and combined"
    COLLECT_LIKE_TERMS = "like terms collected"
    ADD_LIKE_TERMS = "like terms added"
    MULTIPLY_LIKE_TERMS = "like factors multiplied"
    REARRANGE_COEFFICIENT = "coefficient moved to the front"

    # numerators
    BREAK_UP_FRACTION = "numerator split over the denominator"

    # products of fractions
    MULTIPLY_FRACTIONS = "fractions multiplied"

    # distribution
    DISTRIBUTE = "product distributed over the sum"
    DISTRIBUTE_NEGATIVE_ONE = "negation distributed over the sum"
    EXPAND_TERM = "term multiplied through the sum"

    # functions
    ABSOLUTE_VALUE = "absolute value evaluated"
    ROOT_VALUE = "root evaluated"

    def __str__(self) -> str:
        return self.value


class ChangeRecord:
    """
    The outcome of one rewrite attempt.

    Attributes:
        changed: Whether a rewrite happened
        change_type: The ChangeType of the rewrite, None when unchanged
        before: Tree the rewrite was applied to
        after: Tree the rewrite produced (same as before when unchanged)
        substeps: Nested records explaining a composite rewrite
    """

    def __init__(self, change_type: Optional[ChangeType], before: ExprType,
                 after: ExprType, substeps: Optional[List['ChangeRecord']] = None):
        self.change_type = change_type
        self.before = before
        self.after = after
        self.substeps = list(substeps) if substeps and change_type is not None else []

    @property
    def changed(self) -> bool:
        return self.change_type is not None

    @classmethod
    def no_change(cls, expr: ExprType) -> 'ChangeRecord':
        """The record for a probe that rewrote nothing."""
        return cls(None, expr, expr)

    def __bool__(self) -> bool:
        return self.changed

    def __repr__(self) -> str:
        if not self.changed:
            return f"ChangeRecord(no change: {format_sexpr(self.after)})"
        text = f"{self.change_type}: {format_sexpr(self.before)} -> {format_sexpr(self.after)}"
        if self.substeps:
            text += f" [{len(self.substeps)} substeps]"
        return f"ChangeRecord({text})"

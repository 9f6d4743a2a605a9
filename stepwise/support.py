"""
Detection of expression shapes the simplifier does not handle.

Such expressions get no explanation at all: the simplifier returns an
empty trace for them instead of raising.
"""

import math
from typing import Dict, Tuple

from .expr import GROUP
from .rewriter import ExprType

# Functions the strategies know how to treat, with their allowed arities
SUPPORTED_FUNCTIONS: Dict[str, Tuple[int, ...]] = {
    "abs": (1,),
    "sqrt": (1,),
    "nthRoot": (1, 2),
}

# Allowed operand counts; + and * take one or more
_OPERATOR_ARITY: Dict[str, Tuple[int, ...]] = {
    "-": (1, 2),
    "/": (2,),
    "^": (2,),
    GROUP: (1,),
}


def has_unsupported_nodes(expr: ExprType) -> bool:
    """True if any node of `expr` is of a kind the simplifier cannot process."""
    if isinstance(expr, bool):
        return True
    if isinstance(expr, (int, float)):
        return not math.isfinite(expr)
    if isinstance(expr, str):
        return not expr.isidentifier()
    if not isinstance(expr, list) or not expr:
        return True

    head, args = expr[0], expr[1:]
    if not isinstance(head, str):
        return True
    if head in ("+", "*"):
        if not args:
            return True
    elif head in _OPERATOR_ARITY:
        if len(args) not in _OPERATOR_ARITY[head]:
            return True
    elif head in SUPPORTED_FUNCTIONS:
        if len(args) not in SUPPORTED_FUNCTIONS[head]:
            return True
    else:
        return True

    return any(has_unsupported_nodes(arg) for arg in args)


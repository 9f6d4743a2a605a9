"""
Simplification strategies.

A strategy is a callable taking a whole expression tree and returning a
ChangeRecord for at most one rewrite somewhere in it. Strategies never
raise for "nothing to do"; they answer with an unchanged record.

DEFAULT_STRATEGIES lists them in the order the dispatcher tries them.
"""

from typing import List

from .arithmetic import evaluate_arithmetic, evaluate_functions
from .basics import simplify_basics
from .distribute import distribute
from .division import simplify_division
from .fractions import break_up_numerator, multiply_fractions, simplify_fractions
from .like_terms import collect_and_combine
from .search import Strategy, first_change, lift, preorder, rule_rewrite

DEFAULT_STRATEGIES: List[Strategy] = [
    simplify_basics,
    simplify_division,
    simplify_fractions,
    evaluate_arithmetic,
    collect_and_combine,
    break_up_numerator,
    multiply_fractions,
    distribute,
    evaluate_functions,
]

STRATEGIES = {strategy.__name__: strategy for strategy in DEFAULT_STRATEGIES}


def get_strategies(*names: str) -> List[Strategy]:
    """
    Look up built-in strategies by name, keeping the given order.

    Raises:
        ValueError: If a name is not a built-in strategy
    """
    unknown = [name for name in names if name not in STRATEGIES]
    if unknown:
        raise ValueError(
            f"Unknown strategy: {', '.join(unknown)}. "
            f"Available: {', '.join(STRATEGIES)}"
        )
    return [STRATEGIES[name] for name in names]


__all__ = [
    "Strategy",
    "DEFAULT_STRATEGIES",
    "STRATEGIES",
    "get_strategies",
    "preorder",
    "lift",
    "first_change",
    "rule_rewrite",
    "simplify_basics",
    "simplify_division",
    "simplify_fractions",
    "evaluate_arithmetic",
    "collect_and_combine",
    "break_up_numerator",
    "multiply_fractions",
    "distribute",
    "evaluate_functions",
]

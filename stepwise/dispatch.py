"""
Strategy dispatch: one rewrite per call, first strategy that fires wins.
"""

import copy
from typing import Iterable, List, Optional

from .changes import ChangeRecord
from .normalize import flatten, strip_redundant_grouping
from .rewriter import ExprType
from .strategies import DEFAULT_STRATEGIES, Strategy


class Dispatcher:
    """
    Tries an ordered list of strategies on a tree.

    The tree is re-normalized after every probe, whether or not the
    strategy fired, so each strategy sees a flattened tree without
    redundant grouping.

    Example:
        >>> record = Dispatcher().dispatch(["+", 2, 2])
        >>> record.change_type, record.after
        (<ChangeType.SIMPLIFY_ARITHMETIC: 'arithmetic evaluated'>, 4)
    """

    def __init__(self, strategies: Optional[Iterable[Strategy]] = None):
        self.strategies: List[Strategy] = list(
            DEFAULT_STRATEGIES if strategies is None else strategies
        )

    def dispatch(self, expr: ExprType) -> ChangeRecord:
        """
        Apply the first strategy that changes `expr`.

        Returns:
            A new record for the rewrite, its `after` normalized and
            copied, or a no-change record for the (normalized) tree.
            The strategy's own record is left as it was returned.
        """
        tree = expr
        for strategy in self.strategies:
            record = strategy(tree)
            tree = strip_redundant_grouping(record.after)
            if record.changed:
                return ChangeRecord(record.change_type, record.before,
                                    copy.deepcopy(flatten(tree)), record.substeps)
            tree = flatten(tree)
        return ChangeRecord.no_change(tree)

    def __len__(self) -> int:
        return len(self.strategies)

    def __repr__(self) -> str:
        names = [getattr(s, "__name__", repr(s)) for s in self.strategies]
        return f"Dispatcher([{', '.join(names)}])"

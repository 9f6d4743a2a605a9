"""
Tree search for node-level rewrites.

A node rewrite looks at a single compound node and answers with a
ChangeRecord whose trees are that node before and after. `preorder`
turns it into a strategy over whole trees: the rewrite is applied at the
first node, parents before children, where it fires, and the record,
substeps included, is lifted so that every tree in it is the whole
expression.
"""

import functools
from typing import Callable, Optional, Tuple

from ..changes import ChangeRecord, ChangeType
from ..expr import unwrap
from ..rewriter import ExprType
from ..rules import RuleSet

Strategy = Callable[[ExprType], ChangeRecord]
NodeRewrite = Callable[[list], ChangeRecord]
Path = Tuple[int, ...]


def preorder(rewrite: NodeRewrite) -> Strategy:
    """Apply `rewrite` at the first node that it changes, parents before children."""
    @functools.wraps(rewrite)
    def strategy(expr: ExprType) -> ChangeRecord:
        found = _search(expr, rewrite, ())
        if found is None:
            return ChangeRecord.no_change(expr)
        path, record = found
        return lift(expr, path, record)
    return strategy


def _search(node: ExprType, rewrite: NodeRewrite,
            path: Path) -> Optional[Tuple[Path, ChangeRecord]]:
    if not isinstance(node, list):
        return None

    record = rewrite(node)
    if record.changed:
        return path, record

    for index, child in enumerate(node[1:], 1):
        found = _search(child, rewrite, path + (index,))
        if found:
            return found
    return None


def replace_at(expr: ExprType, path: Path, new: ExprType) -> ExprType:
    """Return a copy of `expr` with the node at `path` replaced by `new`."""
    if not path:
        return new
    index = path[0]
    return expr[:index] + [replace_at(expr[index], path[1:], new)] + expr[index + 1:]


def lift(expr: ExprType, path: Path, record: ChangeRecord) -> ChangeRecord:
    """Re-express a node-level record (and its substeps) in terms of `expr`."""
    return ChangeRecord(
        record.change_type,
        replace_at(expr, path, record.before),
        replace_at(expr, path, record.after),
        [lift(expr, path, substep) for substep in record.substeps],
    )


def first_change(node: ExprType, *rewrites: NodeRewrite) -> ChangeRecord:
    """Try node rewrites in order; return the first record that changed."""
    for rewrite in rewrites:
        record = rewrite(node)
        if record.changed:
            return record
    return ChangeRecord.no_change(node)


def rule_rewrite(rules: RuleSet) -> NodeRewrite:
    """
    Node rewrite backed by a rule set.

    Each rule's description must be the value of the ChangeType it
    produces, e.g. "division chain simplified". Patterns see the node's
    operands with grouping wrappers removed.
    """
    def rewrite(node: ExprType) -> ChangeRecord:
        probe = [node[0]] + [unwrap(child) for child in node[1:]]
        result, applied = rules.apply_once(probe)
        if applied is None:
            return ChangeRecord.no_change(node)
        return ChangeRecord(ChangeType(applied.description), node, result)
    return rewrite

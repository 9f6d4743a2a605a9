"""Division chains: a/b/c -> a/(b*c) and a/(b/c) -> a*(c/b)."""

from ..changes import ChangeRecord
from ..rules import RuleSet
from .search import preorder, rule_rewrite

DIVISION_RULES = RuleSet.from_dsl('''
    [division]
    @division-chain "division chain simplified": (/ (/ ?a ?b) ?c) => (/ :a (* :b :c))
    @divide-by-fraction "division by a fraction rewritten as multiplication": (/ ?a (/ ?b ?c)) => (* :a (/ :c :b))
''')

_apply_division_rules = rule_rewrite(DIVISION_RULES)


@preorder
def simplify_division(node: list) -> ChangeRecord:
    return _apply_division_rules(node)

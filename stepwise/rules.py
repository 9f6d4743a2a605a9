"""
Rule sets and the rule DSL.

Structural rewrites such as x^0 -> 1 are written as pattern/skeleton
rules and loaded from DSL text:

    # Comment
    [group]
    @rule-name: (pattern) => (skeleton)
    @rule-name "description": (pattern) => (skeleton)
    @rule-name[priority] "description": (pattern) => (skeleton) when (guard)

Pattern syntax:
    ?x or ?x:expr      - any subtree, bound to x
    ?x:const           - a number
    ?x:var             - a symbol
    ?xs...             - remaining operands

Skeleton syntax:
    :x                 - bound value of x
    :xs...             - spliced operand list
    (! op args...)     - folded with the rule set's prelude

Guards are skeletons evaluated with the same prelude; the rule fires only
when the guard comes out truthy.
"""

import re
from typing import List, Tuple, Optional

from .expr import parse_sexpr, format_sexpr
from .rewriter import match, instantiate, ExprType, FoldFuncsType, FULL_PRELUDE


class RuleMetadata:
    """Name, description, group tags, guard and priority of a rule."""

    def __init__(self, name: Optional[str] = None, description: Optional[str] = None,
                 tags: Optional[List[str]] = None, condition: Optional[ExprType] = None,
                 priority: int = 0):
        self.name = name
        self.description = description
        self.tags = tags or []
        self.condition = condition
        self.priority = priority  # Higher priority fires first

    def __repr__(self) -> str:
        if self.name:
            base = f"@{self.name}[{self.priority}]" if self.priority else f"@{self.name}"
            if self.description:
                base += f" \"{self.description}\""
        else:
            base = "<anonymous>"

        if self.condition:
            base += f" when {format_sexpr(self.condition)}"
        return base


_HEADER_FORMS = [
    # @name[priority] "description": body
    (re.compile(r'@([\w-]+)\[(\d+)\]\s+"([^"]+)":\s*(.+)'), ("name", "priority", "description")),
    # @name[priority]: body
    (re.compile(r'@([\w-]+)\[(\d+)\]:\s*(.+)'), ("name", "priority")),
    # @name "description": body
    (re.compile(r'@([\w-]+)\s+"([^"]+)":\s*(.+)'), ("name", "description")),
    # @name: body
    (re.compile(r'@([\w-]+):\s*(.+)'), ("name",)),
]


def _split_guard(text: str) -> Tuple[str, Optional[str]]:
    """Split "skeleton when guard" on a top-level `when`."""
    depth = 0
    for i, c in enumerate(text):
        if c == '(':
            depth += 1
        elif c == ')':
            depth -= 1
        elif (depth == 0 and text.startswith('when', i)
              and (i == 0 or text[i - 1].isspace())
              and (i + 4 >= len(text) or text[i + 4].isspace())):
            return text[:i].strip(), text[i + 4:].strip()
    return text.strip(), None


def parse_rule_line(line: str) -> Optional[Tuple[RuleMetadata, ExprType, ExprType]]:
    """
    Parse a single rule line.

    Returns:
        (metadata, pattern, skeleton), or None for blank lines, comments
        and lines that are not rules
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return None

    metadata = RuleMetadata()
    if line.startswith('@'):
        for regex, fields in _HEADER_FORMS:
            match_obj = regex.match(line)
            if match_obj:
                for field, value in zip(fields, match_obj.groups()):
                    setattr(metadata, field, int(value) if field == "priority" else value)
                line = match_obj.groups()[-1]
                break

    if '=>' not in line:
        return None

    pattern_str, rest = line.split('=>', 1)
    skeleton_str, condition_str = _split_guard(rest)
    if condition_str is not None:
        metadata.condition = parse_sexpr(condition_str)

    pattern = parse_sexpr(pattern_str)
    skeleton = parse_sexpr(skeleton_str)
    if pattern is None or skeleton is None:
        return None

    return (metadata, pattern, skeleton)


def load_rules_from_dsl(text: str) -> List[Tuple[RuleMetadata, List]]:
    """
    Load rules from DSL text. A `[group]` line tags the rules after it.

    Returns:
        List of (metadata, [pattern, skeleton]) tuples
    """
    rules = []
    current_group = None

    for line in text.split('\n'):
        line_stripped = line.strip()

        if line_stripped.startswith('[') and line_stripped.endswith(']'):
            current_group = line_stripped[1:-1].strip()
            continue

        result = parse_rule_line(line)
        if result:
            metadata, pattern, skeleton = result
            if current_group and current_group not in metadata.tags:
                metadata.tags.append(current_group)
            rules.append((metadata, [pattern, skeleton]))
    return rules


class RuleSet:
    """
    An ordered set of rewrite rules.

    Rules are kept sorted by priority (descending, stable), and the first
    rule whose pattern matches and whose guard holds is the one applied.

    Example:
        rules = RuleSet.from_dsl('''
            @power-zero "power of zero reduced to one": (^ ?x 0) => 1
        ''')
        result, applied = rules.apply_once(E("(^ y 0)"))   # 1, @power-zero
    """

    def __init__(self, fold_funcs: Optional[FoldFuncsType] = None):
        """
        Args:
            fold_funcs: Prelude for (! ...) skeletons and guards.
                Default: FULL_PRELUDE.
        """
        self._rules: List[List] = []
        self._metadata: List[RuleMetadata] = []
        self._fold_funcs: FoldFuncsType = FULL_PRELUDE if fold_funcs is None else fold_funcs

    def load_dsl(self, text: str) -> 'RuleSet':
        """Load rules from DSL text; priorities are re-sorted after loading."""
        for metadata, rule in load_rules_from_dsl(text):
            self._rules.append(rule)
            self._metadata.append(metadata)
        ordered = sorted(
            zip(self._metadata, self._rules, range(len(self._rules))),
            key=lambda item: (-item[0].priority, item[2]),
        )
        self._metadata = [meta for meta, _, _ in ordered]
        self._rules = [rule for _, rule, _ in ordered]
        return self

    @classmethod
    def from_dsl(cls, text: str, fold_funcs: Optional[FoldFuncsType] = None) -> 'RuleSet':
        """Create a rule set from DSL text."""
        return cls(fold_funcs=fold_funcs).load_dsl(text)

    def _check_condition(self, condition: Optional[ExprType], bindings) -> bool:
        """Evaluate a guard under the given bindings."""
        if condition is None:
            return True
        result = instantiate(condition, bindings, self._fold_funcs)
        if isinstance(result, bool):
            return result
        if isinstance(result, (int, float)):
            return result != 0
        # An unfolded guard means the prelude could not decide it
        return False

    def apply_once(self, expr: ExprType) -> Tuple[ExprType, Optional[RuleMetadata]]:
        """
        Apply at most one rule at the top of `expr`.

        Returns:
            (result, metadata), with metadata None when no rule applied
        """
        for rule, metadata in zip(self._rules, self._metadata):
            pattern, skeleton = rule
            bindings = match(pattern, expr, [])
            if bindings == "failed":
                continue
            if not self._check_condition(metadata.condition, bindings):
                continue
            return instantiate(skeleton, bindings, self._fold_funcs), metadata

        return expr, None

    def __repr__(self) -> str:
        return f"RuleSet({len(self._rules)} rules)"

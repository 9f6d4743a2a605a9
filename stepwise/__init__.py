"""
STEPWISE - step-by-step algebra simplification

Simplifies an expression tree one small rewrite at a time and explains
every rewrite, the way a student would write out the working.

Quick Start:
    from stepwise import E, simplify

    steps = simplify(E("(* (+ (* 2 x) 3) (+ x 4))"))
    for step in steps:
        print(f"{step.change_type}: {step.rendered}")
    # product distributed over the sum: 2x * x + 2x * 4 + 3x + 3 * 4
    # ...
    # like terms added: 2x^2 + 11x + 12

    steps[0].substeps   # finer-grained steps of a composite rewrite

Expression Trees:
    2, -3, 0.5                 - numbers
    x                          - symbols
    (+ a b ...)  (* a b ...)   - n-ary sum and product
    (- a b)  (/ a b)  (^ a b)  - binary operators
    (- a)                      - negation
    (abs a)  (sqrt a)  (nthRoot a n)
    (paren a)                  - explicit grouping

Knowing why the result is empty:
    from stepwise import explain, Outcome

    explanation = explain(E("(+ x 1)"))
    explanation.outcome          # Outcome.UNCHANGED
    print(explanation.format("chain"))

Configuring:
    from stepwise import Simplifier

    simplifier = Simplifier(max_steps=50, diagnostics=my_sink)
    simplifier.with_strategies("simplify_basics", "evaluate_arithmetic")
"""

__version__ = "0.1.0"

# Rule layer
from .rewriter import (
    match,
    instantiate,
    fold,
    ExprType,
    BindingsType,
    NumericType,
    FoldHandler,
    FoldFuncsType,
    ARITHMETIC_PRELUDE,
    FUNCTION_PRELUDE,
    PREDICATE_PRELUDE,
    FULL_PRELUDE,
)
from .rules import RuleSet, RuleMetadata, parse_rule_line, load_rules_from_dsl

# Trees
from .expr import E, parse_sexpr, format_sexpr, node_kind
from .normalize import flatten, strip_redundant_grouping, normalize
from .render import render
from .support import has_unsupported_nodes

# Rewriting
from .changes import ChangeType, ChangeRecord
from .strategies import DEFAULT_STRATEGIES, STRATEGIES, get_strategies, preorder
from .dispatch import Dispatcher
from .steps import StepRecord, build_step, Explanation, Outcome
from .engine import MAX_STEP_COUNT, Simplifier, simplify, explain, print_diagnostic

# Public API
__all__ = [
    # Version
    "__version__",
    # Rule layer
    "match",
    "instantiate",
    "fold",
    "ExprType",
    "BindingsType",
    "NumericType",
    "FoldHandler",
    "FoldFuncsType",
    "ARITHMETIC_PRELUDE",
    "FUNCTION_PRELUDE",
    "PREDICATE_PRELUDE",
    "FULL_PRELUDE",
    "RuleSet",
    "RuleMetadata",
    "parse_rule_line",
    "load_rules_from_dsl",
    # Trees
    "E",
    "parse_sexpr",
    "format_sexpr",
    "node_kind",
    "flatten",
    "strip_redundant_grouping",
    "normalize",
    "render",
    "has_unsupported_nodes",
    # Rewriting
    "ChangeType",
    "ChangeRecord",
    "DEFAULT_STRATEGIES",
    "STRATEGIES",
    "get_strategies",
    "preorder",
    "Dispatcher",
    "StepRecord",
    "build_step",
    "Explanation",
    "Outcome",
    "MAX_STEP_COUNT",
    "Simplifier",
    "simplify",
    "explain",
    "print_diagnostic",
]

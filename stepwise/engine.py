"""
The fixed-point driver.

Dispatches rewrites on a tree until no strategy fires, recording one
step per rewrite:

    from stepwise import E, simplify

    for step in simplify(E("(* (+ (* 2 x) 3) (+ x 4))")):
        print(step.change_type, "->", step.rendered)

A run that produces more than `max_steps` rewrites is treated as runaway
rewriting: all of its steps are discarded, the diagnostics sink is told,
and the result is empty.
"""

import sys
from typing import Callable, Iterable, List, Optional

from .changes import ChangeRecord
from .dispatch import Dispatcher
from .normalize import normalize
from .render import render
from .rewriter import ExprType
from .steps import Explanation, Outcome, Renderer, StepRecord, build_step
from .strategies import Strategy, get_strategies
from .support import has_unsupported_nodes

MAX_STEP_COUNT = 20

Diagnostics = Callable[[str, str], None]


def print_diagnostic(expression_text: str, reason: str) -> None:
    """Default diagnostics sink: one line on stderr."""
    print(f"Math error: {reason} for expression: {expression_text}, returning no steps",
          file=sys.stderr)


class Simplifier:
    """
    Simplifies expression trees step by step.

    Example:
        simplifier = Simplifier(max_steps=50).with_debug()
        steps = simplifier.simplify(E("(+ 2 2)"))
        explanation = simplifier.explain(E("(+ 2 2)"))
        print(explanation.format("chain"))
    """

    def __init__(self, strategies: Optional[Iterable[Strategy]] = None,
                 max_steps: int = MAX_STEP_COUNT,
                 diagnostics: Optional[Diagnostics] = None,
                 debug: bool = False,
                 renderer: Renderer = render):
        """
        Initialize a Simplifier.

        Args:
            strategies: Strategies in the order they are tried.
                Default: DEFAULT_STRATEGIES.
            max_steps: Most rewrites a run may take before it is
                considered runaway (default: 20)
            diagnostics: Called as diagnostics(expression_text, reason)
                when a run is discarded. Default: print_diagnostic.
            debug: Print each step as it is taken
            renderer: Turns trees into text for steps and messages
        """
        self._dispatcher = Dispatcher(strategies)
        self.max_steps = max_steps
        self.diagnostics: Diagnostics = diagnostics or print_diagnostic
        self.debug = debug
        self.renderer = renderer

    @property
    def strategies(self) -> List[Strategy]:
        return self._dispatcher.strategies

    def with_strategies(self, *strategies) -> 'Simplifier':
        """
        Replace the strategy list. Built-in strategies may be given by name:
            Simplifier().with_strategies("evaluate_arithmetic", my_strategy)

        Returns:
            self for chaining
        """
        resolved = [get_strategies(s)[0] if isinstance(s, str) else s for s in strategies]
        self._dispatcher = Dispatcher(resolved)
        return self

    def with_max_steps(self, max_steps: int) -> 'Simplifier':
        self.max_steps = max_steps
        return self

    def with_diagnostics(self, diagnostics: Diagnostics) -> 'Simplifier':
        self.diagnostics = diagnostics
        return self

    def with_debug(self, debug: bool = True) -> 'Simplifier':
        self.debug = debug
        return self

    def with_renderer(self, renderer: Renderer) -> 'Simplifier':
        self.renderer = renderer
        return self

    def explain(self, expr: ExprType) -> Explanation:
        """
        Simplify `expr` and report how the run ended.

        Never raises for unsupported input or runaway rewriting; those
        come back as the UNSUPPORTED and RUNAWAY outcomes with no steps.
        """
        if has_unsupported_nodes(expr):
            return Explanation(expr, expr, outcome=Outcome.UNSUPPORTED, renderer=self.renderer)

        initial = normalize(expr)
        if self.debug:
            print(f"\n\nSimplifying: {self.renderer(initial)}")

        steps: List[StepRecord] = []
        current = initial
        while True:
            record: ChangeRecord = self._dispatcher.dispatch(current)
            if not record.changed:
                break
            if len(steps) >= self.max_steps:
                self.diagnostics(self.renderer(expr), "Potential infinite loop")
                return Explanation(initial, initial, outcome=Outcome.RUNAWAY,
                                   renderer=self.renderer)
            step = build_step(record, self.renderer)
            steps.append(step)
            current = record.after
            if self.debug:
                print(step.change_type)
                print(step.rendered + "\n")

        outcome = Outcome.SIMPLIFIED if steps else Outcome.UNCHANGED
        return Explanation(initial, current, steps, outcome, renderer=self.renderer)

    def simplify(self, expr: ExprType) -> List[StepRecord]:
        """
        Simplify `expr` and return its steps in order.

        The list is empty when nothing could be simplified, when the input
        is unsupported and when the run was runaway; use `explain` to tell
        these apart.
        """
        return self.explain(expr).steps

    def __call__(self, expr: ExprType) -> List[StepRecord]:
        """Make simplifier callable: simplifier(expr) is shorthand for simplifier.simplify(expr)."""
        return self.simplify(expr)

    def __repr__(self) -> str:
        return f"Simplifier({len(self.strategies)} strategies, max_steps={self.max_steps})"


def simplify(expr: ExprType, **options) -> List[StepRecord]:
    """Simplify with a one-off Simplifier; options are its constructor keywords."""
    return Simplifier(**options).simplify(expr)


def explain(expr: ExprType, **options) -> Explanation:
    """Explain with a one-off Simplifier; options are its constructor keywords."""
    return Simplifier(**options).explain(expr)

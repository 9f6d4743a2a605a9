"""
Step records and explanations.

A StepRecord is the immutable, trace-ready form of an accepted
ChangeRecord: trees are deep copies with redundant grouping removed, and
the result is rendered once. An Explanation collects the step records of
one simplification together with how it ended.
"""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .changes import ChangeRecord, ChangeType
from .normalize import strip_redundant_grouping
from .render import render
from .rewriter import ExprType

Renderer = Callable[[ExprType], str]


@dataclass(frozen=True)
class StepRecord:
    """One explained rewrite."""
    change_type: ChangeType
    before: ExprType
    after: ExprType
    substeps: Tuple['StepRecord', ...] = ()
    rendered: str = ""

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "change_type": self.change_type.name,
            "description": self.change_type.value,
            "before": copy.deepcopy(self.before),
            "after": copy.deepcopy(self.after),
            "rendered": self.rendered,
            "substeps": [step.to_dict() for step in self.substeps],
        }

    def __repr__(self) -> str:
        text = f"{self.change_type}: {self.rendered}"
        if self.substeps:
            text += f" [{len(self.substeps)} substeps]"
        return f"StepRecord({text})"


def build_step(record: ChangeRecord, renderer: Renderer = render) -> StepRecord:
    """
    Build the step record for a changed ChangeRecord.

    Substeps are built the same way, depth-first and in order.
    """
    substeps = tuple(build_step(substep, renderer) for substep in record.substeps)
    before = copy.deepcopy(strip_redundant_grouping(record.before))
    after = copy.deepcopy(strip_redundant_grouping(record.after))
    return StepRecord(record.change_type, before, after, substeps, renderer(after))


# ============================================================
# Explanations
# ============================================================

class Outcome(Enum):
    """How a simplification ended."""
    SIMPLIFIED = "simplified"      # at least one step, fixed point reached
    UNCHANGED = "unchanged"        # already at a fixed point
    UNSUPPORTED = "unsupported"    # input holds nodes the simplifier skips
    RUNAWAY = "runaway"            # step bound exceeded, trace discarded


class Explanation:
    """
    The steps taken to simplify one expression, and how it ended.

    Steps are empty unless the outcome is SIMPLIFIED, so `simplify`'s
    plain empty list can be told apart here by `outcome`.

    Formatting:
        - format("verbose"): numbered steps with substeps (default)
        - format("compact"): single line from initial to final
        - format("kinds"): just the change types, in order
        - format("chain"): each intermediate expression on its own line
        - to_dict(): JSON-serializable dictionary
    """

    def __init__(self, initial: ExprType, final: ExprType,
                 steps: Optional[List[StepRecord]] = None,
                 outcome: Outcome = Outcome.UNCHANGED,
                 renderer: Renderer = render):
        self.initial = initial
        self.final = final
        self.steps: List[StepRecord] = list(steps or [])
        self.outcome = outcome
        self._renderer = renderer

    def _text(self, expr: ExprType) -> str:
        if self.outcome is Outcome.UNSUPPORTED:
            return repr(expr)
        return self._renderer(expr)

    def format(self, style: str = "verbose") -> str:
        """
        Format the explanation in different styles.

        Args:
            style: One of "verbose", "compact", "kinds", "chain"

        Raises:
            ValueError: For an unknown style
        """
        if style == "compact":
            kinds = [s.change_type.name for s in self.steps]
            return f"{self._text(self.initial)} --[{', '.join(kinds)}]--> {self._text(self.final)}"

        elif style == "kinds":
            kinds = [str(s.change_type) for s in self.steps]
            return " -> ".join(kinds) if kinds else "(no changes)"

        elif style == "chain":
            parts = [self._text(self.initial)]
            for step in self.steps:
                parts.append(f"  --({step.change_type})-->")
                parts.append(step.rendered)
            return "\n".join(parts)

        elif style == "verbose":
            return repr(self)

        raise ValueError(f"Unknown style: {style}. "
                         f"Valid options: verbose, compact, kinds, chain")

    def __repr__(self) -> str:
        lines = [f"Initial: {self._text(self.initial)}"]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"  {i}. {step.change_type}: {step.rendered}")
            lines.extend(_substep_lines(step.substeps, f"{i}.", depth=2))
        lines.append(f"Final: {self._text(self.final)} ({self.outcome.value})")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        """Iterate over step records."""
        return iter(self.steps)

    def __bool__(self) -> bool:
        """True if any simplification was done."""
        return len(self.steps) > 0

    def to_dict(self) -> Dict:
        """Convert explanation to dictionary for JSON serialization."""
        return {
            "initial": copy.deepcopy(self.initial),
            "final": copy.deepcopy(self.final),
            "outcome": self.outcome.value,
            "steps": [step.to_dict() for step in self.steps],
            "step_count": len(self.steps),
        }

    def change_counts(self) -> Dict[str, int]:
        """Count how many top-level steps had each change type."""
        counts: Dict[str, int] = {}
        for step in self.steps:
            name = step.change_type.name
            counts[name] = counts.get(name, 0) + 1
        return counts

    def summary(self) -> str:
        """Get a brief summary of the simplification."""
        if not self.steps:
            return f"No steps ({self.outcome.value})"
        counts = self.change_counts()
        most_used = max(counts.items(), key=lambda x: x[1])
        return (f"{len(self.steps)} steps using {len(counts)} kinds of change. "
                f"Most used: {most_used[0]} ({most_used[1]}x)")


def _substep_lines(substeps, prefix: str, depth: int) -> List[str]:
    lines = []
    for j, step in enumerate(substeps, 1):
        label = f"{prefix}{j}"
        lines.append(f"{'  ' * depth}{label}. {step.change_type}: {step.rendered}")
        lines.extend(_substep_lines(step.substeps, f"{label}.", depth + 1))
    return lines

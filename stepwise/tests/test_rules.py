"""Tests for rule sets, the rule DSL and fold preludes."""

import pytest
from stepwise import (
    E, RuleSet, parse_rule_line, fold,
    ARITHMETIC_PRELUDE, FUNCTION_PRELUDE, load_rules_from_dsl,
)


class TestRuleParsing:
    """Tests for parsing DSL lines."""

    def test_parse_named_rule(self):
        """Name, description, pattern and skeleton are parsed."""
        metadata, pattern, skeleton = parse_rule_line('@add-zero "zero added": (+ ?x 0) => :x')

        assert metadata.name == "add-zero"
        assert metadata.description == "zero added"
        assert pattern == ["+", ["?", "x"], 0]
        assert skeleton == [":", "x"]

    def test_parse_priority(self):
        """Priority is read from the header."""
        metadata, _, _ = parse_rule_line("@rule[50]: (f ?x) => :x")
        assert metadata.priority == 50

    def test_parse_guard(self):
        """A trailing `when` clause becomes the condition."""
        metadata, _, skeleton = parse_rule_line("@pos: (f ?x) => 1 when (! > :x 0)")
        assert skeleton == 1
        assert metadata.condition == ["!", ">", [":", "x"], 0]

    def test_comments_and_blanks(self):
        """Comments and blank lines are not rules."""
        assert parse_rule_line("# comment") is None
        assert parse_rule_line("   ") is None

    def test_groups_tag_rules(self):
        """A [group] line tags the rules after it."""
        loaded = load_rules_from_dsl('''
            @untagged: (g ?x) => :x
            [algebra]
            @a: (f ?x) => :x
        ''')
        assert [metadata.tags for metadata, _ in loaded] == [[], ["algebra"]]


class TestRuleSet:
    """Tests for applying rules."""

    def test_apply_once(self):
        """The first matching rule rewrites the top of the tree."""
        rules = RuleSet.from_dsl('@power-zero: (^ ?x 0) => 1')
        result, applied = rules.apply_once(E("(^ y 0)"))

        assert result == 1
        assert applied.name == "power-zero"

    def test_no_rule_applies(self):
        """Without a match the tree comes back with no metadata."""
        rules = RuleSet.from_dsl('@power-zero: (^ ?x 0) => 1')
        result, applied = rules.apply_once(E("(^ y 2)"))

        assert result == ["^", "y", 2]
        assert applied is None

    def test_priority_order(self):
        """Higher priority rules are tried first."""
        rules = RuleSet.from_dsl('''
            @low: (f ?x) => low
            @high[10]: (f ?x) => high
        ''')
        assert rules.apply_once(["f", 1])[0] == "high"

    def test_equal_priority_keeps_order(self):
        """Rules of equal priority keep their load order."""
        rules = RuleSet.from_dsl('''
            @first: (f ?x) => first
            @second: (f ?x) => second
        ''')
        assert rules.apply_once(["f", 1])[0] == "first"

    def test_guard(self):
        """A rule fires only when its guard holds."""
        rules = RuleSet.from_dsl("@pos: (f ?x) => 1 when (! > :x 0)")

        result, applied = rules.apply_once(["f", 3])
        assert (result, applied.name) == (1, "pos")
        assert rules.apply_once(["f", -1])[1] is None

    def test_undecided_guard_fails(self):
        """A guard the prelude cannot fold does not hold."""
        rules = RuleSet.from_dsl("@pos: (f ?x) => 1 when (! > :x 0)")
        assert rules.apply_once(["f", "y"])[1] is None

    def test_compute_skeleton(self):
        """(! op ...) folds with the prelude."""
        rules = RuleSet.from_dsl("@fold: (+ ?a:const ?b:const) => (! + :a :b)")
        assert rules.apply_once(["+", 2, 3])[0] == 5

    def test_const_pattern_rejects_symbols(self):
        """?x:const matches numbers only."""
        rules = RuleSet.from_dsl("@fold: (+ ?a:const ?b:const) => (! + :a :b)")
        assert rules.apply_once(["+", "x", 3])[1] is None

    def test_rest_pattern_must_be_last(self):
        """A rest pattern before other operands is malformed."""
        rules = RuleSet.from_dsl("@bad: (f ?xs... ?y) => :y")
        with pytest.raises(ValueError):
            rules.apply_once(["f", 1, 2])

    def test_rest_pattern_splices(self):
        """?xs... binds the remaining operands and :xs... splices them."""
        rules = RuleSet.from_dsl("@drop-first: (f ?x ?xs...) => (g :xs...)")

        assert rules.apply_once(["f", 1, 2, 3])[0] == ["g", 2, 3]
        assert rules.apply_once(["f", 1])[0] == ["g"]


class TestFold:
    """Tests for exact folding with the preludes."""

    def test_exact_division(self):
        """Integer division folds only when exact."""
        assert fold("/", [4, 2], ARITHMETIC_PRELUDE) == 2
        assert fold("/", [2, 4], ARITHMETIC_PRELUDE) is None

    def test_division_by_zero(self):
        """Division by zero never folds."""
        assert fold("/", [1, 0], ARITHMETIC_PRELUDE) is None

    def test_integer_powers(self):
        """Integer powers fold for non-negative exponents only."""
        assert fold("^", [2, 3], ARITHMETIC_PRELUDE) == 8
        assert fold("^", [2, -1], ARITHMETIC_PRELUDE) is None

    def test_unary_minus(self):
        """Minus folds with one or two operands."""
        assert fold("-", [3], ARITHMETIC_PRELUDE) == -3
        assert fold("-", [5, 3], ARITHMETIC_PRELUDE) == 2

    def test_whole_floats_become_ints(self):
        """Float results that are whole come back as int."""
        result = fold("+", [0.5, 0.5], ARITHMETIC_PRELUDE)
        assert result == 1
        assert isinstance(result, int)

    def test_unknown_operator(self):
        """Operators missing from the prelude do not fold."""
        assert fold("sin", [0], ARITHMETIC_PRELUDE) is None

    def test_roots(self):
        """Roots fold only when exact."""
        assert fold("sqrt", [9], FUNCTION_PRELUDE) == 3
        assert fold("sqrt", [8], FUNCTION_PRELUDE) is None
        assert fold("nthRoot", [27, 3], FUNCTION_PRELUDE) == 3
        assert fold("nthRoot", [-8, 3], FUNCTION_PRELUDE) == -2
        assert fold("nthRoot", [-4, 2], FUNCTION_PRELUDE) is None

    def test_absolute_value(self):
        """abs folds any number."""
        assert fold("abs", [-4.5], FUNCTION_PRELUDE) == 4.5

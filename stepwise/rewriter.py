"""
Pattern matching and skeleton instantiation for expression trees.

STEPWISE - step-by-step algebra simplification

Expression trees are s-expressions: numbers, symbol strings, and lists
whose head names an operator or function, e.g. ["+", ["*", 2, "x"], 3].
This module matches patterns against such trees and builds new trees
from skeletons, folding numeric sub-computations with a prelude of
fold functions.
"""

from typing import Any, List, Union, Optional, Callable, Dict

# Type aliases
ExprType = Union[int, float, str, List]
BindingsType = Union[List[List], str]  # List of [name, value] pairs or "failed"
RuleType = List  # [pattern, skeleton]
NumericType = Union[int, float]


# A fold handler receives the evaluated argument list and returns the
# folded value, or None when it declines to fold (wrong arity, inexact...).
FoldHandler = Callable[[List[Any]], Optional[Any]]
FoldFuncsType = Dict[str, FoldHandler]


# ============================================================
# Fold Operation Builders
# ============================================================

def nary_fold(
    identity: NumericType,
    binary_op: Callable[[NumericType, NumericType], NumericType],
) -> FoldHandler:
    """Create an n-ary folder with an identity element.

    Examples:
        nary_fold(0, lambda a, b: a + b)  # (+) = 0, (+ x) = x, (+ x y z) = x+y+z
        nary_fold(1, lambda a, b: a * b)
    """
    def handler(args: List[NumericType]) -> NumericType:
        result = identity
        for a in args:
            result = binary_op(result, a)
        return result
    return handler


def unary_only(f: Callable[[Any], Any]) -> FoldHandler:
    """Create a folder that only accepts a single argument (abs, not, ...)."""
    def handler(args: List[Any]) -> Optional[Any]:
        if len(args) != 1:
            return None
        return f(args[0])
    return handler


def binary_only(f: Callable[[Any, Any], Any]) -> FoldHandler:
    """Create a folder that only accepts two arguments (>, and, ...)."""
    def handler(args: List[Any]) -> Optional[Any]:
        if len(args) != 2:
            return None
        return f(args[0], args[1])
    return handler


def special_minus() -> FoldHandler:
    """Subtraction: (- x) = -x, (- x y) = x-y."""
    def handler(args: List[NumericType]) -> Optional[NumericType]:
        if len(args) == 1:
            return -args[0]
        if len(args) == 2:
            return args[0] - args[1]
        return None
    return handler


def exact_div() -> FoldHandler:
    """Division that only folds when the quotient is exact.

    Integer operands fold only when the divisor divides the dividend, so
    2/4 stays a fraction for the fraction rules to reduce. Division by
    zero never folds.
    """
    def handler(args: List[NumericType]) -> Optional[NumericType]:
        if len(args) != 2:
            return None
        num, den = args
        if den == 0:
            return None
        if isinstance(num, int) and isinstance(den, int):
            if num % den != 0:
                return None
            return num // den
        return num / den
    return handler


def exact_pow() -> FoldHandler:
    """Exponentiation that keeps integer results integral.

    An integer base folds only for a non-negative integer exponent.
    """
    def handler(args: List[NumericType]) -> Optional[NumericType]:
        if len(args) != 2:
            return None
        base, exponent = args
        if isinstance(base, int) and isinstance(exponent, int):
            if exponent < 0:
                return None
            return base ** exponent
        if base == 0 and exponent < 0:
            return None
        if base < 0 and not float(exponent).is_integer():
            return None
        return base ** exponent
    return handler


def exact_root(n: NumericType, degree: NumericType = 2) -> Optional[int]:
    """Return the integer `degree`-th root of `n`, or None if it isn't exact."""
    if not isinstance(n, int) or not isinstance(degree, int) or degree < 1:
        return None
    if n < 0:
        if degree % 2 == 0:
            return None
        root = exact_root(-n, degree)
        return -root if root is not None else None
    root = round(n ** (1.0 / degree))
    # float roots can be off by one for large n
    for candidate in (root - 1, root, root + 1):
        if candidate >= 0 and candidate ** degree == n:
            return candidate
    return None


def _nth_root(args: List[NumericType]) -> Optional[int]:
    if len(args) == 1:
        return exact_root(args[0], 2)
    if len(args) == 2:
        return exact_root(args[0], args[1])
    return None


# ============================================================
# Standard Preludes
# ============================================================

# Exact arithmetic: integer results stay integers
ARITHMETIC_PRELUDE: FoldFuncsType = {
    "+": nary_fold(0, lambda a, b: a + b),
    "*": nary_fold(1, lambda a, b: a * b),
    "-": special_minus(),
    "/": exact_div(),
    "^": exact_pow(),
}

# Built-in functions the evaluator understands
FUNCTION_PRELUDE: FoldFuncsType = {
    "abs": unary_only(abs),
    "sqrt": unary_only(lambda n: exact_root(n, 2)),
    "nthRoot": _nth_root,
}

# Predicates for rule guards
PREDICATE_PRELUDE: FoldFuncsType = {
    ">": binary_only(lambda a, b: a > b),
    "<": binary_only(lambda a, b: a < b),
    "=": binary_only(lambda a, b: a == b),
    "!=": binary_only(lambda a, b: a != b),
    "const?": unary_only(lambda x: constant(x)),
    "var?": unary_only(lambda x: isinstance(x, str)),
    "zero?": unary_only(lambda x: constant(x) and x == 0),
    "int?": unary_only(lambda x: isinstance(x, int) and not isinstance(x, bool)),
    "not": unary_only(lambda x: not x),
    "and": binary_only(lambda a, b: a and b),
    "or": binary_only(lambda a, b: a or b),
}

FULL_PRELUDE: FoldFuncsType = {
    **ARITHMETIC_PRELUDE,
    **FUNCTION_PRELUDE,
    **PREDICATE_PRELUDE,
}


def fold(op: str, args: List[Any], fold_funcs: FoldFuncsType) -> Optional[Any]:
    """
    Evaluate `op` on already-evaluated `args` with a prelude.

    Returns None when the prelude has no handler for `op`, the handler
    declines, or the arithmetic itself fails. Float results that are
    whole numbers come back as ints.
    """
    handler = fold_funcs.get(op)
    if handler is None:
        return None
    try:
        result = handler(args)
    except (ArithmeticError, ValueError, TypeError):
        return None
    if isinstance(result, float) and result.is_integer():
        return int(result)
    return result


# ============================================================
# Primitive Operations
# ============================================================

def car(lst: List) -> Any:
    """Return the head of a non-empty list."""
    if not isinstance(lst, list):
        raise TypeError("car: argument must be a list")
    if not lst:
        raise ValueError("car: argument is an empty list")
    return lst[0]


def cdr(lst: List) -> List:
    """Return all but the head of a list."""
    if not isinstance(lst, list):
        raise TypeError("cdr: argument must be a list")
    return lst[1:]


def constant(exp: ExprType) -> bool:
    """True for numeric literals. Booleans are not numbers here."""
    return isinstance(exp, (int, float)) and not isinstance(exp, bool)


def variable(exp: ExprType) -> bool:
    return isinstance(exp, str)


def atom(exp: ExprType) -> bool:
    return constant(exp) or variable(exp)


def compound(exp: ExprType) -> bool:
    return isinstance(exp, list)


def null(s: Any) -> bool:
    return s == []


# ============================================================
# Pattern Matching Helpers
# ============================================================

def arbitrary_constant(pat: ExprType) -> bool:
    """Pattern ["?c", name] matches numbers."""
    return compound(pat) and len(pat) == 2 and car(pat) == "?c"


def arbitrary_variable(pat: ExprType) -> bool:
    """Pattern ["?v", name] matches symbols."""
    return compound(pat) and len(pat) == 2 and car(pat) == "?v"


def arbitrary_expression(pat: ExprType) -> bool:
    """Pattern ["?", name] matches anything."""
    return compound(pat) and len(pat) == 2 and car(pat) == "?"


def arbitrary_rest(pat: ExprType) -> bool:
    """Pattern ["?...", name] or ["?...", name, "const"|"var"] matches the remaining operands."""
    return compound(pat) and len(pat) >= 2 and car(pat) == "?..."


def skeleton_evaluation(s: ExprType) -> bool:
    """Skeleton [":", name] substitutes a binding."""
    return compound(s) and len(s) == 2 and car(s) == ":"


def skeleton_splice(s: ExprType) -> bool:
    """Skeleton [":...", name] splices a rest binding into its parent."""
    return compound(s) and len(s) == 2 and car(s) == ":..."


def skeleton_compute(s: ExprType) -> bool:
    """Skeleton ["!", op, args...] is folded at instantiation time."""
    return compound(s) and len(s) >= 2 and car(s) == "!"


def extend_bindings(pat: List, dat: ExprType, bindings: BindingsType) -> BindingsType:
    """Bind pat's name to dat; fails on a conflicting earlier binding."""
    if bindings == "failed":
        return "failed"

    name = pat[1]
    for entry in bindings:
        if entry[0] == name:
            return bindings if entry[1] == dat else "failed"

    return bindings + [[name, dat]]


def lookup(var: str, bindings: BindingsType) -> Any:
    """Look up a bound value; unbound names are returned as-is."""
    if bindings == "failed":
        return var
    for entry in bindings:
        if entry[0] == var:
            return entry[1]
    return var


# ============================================================
# Pattern Matching
# ============================================================

def match(pat: ExprType, exp: ExprType, bindings: BindingsType) -> BindingsType:
    """
    Match a pattern against an expression tree.

    Pattern syntax:
        ["?", "name"]             - any subtree
        ["?c", "name"]            - a number
        ["?v", "name"]            - a symbol
        ["?...", "name"]          - remaining operands (zero or more), last only
        ["?...", "name", "const"] - remaining operands, each a number
        literal                   - exact value

    Args:
        pat: The pattern
        exp: The expression tree
        bindings: Bindings accumulated so far

    Returns:
        Extended bindings on success, "failed" otherwise
    """
    if bindings == "failed":
        return "failed"

    if null(pat):
        return bindings if null(exp) else "failed"

    if atom(pat):
        # 1 == True in Python, so compare types as well as values
        if atom(exp) and pat == exp and constant(pat) == constant(exp):
            return bindings
        return "failed"

    if arbitrary_constant(pat):
        return extend_bindings(pat, exp, bindings) if constant(exp) else "failed"

    if arbitrary_variable(pat):
        return extend_bindings(pat, exp, bindings) if variable(exp) else "failed"

    if arbitrary_expression(pat):
        return extend_bindings(pat, exp, bindings)

    if arbitrary_rest(pat):
        if compound(exp):
            return extend_bindings(pat, exp, bindings)
        return "failed"

    if not compound(exp) or null(exp):
        return "failed"

    return match_compound(pat, exp, bindings)


def match_compound(pat: List, exp: List, bindings: BindingsType) -> BindingsType:
    """Match operand lists element-wise; a rest pattern must come last."""
    while True:
        if bindings == "failed":
            return "failed"

        if null(pat):
            return bindings if null(exp) else "failed"

        current_pat = car(pat)
        rest_pat = cdr(pat)

        if arbitrary_rest(current_pat):
            if not null(rest_pat):
                raise ValueError("Rest pattern (?...) must be last in compound pattern")
            constraint = current_pat[2] if len(current_pat) >= 3 else None
            for item in exp:
                if constraint == "const" and not constant(item):
                    return "failed"
                if constraint == "var" and not variable(item):
                    return "failed"
            return extend_bindings(current_pat, list(exp), bindings)

        if null(exp):
            return "failed"

        bindings = match(current_pat, car(exp), bindings)
        pat, exp = rest_pat, cdr(exp)


# ============================================================
# Instantiation
# ============================================================

def instantiate(
    skeleton: ExprType,
    bindings: BindingsType,
    fold_funcs: Optional[FoldFuncsType] = None,
) -> ExprType:
    """
    Build a tree from a skeleton and bindings.

    Skeleton syntax:
        [":", "name"]         - the bound value
        [":...", "name"]      - splice a bound operand list into the parent
        ["!", "op", args...]  - fold op over the instantiated args now
        literal               - kept as-is

    A compute form whose op is missing from fold_funcs, or whose handler
    declines, is left in the result as the plain expression [op, args...].
    """
    if null(skeleton) or atom(skeleton):
        return skeleton
    if skeleton_evaluation(skeleton) or skeleton_splice(skeleton):
        return lookup(skeleton[1], bindings)
    if skeleton_compute(skeleton):
        op = skeleton[1]
        args = [instantiate(arg, bindings, fold_funcs) for arg in skeleton[2:]]
        if fold_funcs:
            result = fold(op, args, fold_funcs)
            if result is not None:
                return result
        return [op] + args

    result = []
    for element in skeleton:
        if skeleton_splice(element):
            spliced = lookup(element[1], bindings)
            if isinstance(spliced, list):
                result.extend(spliced)
            else:
                result.append(spliced)
        else:
            result.append(instantiate(element, bindings, fold_funcs))
    return result

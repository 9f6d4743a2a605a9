"""
Expression trees for STEPWISE.

An expression tree is an s-expression:

    number        2, -3, 0.5
    symbol        "x"
    n-ary op      ["+", a, b, ...]   ["*", a, b, ...]
    binary op     ["-", a, b]   ["/", a, b]   ["^", a, b]
    negation      ["-", a]
    function      ["abs", a]   ["sqrt", a]   ["nthRoot", a, n]
    grouping      ["paren", a]

Trees are plain lists, so they compare with == and copy with
copy.deepcopy. Nothing in this package mutates a tree it was given.

Examples:
    from stepwise import E

    E("(+ 2 2)")                        # ["+", 2, 2]
    E.op("*", E("(+ (* 2 x) 3)"), E("(+ x 4)"))
    E.group(E("(+ x 1)"))               # ["paren", ["+", "x", 1]]
"""

from typing import List, Optional, Tuple, Union

from .rewriter import ExprType, constant

# Operator heads. Everything else at the head of a list is a function,
# except the grouping wrapper.
OPERATORS = ("+", "-", "*", "/", "^")
NARY_OPERATORS = ("+", "*")
GROUP = "paren"

IDENTITY = {"+": 0, "*": 1}

# Binding strength, loosest first. Atoms bind tightest.
PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 4}
UNARY_PRECEDENCE = 3
ATOM_PRECEDENCE = 5


# ============================================================
# Expression Builder
# ============================================================

class _ExprBuilder:
    """
    Expression builder.

    Examples:
        E("(+ x 1)")            -> ["+", "x", 1]
        E.op("^", "x", 2)       -> ["^", "x", 2]
        E.group("x")            -> ["paren", "x"]
        x, y = E.vars("x", "y")
    """

    def __call__(self, s: str) -> ExprType:
        """Parse an s-expression string."""
        return parse_sexpr(s)

    def op(self, name: str, *args) -> List:
        """Build [name, *args]; works for operators and functions alike."""
        return [name] + list(args)

    def group(self, expr: ExprType) -> List:
        """Wrap a tree in explicit grouping."""
        return [GROUP, expr]

    def neg(self, expr: ExprType) -> List:
        """Negate a tree: -(expr)."""
        return ["-", expr]

    def var(self, name: str) -> str:
        return name

    def vars(self, *names: str) -> Tuple[str, ...]:
        return names

    def const(self, value: Union[int, float]) -> Union[int, float]:
        return value

    def __repr__(self) -> str:
        return "E (expression builder)"


E = _ExprBuilder()


def parse_sexpr(s: str) -> ExprType:
    """
    Parse an s-expression string into a tree.

    Pattern and skeleton syntax used by the rule DSL is converted too:

        "?x"        -> ["?", "x"]
        "?n:const"  -> ["?c", "n"]
        "?v:var"    -> ["?v", "v"]
        "?xs..."    -> ["?...", "xs"]
        ":x"        -> [":", "x"]
        ":xs..."    -> [":...", "xs"]

    Returns None for blank input.
    """
    s = s.strip()
    if not s:
        return None

    if s.startswith('('):
        depth = 0
        parts = []
        current = ''
        for c in s[1:]:
            if c == '(':
                depth += 1
                current += c
            elif c == ')':
                if depth == 0:
                    if current.strip():
                        parts.append(parse_sexpr(current))
                    break
                depth -= 1
                current += c
            elif c in ' \t\n' and depth == 0:
                if current.strip():
                    parts.append(parse_sexpr(current))
                current = ''
            else:
                current += c
        return parts

    try:
        return int(s)
    except ValueError:
        pass
    if any(c.isdigit() for c in s):
        try:
            return float(s)
        except ValueError:
            pass

    if s.startswith('?'):
        rest = s[1:]
        is_rest = rest.endswith('...')
        if is_rest:
            rest = rest[:-3]

        name, _, type_part = rest.partition(':')
        name = name.strip() or 'x'

        if is_rest:
            if type_part in ('const', 'var'):
                return ["?...", name, type_part]
            return ["?...", name]
        if type_part == 'const':
            return ["?c", name]
        if type_part == 'var':
            return ["?v", name]
        return ["?", name]

    if s.startswith(':'):
        rest = s[1:].strip()
        if rest.endswith('...'):
            return [":...", rest[:-3].strip()]
        return [":", rest]

    return s


def format_sexpr(expr: ExprType, dsl_syntax: bool = True) -> str:
    """
    Format a tree (or pattern) as an s-expression string.

    Examples:
        ["+", "x", 1] -> "(+ x 1)"
        ["?c", "n"]   -> "?n:const" (with dsl_syntax=True)
    """
    if isinstance(expr, list):
        if not expr:
            return "()"

        if dsl_syntax and len(expr) in (2, 3) and isinstance(expr[0], str):
            op = expr[0]
            if len(expr) == 2:
                if op == "?":
                    return f"?{expr[1]}"
                elif op == ":":
                    return f":{expr[1]}"
                elif op == "?c":
                    return f"?{expr[1]}:const"
                elif op == "?v":
                    return f"?{expr[1]}:var"
                elif op == "?...":
                    return f"?{expr[1]}..."
                elif op == ":...":
                    return f":{expr[1]}..."
            elif op == "?...":
                return f"?{expr[1]}:{expr[2]}..."

        return "(" + " ".join(format_sexpr(e, dsl_syntax) for e in expr) + ")"
    return str(expr)


# ============================================================
# Node Classification
# ============================================================

def is_number(expr: ExprType) -> bool:
    return constant(expr)


def is_integer(expr: ExprType) -> bool:
    return isinstance(expr, int) and not isinstance(expr, bool)


def is_symbol(expr: ExprType) -> bool:
    return isinstance(expr, str)


def is_group(expr: ExprType) -> bool:
    return isinstance(expr, list) and len(expr) == 2 and expr[0] == GROUP


def is_unary_minus(expr: ExprType) -> bool:
    return isinstance(expr, list) and len(expr) == 2 and expr[0] == "-"


def is_operator(expr: ExprType, op: Optional[str] = None) -> bool:
    """True for operator nodes (not negation); optionally of one kind."""
    if not isinstance(expr, list) or not expr or expr[0] not in OPERATORS:
        return False
    if is_unary_minus(expr):
        return False
    return op is None or expr[0] == op


def is_function(expr: ExprType) -> bool:
    return (isinstance(expr, list) and bool(expr) and isinstance(expr[0], str)
            and expr[0] not in OPERATORS and expr[0] != GROUP)


def is_fraction(expr: ExprType) -> bool:
    """A division whose numerator and denominator are both integers."""
    return is_operator(expr, "/") and is_integer(expr[1]) and is_integer(expr[2])


def node_kind(expr: ExprType) -> str:
    """
    Classify a node: number, symbol, operator, unary, function or group.

    Raises:
        TypeError: If expr is not an expression tree node
    """
    if is_number(expr):
        return "number"
    if is_symbol(expr):
        return "symbol"
    if is_group(expr):
        return "group"
    if is_unary_minus(expr):
        return "unary"
    if is_operator(expr):
        return "operator"
    if is_function(expr):
        return "function"
    raise TypeError(f"Not an expression tree node: {expr!r}")


def unwrap(expr: ExprType) -> ExprType:
    """Strip any number of grouping wrappers from the top of a tree."""
    while is_group(expr):
        expr = expr[1]
    return expr


def make_nary(op: str, items: List) -> ExprType:
    """Build an n-ary node; no operands gives the identity, one gives itself."""
    if not items:
        return IDENTITY[op]
    if len(items) == 1:
        return items[0]
    return [op] + list(items)


def negate(expr: ExprType) -> ExprType:
    """Negate a tree, folding numbers and double negation."""
    if is_number(expr):
        return -expr
    if is_unary_minus(expr):
        return expr[1]
    return ["-", expr]


# ============================================================
# Precedence
# ============================================================

def precedence(expr: ExprType) -> int:
    """How tightly a node binds when printed; higher binds tighter."""
    kind = node_kind(expr)
    if kind == "number":
        return UNARY_PRECEDENCE if expr < 0 else ATOM_PRECEDENCE
    if kind == "unary":
        return UNARY_PRECEDENCE
    if kind == "operator":
        return PRECEDENCE[expr[0]]
    return ATOM_PRECEDENCE


def needs_parens(parent: ExprType, index: int, child: ExprType) -> bool:
    """
    Whether `child`, as operand `index` of `parent`, must be parenthesized
    to read back as the same tree.

    `-` and `/` bind left to right and `^` right to left, so an operand of
    equal precedence on the other side needs parentheses.
    """
    kind = node_kind(parent)
    if kind in ("function", "group"):
        return False
    p = precedence(child)
    if kind == "unary":
        return p <= UNARY_PRECEDENCE
    if kind != "operator":
        return False

    op = parent[0]
    q = PRECEDENCE[op]
    if op in ("-", "/") and index > 0:
        return p <= q
    if op == "^" and index == 0:
        return p <= q
    return p < q

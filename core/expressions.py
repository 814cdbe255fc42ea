from __future__ import annotations

import enum
import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, Mapping, Tuple, Union

from exceptions.custom_errors import (
    InvalidDomainError,
    MalformedConstraintError,
    UnboundVariableError,
)

"""
Oracle-neutral constraint language.

Constraints are immutable expression trees over registry variables. Builders
and refinement drivers only ever create these trees; the oracle adapter in
`solver.oracle` is the single place that knows how to hand them to CP-SAT.
"""

Value = Union[bool, int]


# ---------------------------------------------------------------------------
# Domains
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoolDomain:
    """Domain of a boolean decision variable."""

    def contains(self, value: Any) -> bool:
        return value in (0, 1) and not isinstance(value, float)

    def __str__(self) -> str:
        return "Bool"


@dataclass(frozen=True)
class IntDomain:
    """Closed integer interval ``[lo, hi]``."""

    lo: int
    hi: int

    def __post_init__(self):
        if self.lo > self.hi:
            raise InvalidDomainError(
                f"Invalid integer domain: lower bound {self.lo} exceeds upper bound {self.hi}"
            )

    def contains(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        return self.lo <= value <= self.hi

    def __str__(self) -> str:
        return f"Int[{self.lo}..{self.hi}]"


BOOLEAN = BoolDomain()
Domain = Union[BoolDomain, IntDomain]


# ---------------------------------------------------------------------------
# Expression nodes
# ---------------------------------------------------------------------------


class Expr(ABC):
    """Base class of every node in a constraint expression."""

    @property
    @abstractmethod
    def is_bool(self) -> bool:
        """True if the expression denotes a truth value rather than an integer."""
        ...

    @abstractmethod
    def variables(self) -> FrozenSet["Variable"]:
        """Return the variables mentioned in this expression."""
        ...

    @abstractmethod
    def evaluate(self, values: Mapping["Variable", Value]) -> Value:
        """Evaluate the expression under a concrete assignment."""
        ...

    @abstractmethod
    def pretty(self) -> str:
        """Human-readable representation."""
        ...

    def __repr__(self) -> str:
        return f"<Expr: {self.pretty()}>"

    # Logical combinators (syntactic sugar)
    def __and__(self, other: Any) -> "Expr":
        return conjunction(self, other)

    def __or__(self, other: Any) -> "Expr":
        return disjunction(self, other)

    def __invert__(self) -> "Expr":
        return negate(self)

    def __add__(self, other: Any) -> "Expr":
        return total([self, other])

    def __radd__(self, other: Any) -> "Expr":
        return total([other, self])


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    """
    A named decision variable handle.

    Handles compare by identity: the registry hands out exactly one handle per
    name, so two handles are equal only if they are the same declaration.
    """

    name: str
    domain: Domain = BOOLEAN
    key: Tuple[Any, ...] = field(default=())

    @property
    def is_bool(self) -> bool:
        return isinstance(self.domain, BoolDomain)

    def variables(self):
        return frozenset({self})

    def evaluate(self, values):
        try:
            value = values[self]
        except KeyError:
            raise UnboundVariableError(f"No value for variable '{self.name}'") from None
        return bool(value) if self.is_bool else value

    def pretty(self):
        return self.name

    def __repr__(self) -> str:
        return f"<Variable {self.name}: {self.domain}>"


@dataclass(frozen=True)
class Const(Expr):
    """A boolean or integer literal."""

    value: Value

    @property
    def is_bool(self) -> bool:
        return isinstance(self.value, bool)

    def variables(self):
        return frozenset()

    def evaluate(self, values):
        return self.value

    def pretty(self):
        return str(self.value).lower() if self.is_bool else str(self.value)


TRUE = Const(True)
FALSE = Const(False)


@dataclass(frozen=True)
class Not(Expr):
    arg: Expr

    @property
    def is_bool(self) -> bool:
        return True

    def variables(self):
        return self.arg.variables()

    def evaluate(self, values):
        return not self.arg.evaluate(values)

    def pretty(self):
        return f"!{self.arg.pretty()}"


@dataclass(frozen=True)
class And(Expr):
    args: Tuple[Expr, ...]

    @property
    def is_bool(self) -> bool:
        return True

    def variables(self):
        return frozenset().union(*(a.variables() for a in self.args))

    def evaluate(self, values):
        return all(a.evaluate(values) for a in self.args)

    def pretty(self):
        return "(" + " & ".join(a.pretty() for a in self.args) + ")"


@dataclass(frozen=True)
class Or(Expr):
    args: Tuple[Expr, ...]

    @property
    def is_bool(self) -> bool:
        return True

    def variables(self):
        return frozenset().union(*(a.variables() for a in self.args))

    def evaluate(self, values):
        return any(a.evaluate(values) for a in self.args)

    def pretty(self):
        return "(" + " | ".join(a.pretty() for a in self.args) + ")"


@dataclass(frozen=True)
class Implies(Expr):
    lhs: Expr
    rhs: Expr

    @property
    def is_bool(self) -> bool:
        return True

    def variables(self):
        return self.lhs.variables() | self.rhs.variables()

    def evaluate(self, values):
        return (not self.lhs.evaluate(values)) or bool(self.rhs.evaluate(values))

    def pretty(self):
        return f"({self.lhs.pretty()} -> {self.rhs.pretty()})"


@dataclass(frozen=True)
class Iff(Expr):
    lhs: Expr
    rhs: Expr

    @property
    def is_bool(self) -> bool:
        return True

    def variables(self):
        return self.lhs.variables() | self.rhs.variables()

    def evaluate(self, values):
        return bool(self.lhs.evaluate(values)) == bool(self.rhs.evaluate(values))

    def pretty(self):
        return f"({self.lhs.pretty()} <-> {self.rhs.pretty()})"


@dataclass(frozen=True)
class Sum(Expr):
    """Linear sum; boolean terms count as 0/1."""

    terms: Tuple[Expr, ...]

    @property
    def is_bool(self) -> bool:
        return False

    def variables(self):
        return frozenset().union(*(t.variables() for t in self.terms))

    def evaluate(self, values):
        return sum(int(t.evaluate(values)) for t in self.terms)

    def pretty(self):
        if not self.terms:
            return "0"
        return "(" + " + ".join(t.pretty() for t in self.terms) + ")"


class RelOp(enum.Enum):
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    def negate(self) -> "RelOp":
        _negs = {
            RelOp.EQ: RelOp.NE, RelOp.NE: RelOp.EQ,
            RelOp.LT: RelOp.GE, RelOp.LE: RelOp.GT,
            RelOp.GT: RelOp.LE, RelOp.GE: RelOp.LT,
        }
        return _negs[self]

    @property
    def fn(self) -> Callable[[Any, Any], Any]:
        return _REL_FNS[self]


_REL_FNS: Dict[RelOp, Callable[[Any, Any], Any]] = {
    RelOp.EQ: operator.eq,
    RelOp.NE: operator.ne,
    RelOp.LT: operator.lt,
    RelOp.LE: operator.le,
    RelOp.GT: operator.gt,
    RelOp.GE: operator.ge,
}


@dataclass(frozen=True)
class Compare(Expr):
    """Integer comparison ``lhs <op> rhs``."""

    op: RelOp
    lhs: Expr
    rhs: Expr

    @property
    def is_bool(self) -> bool:
        return True

    def variables(self):
        return self.lhs.variables() | self.rhs.variables()

    def evaluate(self, values):
        return self.op.fn(int(self.lhs.evaluate(values)), int(self.rhs.evaluate(values)))

    def pretty(self):
        return f"({self.lhs.pretty()} {self.op.value} {self.rhs.pretty()})"


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def as_expr(value: Any) -> Expr:
    """Lift Python ints and bools to constants; pass expressions through."""
    if isinstance(value, Expr):
        return value
    if isinstance(value, (bool, int)):
        return Const(value)
    raise MalformedConstraintError(f"Cannot use {value!r} in a constraint expression")


def _require_bool(expr: Expr, where: str) -> Expr:
    if not expr.is_bool:
        raise MalformedConstraintError(f"{where} expects a boolean operand, got {expr.pretty()}")
    return expr


def negate(arg: Any) -> Expr:
    arg = _require_bool(as_expr(arg), "negation")
    if isinstance(arg, Const):
        return Const(not arg.value)
    if isinstance(arg, Not):
        return arg.arg
    return Not(arg)


def conjunction(*args: Any) -> Expr:
    """Flattened conjunction with identity ``true``."""
    parts = []
    for a in args:
        a = _require_bool(as_expr(a), "conjunction")
        if isinstance(a, Const):
            if not a.value:
                return FALSE
            continue
        parts.extend(a.args if isinstance(a, And) else (a,))
    if not parts:
        return TRUE
    return parts[0] if len(parts) == 1 else And(tuple(parts))


def disjunction(*args: Any) -> Expr:
    """Flattened disjunction with identity ``false``."""
    parts = []
    for a in args:
        a = _require_bool(as_expr(a), "disjunction")
        if isinstance(a, Const):
            if a.value:
                return TRUE
            continue
        parts.extend(a.args if isinstance(a, Or) else (a,))
    if not parts:
        return FALSE
    return parts[0] if len(parts) == 1 else Or(tuple(parts))


def implies(lhs: Any, rhs: Any) -> Expr:
    return Implies(_require_bool(as_expr(lhs), "implication"), _require_bool(as_expr(rhs), "implication"))


def iff(lhs: Any, rhs: Any) -> Expr:
    return Iff(_require_bool(as_expr(lhs), "equivalence"), _require_bool(as_expr(rhs), "equivalence"))


def total(terms: Iterable[Any]) -> Expr:
    """Linear sum of the given terms; nested sums are flattened."""
    flat = []
    for t in terms:
        t = as_expr(t)
        flat.extend(t.terms if isinstance(t, Sum) else (t,))
    return Sum(tuple(flat))


def compare(op: RelOp, lhs: Any, rhs: Any) -> Expr:
    lhs, rhs = as_expr(lhs), as_expr(rhs)
    # boolean equality is an equivalence, not an integer comparison
    if lhs.is_bool and rhs.is_bool and op in (RelOp.EQ, RelOp.NE):
        both = iff(lhs, rhs)
        return both if op is RelOp.EQ else negate(both)
    return Compare(op, lhs, rhs)


def eq(lhs: Any, rhs: Any) -> Expr:
    return compare(RelOp.EQ, lhs, rhs)


def ne(lhs: Any, rhs: Any) -> Expr:
    return compare(RelOp.NE, lhs, rhs)


def lt(lhs: Any, rhs: Any) -> Expr:
    return compare(RelOp.LT, lhs, rhs)


def le(lhs: Any, rhs: Any) -> Expr:
    return compare(RelOp.LE, lhs, rhs)


def gt(lhs: Any, rhs: Any) -> Expr:
    return compare(RelOp.GT, lhs, rhs)


def ge(lhs: Any, rhs: Any) -> Expr:
    return compare(RelOp.GE, lhs, rhs)


def differs_from(variable: Variable, value: Value) -> Expr:
    """Literal stating that ``variable`` does not take ``value``."""
    if variable.is_bool:
        return negate(variable) if value else variable
    return ne(variable, value)


def pairwise_exclusion(candidates: Iterable[Any]) -> list:
    """``!(a & b)`` for every unordered pair of candidates."""
    items = [as_expr(c) for c in candidates]
    return [
        negate(conjunction(items[i], items[k]))
        for i in range(len(items))
        for k in range(i + 1, len(items))
    ]


def constraint_size(expr: Expr) -> int:
    """Count the number of nodes in an expression."""
    if isinstance(expr, (Variable, Const)):
        return 1
    if isinstance(expr, Not):
        return 1 + constraint_size(expr.arg)
    if isinstance(expr, (And, Or)):
        return 1 + sum(constraint_size(a) for a in expr.args)
    if isinstance(expr, Sum):
        return 1 + sum(constraint_size(t) for t in expr.terms)
    if isinstance(expr, (Implies, Iff, Compare)):
        return 1 + constraint_size(expr.lhs) + constraint_size(expr.rhs)
    return 1

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple
import logging

from ortools.sat.python import cp_model

from core.expressions import (
    And,
    Compare,
    Const,
    Expr,
    Iff,
    Implies,
    Not,
    Or,
    Sum,
    Value,
    Variable,
)
from exceptions.custom_errors import MalformedConstraintError, OracleError
from utils.constants import SOLVER_SEED, SOLVER_TIMEOUT, SOLVER_WORKERS

logger = logging.getLogger(__name__)


class CheckResult(str, Enum):
    """Three-valued outcome of a satisfiability check."""

    SAT = "SAT"
    UNSAT = "UNSAT"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class CpSatConfig:
    """Configuration for the OR-Tools CP-SAT solver."""

    max_time_seconds: float = SOLVER_TIMEOUT
    random_seed: int = SOLVER_SEED
    num_workers: int = SOLVER_WORKERS
    log_search_progress: bool = False


@dataclass
class OracleResult:
    """Raw answer of one oracle call."""

    status: CheckResult
    values: Dict[Variable, Value] = field(default_factory=dict)
    wall_time: float = 0.0
    num_constraints: int = 0


def configure_solver(config: CpSatConfig) -> cp_model.CpSolver:
    """Configure the CP solver."""
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = config.max_time_seconds
    solver.parameters.random_seed = config.random_seed
    solver.parameters.num_workers = config.num_workers
    solver.parameters.log_search_progress = config.log_search_progress
    return solver


def get_model_size(model: cp_model.CpModel) -> Tuple[int, int]:
    """Get the number of constraints and variables in the model."""
    proto = model.Proto()
    return len(proto.constraints), len(proto.variables)


_STATUS_MAP = {
    cp_model.OPTIMAL: CheckResult.SAT,
    cp_model.FEASIBLE: CheckResult.SAT,
    cp_model.INFEASIBLE: CheckResult.UNSAT,
    cp_model.UNKNOWN: CheckResult.UNKNOWN,
}


class CpSatCompiler:
    """
    Translates expression trees into a CP-SAT model.

    Top-level conjunctions, clauses and comparisons are posted directly.
    Nested boolean structure is reified: every compound sub-expression gets
    a fresh BoolVar ``b`` with ``OnlyEnforceIf(b)`` / ``OnlyEnforceIf(b.Not())``
    constraints tying it to its meaning in both directions.
    """

    def __init__(self, model: cp_model.CpModel, variables: Iterable[Variable]):
        self.model = model
        self.vars: Dict[Variable, cp_model.IntVar] = {}
        for v in variables:
            if v.is_bool:
                self.vars[v] = model.NewBoolVar(v.name)
            else:
                self.vars[v] = model.NewIntVar(v.domain.lo, v.domain.hi, v.name)
        self._reified: Dict[Expr, cp_model.IntVar] = {}
        self._true = None

    def true_literal(self):
        if self._true is None:
            self._true = self.model.NewBoolVar("_true")
            self.model.Add(self._true == 1)
        return self._true

    def _var(self, var: Variable):
        try:
            return self.vars[var]
        except KeyError:
            raise MalformedConstraintError(
                f"Variable '{var.name}' is not part of the compiled model"
            ) from None

    # -- top level ---------------------------------------------------------

    def post(self, expr: Expr):
        """Assert ``expr`` as a hard constraint."""
        if isinstance(expr, And):
            for a in expr.args:
                self.post(a)
        elif isinstance(expr, Const):
            if not expr.value:
                self.model.AddBoolOr([self.true_literal().Not()])
        elif isinstance(expr, Or):
            self.model.AddBoolOr([self.literal(a) for a in expr.args])
        elif isinstance(expr, Not) and isinstance(expr.arg, And):
            # !(a & b) is the clause (!a | !b)
            self.model.AddBoolOr([self.literal(a).Not() for a in expr.arg.args])
        elif isinstance(expr, Not) and isinstance(expr.arg, Or):
            self.model.AddBoolAnd([self.literal(a).Not() for a in expr.arg.args])
        elif isinstance(expr, Compare):
            rel = self._relation(expr.op, expr.lhs, expr.rhs)
            if isinstance(rel, bool):
                if not rel:
                    self.model.AddBoolOr([self.true_literal().Not()])
            else:
                self.model.Add(rel)
        else:
            self.model.AddBoolOr([self.literal(expr)])

    # -- boolean context ---------------------------------------------------

    def literal(self, expr: Expr):
        """Return a CP-SAT literal equivalent to the boolean expression."""
        if not expr.is_bool:
            raise MalformedConstraintError(f"Expected a boolean expression, got {expr.pretty()}")
        if isinstance(expr, Variable):
            return self._var(expr)
        if isinstance(expr, Const):
            t = self.true_literal()
            return t if expr.value else t.Not()
        if isinstance(expr, Not):
            return self.literal(expr.arg).Not()
        if expr in self._reified:
            return self._reified[expr]
        b = self.model.NewBoolVar(f"_r{len(self._reified)}")
        self._reify(expr, b)
        self._reified[expr] = b
        return b

    def _reify(self, expr: Expr, b):
        model = self.model
        if isinstance(expr, (And, Or, Implies)):
            if isinstance(expr, Implies):
                lits = [self.literal(expr.lhs).Not(), self.literal(expr.rhs)]
            else:
                lits = [self.literal(a) for a in expr.args]
            negs = [lit.Not() for lit in lits]
            if isinstance(expr, And):
                model.AddBoolAnd(lits).OnlyEnforceIf(b)
                model.AddBoolOr(negs).OnlyEnforceIf(b.Not())
            else:
                model.AddBoolOr(lits).OnlyEnforceIf(b)
                model.AddBoolAnd(negs).OnlyEnforceIf(b.Not())
        elif isinstance(expr, Iff):
            la, lb = self.literal(expr.lhs), self.literal(expr.rhs)
            # b -> (a <-> b'), !b -> (a xor b')
            model.AddBoolOr([la.Not(), lb]).OnlyEnforceIf(b)
            model.AddBoolOr([la, lb.Not()]).OnlyEnforceIf(b)
            model.AddBoolOr([la, lb]).OnlyEnforceIf(b.Not())
            model.AddBoolOr([la.Not(), lb.Not()]).OnlyEnforceIf(b.Not())
        elif isinstance(expr, Compare):
            rel = self._relation(expr.op, expr.lhs, expr.rhs)
            if isinstance(rel, bool):
                model.Add(b == int(rel))
            else:
                model.Add(rel).OnlyEnforceIf(b)
                model.Add(self._relation(expr.op.negate(), expr.lhs, expr.rhs)).OnlyEnforceIf(b.Not())
        else:
            raise MalformedConstraintError(f"Cannot compile expression {expr!r}")

    # -- integer context ---------------------------------------------------

    def linear(self, expr: Expr):
        """Return an int or a CP-SAT linear expression for ``expr``."""
        if isinstance(expr, Variable):
            return self._var(expr)
        if isinstance(expr, Const):
            return int(expr.value)
        if isinstance(expr, Sum):
            return sum(self.linear(t) for t in expr.terms)
        if isinstance(expr, Not):
            return 1 - self.linear(expr.arg)
        # any other boolean node counts as its 0/1 indicator
        return self.literal(expr)

    def _relation(self, op, lhs: Expr, rhs: Expr):
        left, right = self.linear(lhs), self.linear(rhs)
        if isinstance(left, int) and isinstance(right, int):
            return bool(op.fn(left, right))
        return op.fn(left, right)


class CpSatOracle:
    """
    Decision procedure backed by OR-Tools CP-SAT.

    CP-SAT has no incremental push/pop, so every call compiles a fresh
    `CpModel` from the currently active assertions. The assertion stack itself
    lives in `SolverSession`.
    """

    def __init__(self, config: Optional[CpSatConfig] = None):
        self.config = config or CpSatConfig()

    def solve(
        self,
        variables: Sequence[Variable],
        assertions: Sequence[Expr],
        hints: Optional[Mapping[Variable, Value]] = None,
    ) -> OracleResult:
        model = cp_model.CpModel()
        compiler = CpSatCompiler(model, variables)
        for expr in assertions:
            compiler.post(expr)

        if hints:
            for var, val in hints.items():
                if var in compiler.vars:
                    model.AddHint(compiler.vars[var], int(val))

        num_constraints, num_vars = get_model_size(model)
        logger.debug(f"→ #constraints = {num_constraints},  #vars = {num_vars}")

        solver = configure_solver(self.config)
        status = solver.Solve(model)

        if status == cp_model.MODEL_INVALID:
            raise OracleError(f"CP-SAT rejected the model: {model.Validate()}")

        result = OracleResult(
            status=_STATUS_MAP.get(status, CheckResult.UNKNOWN),
            wall_time=solver.WallTime(),
            num_constraints=num_constraints,
        )
        if result.status is CheckResult.SAT:
            result.values = {
                v: bool(solver.BooleanValue(cp_var)) if v.is_bool else int(solver.Value(cp_var))
                for v, cp_var in compiler.vars.items()
            }
        return result

from contextlib import contextmanager
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple
import logging

from core.expressions import Expr, Value, Variable, constraint_size
from core.registry import VariableRegistry
from exceptions.custom_errors import (
    MalformedConstraintError,
    NoModelAvailableError,
    UnbalancedStackError,
)
from solver.oracle import CheckResult, CpSatOracle, OracleResult
from utils.constants import USE_SOLUTION_HINTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Checkpoint:
    """A marker in the assertion stack."""

    level: int
    """1-based depth of the checkpoint once pushed."""
    mark: int
    """Number of assertions that were active when the checkpoint was pushed."""


@dataclass(frozen=True)
class Model:
    """
    Snapshot of a satisfying assignment.

    A model is only valid for the session state at the moment of the check
    that produced it; `generation` records that state so callers can tell a
    stale snapshot from a current one.
    """

    values: Mapping[Variable, Value]
    generation: int
    check_index: int

    def __contains__(self, var: Variable) -> bool:
        return var in self.values

    def __len__(self) -> int:
        return len(self.values)


@dataclass
class SessionStats:
    checks: int = 0
    sat: int = 0
    unsat: int = 0
    unknown: int = 0
    solve_time: float = 0.0
    outcomes: List[CheckResult] = field(default_factory=list)


class SolverSession:
    """
    Owns one oracle handle, one variable registry and the incremental
    assertion stack.

    Sessions are explicit objects passed into builders and refinement drivers;
    several sessions can coexist. A session is driven by a single thread.
    """

    def __init__(
        self,
        registry: Optional[VariableRegistry] = None,
        oracle=None,
        use_hints: bool = USE_SOLUTION_HINTS,
    ):
        self.registry = registry if registry is not None else VariableRegistry()
        self.oracle = oracle if oracle is not None else CpSatOracle()
        self.use_hints = use_hints
        self.stats = SessionStats()
        self._assertions: List[Expr] = []
        self._checkpoints: List[Checkpoint] = []
        self._generation = 0
        self._last: Optional[OracleResult] = None
        self._last_generation = -1
        self._hint_values: Dict[Variable, Value] = {}

    # == Variables ==
    def declare(self, name: str, domain=None, key=None) -> Variable:
        """Shortcut for ``session.registry.declare``."""
        if domain is None:
            return self.registry.declare(name, key=key)
        return self.registry.declare(name, domain, key=key)

    # == Assertions ==
    def add(self, constraint: Expr) -> None:
        """Assert a boolean constraint into the current stack frame."""
        if not isinstance(constraint, Expr):
            raise MalformedConstraintError(f"Not a constraint expression: {constraint!r}")
        if not constraint.is_bool:
            raise MalformedConstraintError(
                f"Only boolean expressions can be asserted, got {constraint.pretty()}"
            )
        foreign = [v.name for v in constraint.variables() if not self.registry.owns(v)]
        if foreign:
            raise MalformedConstraintError(
                f"Constraint mentions variables from another session: {', '.join(sorted(foreign))}"
            )
        self._assertions.append(constraint)
        self._mutated()

    def add_all(self, constraints) -> int:
        count = 0
        for c in constraints:
            self.add(c)
            count += 1
        return count

    @property
    def assertions(self) -> Tuple[Expr, ...]:
        return tuple(self._assertions)

    # == Checkpoint stack ==
    @property
    def depth(self) -> int:
        return len(self._checkpoints)

    def push(self) -> Checkpoint:
        """Open a checkpoint; everything asserted afterwards can be rolled back in bulk."""
        cp = Checkpoint(level=len(self._checkpoints) + 1, mark=len(self._assertions))
        self._checkpoints.append(cp)
        self._mutated()
        return cp

    def pop(self, n: int = 1) -> None:
        """Discard the top ``n`` checkpoints and every assertion made since the oldest of them."""
        if n < 1:
            raise ValueError(f"pop() expects a positive count, got {n}")
        if n > len(self._checkpoints):
            raise UnbalancedStackError(
                f"Cannot pop {n} checkpoint(s): only {len(self._checkpoints)} on the stack"
            )
        target = self._checkpoints[-n]
        del self._checkpoints[-n:]
        del self._assertions[target.mark:]
        self._mutated()

    def pop_to(self, checkpoint: Checkpoint) -> None:
        """Unwind the stack through ``checkpoint`` (inclusive)."""
        if (
            checkpoint.level > len(self._checkpoints)
            or self._checkpoints[checkpoint.level - 1] != checkpoint
        ):
            raise UnbalancedStackError(f"Checkpoint {checkpoint} is not on the stack")
        self.pop(len(self._checkpoints) - checkpoint.level + 1)

    @contextmanager
    def scope(self) -> Iterator[Checkpoint]:
        """Push on entry and always unwind back through that checkpoint on exit."""
        cp = self.push()
        try:
            yield cp
        finally:
            self.pop_to(cp)

    # == Checking ==
    def check(self) -> CheckResult:
        """Run the oracle on the active assertions. Blocks until it answers."""
        hints = self._hint_values if self.use_hints else None
        result = self.oracle.solve(list(self.registry), list(self._assertions), hints=hints)

        self.stats.checks += 1
        self.stats.solve_time += result.wall_time
        self.stats.outcomes.append(result.status)
        if result.status is CheckResult.SAT:
            self.stats.sat += 1
            self._hint_values = dict(result.values)
        elif result.status is CheckResult.UNSAT:
            self.stats.unsat += 1
        else:
            self.stats.unknown += 1
            logger.warning(
                f"⚠️ Check #{self.stats.checks} was inconclusive (solver gave up after {result.wall_time:.2f}s)"
            )

        logger.debug(
            f"⏱ Check #{self.stats.checks}: {result.status.value} in {result.wall_time:.2f}s "
            f"({len(self._assertions)} assertions, depth {self.depth})"
        )
        self._last = result
        self._last_generation = self._generation
        return result.status

    def get_model(self) -> Model:
        """Return the model of the last check; only valid right after a SAT result."""
        if self._last is None:
            raise NoModelAvailableError("No check has been run on this session")
        if self._last.status is not CheckResult.SAT:
            raise NoModelAvailableError(f"Last check returned {self._last.status.value}, not SAT")
        if self._last_generation != self._generation:
            raise NoModelAvailableError("The session changed since the last SAT check")
        return Model(
            values=MappingProxyType(dict(self._last.values)),
            generation=self._generation,
            check_index=self.stats.checks,
        )

    def is_current(self, model: Model) -> bool:
        return model.generation == self._generation

    def _mutated(self):
        self._generation += 1

    def describe(self) -> str:
        """Multi-line dump of the active assertions."""
        lines = [f"; {len(self.registry)} variables, {len(self._assertions)} assertions, depth {self.depth}"]
        marks = {cp.mark for cp in self._checkpoints}
        for i, expr in enumerate(self._assertions):
            if i in marks:
                lines.append("; -- push --")
            lines.append(expr.pretty())
        return "\n".join(lines)

    def assertion_size(self) -> int:
        return sum(constraint_size(e) for e in self._assertions)

    def __str__(self) -> str:
        return self.describe()

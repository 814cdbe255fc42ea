from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, List, Optional, Sequence
import logging

from core.expressions import Expr, Variable, differs_from, disjunction
from solver.extractor import extract_all
from solver.oracle import CheckResult
from solver.session import Model, SolverSession

logger = logging.getLogger(__name__)


class StopReason(str, Enum):
    EXHAUSTED = "EXHAUSTED"
    """The last check was UNSAT: every solution has been found."""
    LIMIT_REACHED = "LIMIT_REACHED"
    """The caller-supplied maximum was reached."""
    INCONCLUSIVE = "INCONCLUSIVE"
    """The solver gave up (UNKNOWN); more solutions may exist."""


@dataclass
class EnumerationResult:
    solutions: List[Any] = field(default_factory=list)
    stop_reason: Optional[StopReason] = None

    @property
    def count(self) -> int:
        return len(self.solutions)

    @property
    def complete(self) -> bool:
        return self.stop_reason is StopReason.EXHAUSTED


def blocking_clause(model: Model, variables: Sequence[Variable]) -> Expr:
    """
    Disjunction, over every tracked variable, of "value differs from the
    model". Any assignment differing in at least one variable satisfies it;
    only the exact assignment in ``model`` is excluded.
    """
    values = extract_all(model, variables)
    return disjunction(*(differs_from(v, values[v]) for v in variables))


def iter_solutions(
    session: SolverSession,
    variables: Sequence[Variable],
    limit: Optional[int] = None,
    extract: Optional[Callable[[Model], Any]] = None,
    status: Optional[EnumerationResult] = None,
) -> Iterator[Any]:
    """
    Yield distinct solutions one at a time, blocking each one after it is found.

    Blocking clauses are asserted into the current stack frame; wrap the
    iteration in ``session.scope()`` to discard them afterwards. When a
    ``status`` record is given its ``stop_reason`` is filled in on exit.
    """
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")
    extract = extract or (lambda m: extract_all(m, variables))
    found = 0
    while True:
        outcome = session.check()
        if outcome is CheckResult.UNSAT:
            reason = StopReason.EXHAUSTED
            break
        if outcome is CheckResult.UNKNOWN:
            reason = StopReason.INCONCLUSIVE
            break

        model = session.get_model()
        solution = extract(model)
        clause = blocking_clause(model, variables)
        found += 1
        yield solution

        # add constraints to get a different model
        session.add(clause)
        if limit is not None and found >= limit:
            reason = StopReason.LIMIT_REACHED
            break

    logger.info(f"🔎 Enumeration stopped after {found} solution(s): {reason.value}")
    if status is not None:
        status.stop_reason = reason


def enumerate_solutions(
    session: SolverSession,
    variables: Sequence[Variable],
    limit: Optional[int] = None,
    extract: Optional[Callable[[Model], Any]] = None,
    keep_blocking: bool = False,
) -> EnumerationResult:
    """
    Find all distinct solutions over ``variables`` (or the first ``limit``).

    The loop runs inside its own checkpoint, so the session is left exactly as
    it was unless ``keep_blocking`` is set.

    Args:
        session (SolverSession): Session holding the problem constraints.
        variables (Sequence[Variable]): Variables that distinguish two solutions.
        limit (int, optional): Maximum number of solutions to return.
        extract (callable, optional): Turns a model into the solution object;
            defaults to a `{Variable: value}` dict.
        keep_blocking (bool): Leave the blocking clauses asserted.

    Returns:
        EnumerationResult: The solutions and why the loop stopped.
    """
    result = EnumerationResult()
    checkpoint = session.push()
    try:
        for solution in iter_solutions(session, variables, limit, extract, status=result):
            result.solutions.append(solution)
    finally:
        if not keep_blocking:
            session.pop_to(checkpoint)
    return result

from dataclasses import dataclass, field
from functools import wraps
from typing import Dict, List, Optional

import pandas as pd

from exceptions.custom_errors import SatDriverError, error_category
from problems.builder import (
    build_boolean_model,
    build_cycle_model,
    build_partition_model,
    build_queens_model,
)
from schemas.problems import BooleanProblem, HamiltonianProblem, PartitionProblem, QueensProblem
from solver.enumerator import StopReason, enumerate_solutions
from solver.extractor import (
    Board,
    Cycle,
    Partition,
    extract_board,
    extract_booleans,
    extract_cycle,
    extract_partition,
    zone_summary,
)
from solver.oracle import CheckResult
from solver.optimizer import MinMaxOptimizer, OptimizationStatus
from solver.session import SolverSession
from utils.logger import logger


@dataclass
class QueensReport:
    boards: List[Board]
    stop_reason: StopReason

    @property
    def count(self) -> int:
        return len(self.boards)


@dataclass
class CycleReport:
    status: CheckResult
    cycle: Optional[Cycle] = None


@dataclass
class PartitionReport:
    status: OptimizationStatus
    history: List[Partition] = field(default_factory=list)
    summary: Optional[pd.DataFrame] = None
    note: Optional[str] = None

    @property
    def best(self) -> Optional[Partition]:
        return self.history[-1] if self.history else None


@dataclass
class BooleanReport:
    status: CheckResult
    model: Dict[str, bool] = field(default_factory=dict)


def reports_errors(func):
    """Log the error category of any orchestration failure, then re-raise it."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SatDriverError as e:
            logger.error(f"❌ {func.__name__} failed ({error_category(e)} error): {e}")
            raise

    return wrapper


@reports_errors
def solve_queens(problem: QueensProblem, session: Optional[SolverSession] = None) -> QueensReport:
    """
    Enumerate N-queens placements.

    Finds every placement, or the first `maxSolutions` of them. Each board is
    blocked after it is found, so no board is reported twice.
    """
    session, state = build_queens_model(problem, session)
    logger.info(f"🚀 Putting {problem.size} queens on the board...")
    result = enumerate_solutions(
        session,
        list(state.cells.values()),
        limit=problem.maxSolutions,
        extract=lambda m: extract_board(m, state),
    )
    logger.info(f"✅ {result.count} models were found.")
    return QueensReport(boards=result.solutions, stop_reason=result.stop_reason)


@reports_errors
def find_hamiltonian_cycle(
    problem: HamiltonianProblem, session: Optional[SolverSession] = None
) -> CycleReport:
    """Return one Hamiltonian cycle, or an UNSAT report if the graph has none."""
    session, state = build_cycle_model(problem, session)
    logger.info("🚀 Finding a Hamiltonian cycle...")
    status = session.check()
    if status is CheckResult.SAT:
        cycle = extract_cycle(session.get_model(), state)
        logger.info(f"✅ {cycle}")
        return CycleReport(status, cycle)
    if status is CheckResult.UNSAT:
        logger.info("There is no Hamiltonian cycle.")
    return CycleReport(status)


@reports_errors
def optimize_partition(
    problem: PartitionProblem, session: Optional[SolverSession] = None
) -> PartitionReport:
    """
    Assign CPUs to roles, then minimize the worst NUMA-zone load.

    Every improving round is kept in the report history; the last entry is the
    best partition found. The summary DataFrame describes the best partition.
    """
    session, state = build_partition_model(problem, session)
    logger.info("🚀 Searching for an initial partition...")
    optimizer = MinMaxOptimizer(session, state.zone_members())
    result = optimizer.run(max_rounds=problem.maxRounds)

    history = [extract_partition(r.model, state) for r in result.rounds]
    report = PartitionReport(status=result.status, history=history, note=state.note)
    if report.best is not None:
        best = report.best
        report.summary = zone_summary(best, state)
        logger.info(f"📊 Max zone load: {' -> '.join(str(p.max_load) for p in history)}")
        if best.shared_siblings:
            logger.info(f"🔍 {len(best.shared_siblings)} sibling pair(s) share a core with different roles")
    return report


@reports_errors
def check_boolean_system(
    problem: BooleanProblem, session: Optional[SolverSession] = None
) -> BooleanReport:
    """Check a CNF system; report the model when it is satisfiable."""
    session, state = build_boolean_model(problem, session)
    logger.info(f"finding a model for:\n{session.describe()}")
    status = session.check()
    if status is CheckResult.SAT:
        model = extract_booleans(session.get_model(), state)
        logger.info("model: " + ", ".join(f"{k} -> {v}" for k, v in model.items()))
        return BooleanReport(status, model)
    if status is CheckResult.UNSAT:
        logger.info("unsatisfiable problem")
    return BooleanReport(status)

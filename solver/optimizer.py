from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence
import logging

from core.expressions import Variable, lt, total
from solver.extractor import extract_all, zone_loads
from solver.oracle import CheckResult
from solver.session import Checkpoint, Model, SolverSession

logger = logging.getLogger(__name__)


class OptimizationStatus(str, Enum):
    OPTIMAL = "OPTIMAL"
    """No zone assignment with a lower worst-zone load exists (under greedy tightening)."""
    NO_SOLUTION = "NO_SOLUTION"
    """The base constraints are unsatisfiable."""
    INCONCLUSIVE = "INCONCLUSIVE"
    """The solver gave up before proving the last round infeasible."""
    ROUND_LIMIT = "ROUND_LIMIT"
    """Stopped by the caller-supplied round cap."""


@dataclass
class Round:
    index: int
    max_load: int
    loads: Dict[str, int]
    model: Model


@dataclass
class RoundOutcome:
    status: CheckResult
    model: Optional[Model] = None


@dataclass
class OptimizationResult:
    status: OptimizationStatus
    rounds: List[Round] = field(default_factory=list)

    @property
    def best(self) -> Optional[Round]:
        return self.rounds[-1] if self.rounds else None

    @property
    def max_loads(self) -> List[int]:
        return [r.max_load for r in self.rounds]


class MinMaxOptimizer:
    """
    Minimizes the largest per-zone sum by repeated capacity tightening.

    The oracle has no objective function, so every round asks for a model in
    which all zone sums are strictly below the current maximum. Successful
    rounds keep their checkpoint open (the bound only ever narrows); a failed
    round unwinds its own checkpoint before returning.
    """

    def __init__(self, session: SolverSession, zones: Mapping[str, Sequence[Variable]]):
        if not zones:
            raise ValueError("MinMaxOptimizer needs at least one zone")
        self.session = session
        self.zones = {z: list(members) for z, members in zones.items()}
        self._tracked = [v for members in self.zones.values() for v in members]
        self.checkpoints: List[Checkpoint] = []

    def loads(self, model: Model) -> Dict[str, int]:
        return zone_loads(extract_all(model, self._tracked), self.zones)

    def improve(self, model: Model) -> RoundOutcome:
        """
        Run one tightening round starting from ``model``.

        Returns:
            RoundOutcome: SAT with a strictly better model (checkpoint kept),
                UNSAT when no improvement exists, or UNKNOWN when the solver
                gave up. In the last two cases the round's checkpoint is popped.
        """
        current_max = max(self.loads(model).values())

        cp = self.session.push()  # Save the existing constraints.
        for members in self.zones.values():
            self.session.add(lt(total(members), current_max))

        outcome = self.session.check()
        if outcome is CheckResult.SAT:
            self.checkpoints.append(cp)
            return RoundOutcome(outcome, self.session.get_model())

        # Backtrack: discard the attempted tightening.
        self.session.pop_to(cp)
        return RoundOutcome(outcome)

    def run(self, max_rounds: Optional[int] = None) -> OptimizationResult:
        """
        Find an initial solution and tighten until no further improvement.

        Args:
            max_rounds (int, optional): Cap on tightening rounds after the
                initial solution. Termination is guaranteed without it.
        """
        outcome = self.session.check()
        if outcome is CheckResult.UNSAT:
            logger.info("❌ No solution for the base constraints.")
            return OptimizationResult(OptimizationStatus.NO_SOLUTION)
        if outcome is CheckResult.UNKNOWN:
            return OptimizationResult(OptimizationStatus.INCONCLUSIVE)

        result = OptimizationResult(OptimizationStatus.OPTIMAL)
        model = self.session.get_model()
        result.rounds.append(self._record(0, model))

        while True:
            if max_rounds is not None and len(result.rounds) > max_rounds:
                result.status = OptimizationStatus.ROUND_LIMIT
                break
            step = self.improve(model)
            if step.status is CheckResult.UNSAT:
                logger.info(f"✅ Optimization exhausted: max zone load {result.best.max_load}")
                break
            if step.status is CheckResult.UNKNOWN:
                result.status = OptimizationStatus.INCONCLUSIVE
                break
            model = step.model
            result.rounds.append(self._record(len(result.rounds), model))

        return result

    def rollback(self) -> None:
        """Pop every checkpoint opened by successful rounds."""
        if self.checkpoints:
            self.session.pop_to(self.checkpoints[0])
            self.checkpoints.clear()

    def _record(self, index: int, model: Model) -> Round:
        loads = self.loads(model)
        rnd = Round(index=index, max_load=max(loads.values()), loads=loads, model=model)
        logger.info(f"▶️ Round {index}: max zone load = {rnd.max_load}")
        return rnd

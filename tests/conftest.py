import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from problems.setup import make_session
from solver.oracle import CheckResult, CpSatConfig, OracleResult
from solver.session import SolverSession


class ScriptedOracle:
    """Stand-in oracle answering from a fixed list of statuses.

    SAT answers assign every declared variable its lowest value, or the value
    given in `values` when the variable's name is listed there.
    """

    def __init__(self, statuses, values=None):
        self.statuses = list(statuses)
        self.values = values or {}
        self.calls = 0

    def solve(self, variables, assertions, hints=None):
        status = self.statuses[min(self.calls, len(self.statuses) - 1)]
        self.calls += 1
        result = OracleResult(status=status, wall_time=0.01, num_constraints=len(assertions))
        if status is CheckResult.SAT:
            result.values = {
                v: self.values.get(v.name, False if v.is_bool else v.domain.lo) for v in variables
            }
        return result


@pytest.fixture
def session():
    """A real CP-SAT session with a single worker, so re-checks are reproducible."""
    return make_session(CpSatConfig(max_time_seconds=30.0, num_workers=1), use_hints=False)


@pytest.fixture
def scripted_session():
    def factory(statuses, values=None):
        return SolverSession(oracle=ScriptedOracle(statuses, values), use_hints=False)

    return factory

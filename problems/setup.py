from core.expressions import BOOLEAN, IntDomain
from core.state import BooleanState, CycleState, PartitionState, QueensState
from solver.oracle import CpSatConfig, CpSatOracle
from solver.session import SolverSession
from utils.constants import ROLE_VALUES, USE_SOLUTION_HINTS
from utils.problem_utils import board_cells, sibling_pairs


def make_session(config: CpSatConfig = None, use_hints: bool = USE_SOLUTION_HINTS) -> SolverSession:
    """Creates a new solver session backed by CP-SAT."""
    return SolverSession(oracle=CpSatOracle(config), use_hints=use_hints)


def build_cells(session: SolverSession, size: int):
    """Builds the c[r,c] BoolVars for every cell of the board."""
    return session.registry.declare_family("c", board_cells(size), BOOLEAN)


def build_positions(session: SolverSession, size: int):
    """Builds the p[i,j] BoolVars for every cycle position (0..size inclusive) and node."""
    keys = [(i, j) for i in range(size + 1) for j in range(size)]
    return session.registry.declare_family("p", keys, BOOLEAN)


def build_units(session: SolverSession, unit_count: int, role_values=ROLE_VALUES):
    """Builds the cpu[u] IntVars bounded by the admissible role values."""
    domain = IntDomain(min(role_values), max(role_values))
    family = session.registry.declare_family("cpu", [(u,) for u in range(unit_count)], domain)
    return {u: family[(u,)] for u in range(unit_count)}


def setup_queens(session: SolverSession, size: int) -> QueensState:
    return QueensState(size=size, cells=build_cells(session, size))


def setup_cycle(session: SolverSession, adjacency, directed: bool = True) -> CycleState:
    size = len(adjacency)
    return CycleState(
        size=size,
        adjacency=[list(row) for row in adjacency],
        directed=directed,
        positions=build_positions(session, size),
    )


def setup_partition(
    session: SolverSession,
    unit_count,
    siblings,
    zones,
    total,
    zone_min=0,
    zone_max=None,
    capacity_mode="lower",
    sibling_policy="exclusive",
) -> PartitionState:
    return PartitionState(
        unit_count=unit_count,
        units=build_units(session, unit_count),
        siblings=list(siblings),
        sibling_pairs=sibling_pairs(siblings),
        zones={z: list(m) for z, m in zones.items()},
        zone_min=zone_min,
        zone_max=zone_max if zone_max is not None else unit_count,
        capacity_mode=capacity_mode,
        total=total,
        sibling_policy=sibling_policy,
        role_values=tuple(ROLE_VALUES),
    )


def setup_boolean(session: SolverSession, names, clauses) -> BooleanState:
    variables = {name: session.declare(name) for name in names}
    return BooleanState(variables=variables, clauses=[list(c) for c in clauses])

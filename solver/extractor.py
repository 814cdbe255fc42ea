from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Tuple
import logging

import pandas as pd

from core.expressions import Value, Variable
from core.state import BooleanState, CycleState, PartitionState, QueensState
from exceptions.custom_errors import OutOfDomainError, UnboundVariableError
from solver.session import Model
from utils.constants import ROLE_LABELS

logger = logging.getLogger(__name__)


def extract(model: Model, variable: Variable) -> Value:
    """
    Read the concrete value of ``variable`` out of ``model``.

    Raises:
        UnboundVariableError: The solver produced no value for the variable.
        OutOfDomainError: The value lies outside the variable's declared domain.
    """
    value = model.values.get(variable)
    if value is None:
        raise UnboundVariableError(f"Solver returned no value for '{variable.name}'")
    if not variable.domain.contains(value):
        raise OutOfDomainError(
            f"Solver returned {value!r} for '{variable.name}', outside {variable.domain}"
        )
    return bool(value) if variable.is_bool else int(value)


def extract_all(model: Model, variables: Iterable[Variable]) -> Dict[Variable, Value]:
    return {v: extract(model, v) for v in variables}


def extract_family(
    model: Model, family: Mapping[Tuple[Hashable, ...], Variable]
) -> Dict[Tuple[Hashable, ...], Value]:
    """Extract a coordinate-keyed table of values, e.g. a board of cells."""
    return {k: extract(model, v) for k, v in family.items()}


# == Typed assignments ==
@dataclass(frozen=True)
class Board:
    """N-queens placement: ``queens[row] == col``."""

    size: int
    queens: Tuple[int, ...]

    def cells(self) -> List[Tuple[int, int]]:
        return [(r, c) for r, c in enumerate(self.queens)]


@dataclass(frozen=True)
class Cycle:
    """Hamiltonian cycle as the node visited at every position, last == first."""

    nodes: Tuple[int, ...]

    @property
    def edges(self) -> List[Tuple[int, int]]:
        return list(zip(self.nodes, self.nodes[1:]))

    def __str__(self) -> str:
        return " -> ".join(str(n) for n in self.nodes)


@dataclass(frozen=True)
class Partition:
    """Role of every unit plus the derived per-zone loads."""

    roles: Tuple[int, ...]
    zone_loads: Dict[str, int] = field(default_factory=dict)
    shared_siblings: Tuple[Tuple[int, int], ...] = ()

    @property
    def max_load(self) -> int:
        return max(self.zone_loads.values(), default=0)

    @property
    def total(self) -> int:
        return sum(self.roles)


def extract_board(model: Model, state: QueensState) -> Board:
    cells = extract_family(model, state.cells)
    queens = []
    for r in range(state.size):
        cols = [c for c in range(state.size) if cells[(r, c)]]
        if len(cols) != 1:
            # encoding guarantees exactly one queen per row
            raise OutOfDomainError(f"Row {r} holds {len(cols)} queens in a satisfying model")
        queens.append(cols[0])
    return Board(state.size, tuple(queens))


def extract_cycle(model: Model, state: CycleState) -> Cycle:
    positions = extract_family(model, state.positions)
    nodes = []
    for i in range(state.size + 1):
        held = [j for j in range(state.size) if positions[(i, j)]]
        if len(held) != 1:
            raise OutOfDomainError(f"Cycle position {i} holds nodes {held} in a satisfying model")
        nodes.append(held[0])
    return Cycle(tuple(nodes))


def zone_loads(values: Mapping[Variable, Value], zones: Mapping[str, List[Variable]]) -> Dict[str, int]:
    """Sum of role values of every zone's members."""
    return {z: sum(int(values[v]) for v in members) for z, members in zones.items()}


def extract_partition(model: Model, state: PartitionState) -> Partition:
    roles = [extract(model, state.units[u]) for u in range(state.unit_count)]
    loads = {
        z: sum(roles[u] for u in members) for z, members in state.zones.items()
    }
    shared = tuple(
        (i, j) for i, j in state.sibling_pairs if roles[i] != roles[j]
    )
    return Partition(tuple(roles), loads, shared)


def extract_booleans(model: Model, state: BooleanState) -> Dict[str, bool]:
    return {name: extract(model, var) for name, var in state.variables.items()}


# == Tabular summaries ==
def board_frame(board: Board) -> pd.DataFrame:
    """Board as a DataFrame of 'Q' / '.' cells."""
    rows = [["Q" if board.queens[r] == c else "." for c in range(board.size)] for r in range(board.size)]
    return pd.DataFrame(rows, index=range(board.size), columns=range(board.size))


def zone_summary(
    partition: Partition, state: PartitionState, labels: Optional[Mapping[int, str]] = None
) -> pd.DataFrame:
    """Per-zone role counts, one row per zone."""
    labels = labels or ROLE_LABELS
    rows = []
    for z, members in state.zones.items():
        row = {"Zone": z, "Units": len(members)}
        for role, label in labels.items():
            row[label] = sum(1 for u in members if partition.roles[u] == role)
        row["Load"] = partition.zone_loads[z]
        rows.append(row)
    return pd.DataFrame(rows).set_index("Zone")

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from core.expressions import Variable


@dataclass
class QueensState:
    """
    Holds the variables and parameters of an N-queens placement problem.
    """

    size: int
    """Number of queens and the side length of the board."""
    cells: Dict[Tuple[int, int], Variable]
    """A dictionary with keys `(row, col)` and values a boolean variable
    indicating if a queen stands on that cell.
    """


@dataclass
class CycleState:
    """
    Holds the variables and parameters of a Hamiltonian-cycle problem.

    Positions run from 0 to `size` inclusive; position `size` duplicates
    position 0 so the path closes into a cycle.
    """

    size: int
    """Number of nodes in the graph."""
    adjacency: List[List[int]]
    """0/1 matrix; `adjacency[j][k] == 1` if the edge j -> k exists."""
    directed: bool
    """If False, an edge may be walked in either direction."""
    positions: Dict[Tuple[int, int], Variable]
    """A dictionary with keys `(position, node)` and values a boolean variable
    indicating if the node is visited at that position.
    """


@dataclass
class PartitionState:
    """
    Holds the variables and parameters of a CPU-to-role partitioning problem.
    """

    unit_count: int
    """Number of CPUs (units)."""
    units: Dict[int, Variable]
    """Role variable of every unit, keyed by unit index."""
    siblings: List[int]
    """Physical core (group id) of every unit."""
    sibling_pairs: List[Tuple[int, int]]
    """Unordered pairs of units sharing a physical core."""
    zones: Dict[str, List[int]]
    """Members of every NUMA zone."""
    zone_min: int
    """Lower bound of the loaded role count per zone."""
    zone_max: int
    """Upper bound of the loaded role count per zone (range mode only)."""
    capacity_mode: str
    """Either 'lower' (only zone_min) or 'range' (zone_min and zone_max)."""
    total: int
    """Required number of units holding the loaded role across all zones."""
    sibling_policy: str
    """Either 'exclusive' (siblings never both loaded) or 'uniform' (siblings share a role)."""
    role_values: Tuple[int, ...] = (0, 1)
    """The admissible role values; the loaded role counts as 1."""
    note: Optional[str] = None
    """Validation note, e.g. units that belong to no zone."""

    def zone_members(self) -> Dict[str, List[Variable]]:
        return {z: [self.units[u] for u in members] for z, members in self.zones.items()}


@dataclass
class BooleanState:
    """
    Holds the variables and clauses of a toy boolean satisfiability check.
    """

    variables: Dict[str, Variable]
    """Boolean variables by name."""
    clauses: List[List[str]] = field(default_factory=list)
    """CNF clauses; a literal is a variable name, optionally prefixed with '!'."""

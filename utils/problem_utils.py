from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

"""
Small helpers that derive index structures from the static problem tables.
"""


def board_cells(size: int) -> List[Tuple[int, int]]:
    """All `(row, col)` cells of a size x size board, row-major."""
    return [(r, c) for r in range(size) for c in range(size)]


def diagonal_groups(size: int) -> Dict[int, List[Tuple[int, int]]]:
    """Cells grouped by the diagonal constant `row - col` (top left to bottom right)."""
    groups = defaultdict(list)
    for r, c in board_cells(size):
        groups[r - c].append((r, c))
    return dict(groups)


def anti_diagonal_groups(size: int) -> Dict[int, List[Tuple[int, int]]]:
    """Cells grouped by the diagonal constant `row + col` (top right to bottom left)."""
    groups = defaultdict(list)
    for r, c in board_cells(size):
        groups[r + c].append((r, c))
    return dict(groups)


def sibling_pairs(siblings: Sequence[int]) -> List[Tuple[int, int]]:
    """Unordered pairs `(i, j)`, `i < j`, of units sharing a physical core."""
    by_core = defaultdict(list)
    for unit, core in enumerate(siblings):
        by_core[core].append(unit)
    pairs = []
    for units in by_core.values():
        for a in range(len(units)):
            for b in range(a + 1, len(units)):
                pairs.append((units[a], units[b]))
    return sorted(pairs)


def has_edge(adjacency: Sequence[Sequence[int]], j: int, k: int, directed: bool = True) -> bool:
    if adjacency[j][k]:
        return True
    return not directed and bool(adjacency[k][j])


def non_edges(adjacency: Sequence[Sequence[int]], directed: bool = True) -> List[Tuple[int, int]]:
    """Ordered node pairs `(j, k)` that may not be visited consecutively."""
    n = len(adjacency)
    return [(j, k) for j in range(n) for k in range(n) if not has_edge(adjacency, j, k, directed)]


def parse_literal(literal: str) -> Tuple[str, bool]:
    """Split `'!x'` / `'~x'` / `'x'` into `(name, positive)`."""
    lit = literal.strip()
    if lit[:1] in ("!", "~"):
        return lit[1:].strip(), False
    return lit, True

from core.expressions import conjunction, disjunction, negate, pairwise_exclusion
from core.state import CycleState, QueensState
from utils.problem_utils import anti_diagonal_groups, diagonal_groups, non_edges

"""
This module contains the permutation rules shared by the N-queens and
Hamiltonian-cycle encodings: every slot is covered, no slot is covered twice.
"""


def at_least_one(session, candidates):
    """Assert the disjunction of the candidates."""
    session.add(disjunction(*candidates))


def at_most_one(session, candidates):
    """Assert pairwise mutual exclusion between the candidates."""
    session.add_all(pairwise_exclusion(candidates))


# == N-queens ==
def queens_rows_rule(session, state: QueensState):
    """Each row has exactly one queen."""
    n = state.size
    for r in range(n):
        row = [state.cells[r, c] for c in range(n)]
        at_least_one(session, row)
        at_most_one(session, row)


def queens_cols_rule(session, state: QueensState):
    """Each column has exactly one queen."""
    n = state.size
    for c in range(n):
        col = [state.cells[r, c] for r in range(n)]
        at_least_one(session, col)
        at_most_one(session, col)


def queens_diagonals_rule(session, state: QueensState):
    """At most one queen per diagonal, for both diagonal families (row - col and row + col)."""
    for groups in (diagonal_groups(state.size), anti_diagonal_groups(state.size)):
        for cells in groups.values():
            if len(cells) > 1:
                at_most_one(session, [state.cells[rc] for rc in cells])


# == Hamiltonian cycle ==
def every_node_rule(session, state: CycleState):
    """Every node takes some position in the cycle."""
    for j in range(state.size):
        at_least_one(session, [state.positions[i, j] for i in range(state.size + 1)])


def no_duplicate_nodes_rule(session, state: CycleState):
    """A node takes at most one position, except the first position which is also the last."""
    n = state.size
    for j in range(n):
        for i in range(n + 1):
            for k in range(i + 1, n + 1):
                if i == 0 and k == n:
                    continue
                session.add(negate(conjunction(state.positions[i, j], state.positions[k, j])))


def occupy_positions_rule(session, state: CycleState):
    """Every position is assigned to a node."""
    for i in range(state.size + 1):
        at_least_one(session, [state.positions[i, j] for j in range(state.size)])


def one_node_per_position_rule(session, state: CycleState):
    """No two nodes share a position."""
    for i in range(state.size + 1):
        at_most_one(session, [state.positions[i, j] for j in range(state.size)])


def adjacent_nodes_rule(session, state: CycleState):
    """Two consecutive positions must hold adjacent nodes."""
    forbidden = non_edges(state.adjacency, state.directed)
    for i in range(state.size):
        for j, k in forbidden:
            session.add(negate(conjunction(state.positions[i, j], state.positions[i + 1, k])))


def form_cycle_rule(session, state: CycleState):
    """The first node of the cycle is also the last: both true or both false, per node."""
    last = state.size
    for j in range(state.size):
        first, second = state.positions[0, j], state.positions[last, j]
        both = conjunction(first, second)
        neither = conjunction(negate(first), negate(second))
        session.add(disjunction(both, neither))

from typing import Optional, Tuple
import logging

from core.constraint_manager import ConstraintManager
from core.state import BooleanState, CycleState, PartitionState, QueensState
from problems.rules import *
from problems.setup import (
    make_session,
    setup_boolean,
    setup_cycle,
    setup_partition,
    setup_queens,
)
from schemas.problems import BooleanProblem, HamiltonianProblem, PartitionProblem, QueensProblem
from solver.session import SolverSession
from utils.validate import validate_adjacency, validate_clauses, validate_partition_tables

logger = logging.getLogger(__name__)


# == Build N-queens Model ==
def build_queens_model(
    problem: QueensProblem, session: Optional[SolverSession] = None
) -> Tuple[SolverSession, QueensState]:
    """Place `size` queens so that no two attack each other."""
    session = session or make_session()
    logger.info(f"📋 Building {problem.size}-queens model...")
    state = setup_queens(session, problem.size)

    cm = ConstraintManager(session, state)
    cm.add_rule(queens_rows_rule)  # Each row has exactly one queen
    cm.add_rule(queens_cols_rule)  # Each column has exactly one queen
    cm.add_rule(queens_diagonals_rule)  # Both diagonal families
    cm.apply_all()
    return session, state


# == Build Hamiltonian Cycle Model ==
def build_cycle_model(
    problem: HamiltonianProblem, session: Optional[SolverSession] = None
) -> Tuple[SolverSession, CycleState]:
    """Positions 0..n of a closed walk through every node of the graph."""
    validate_adjacency(problem.adjacency)
    session = session or make_session()
    logger.info(f"📋 Building Hamiltonian cycle model for {len(problem.adjacency)} nodes...")
    state = setup_cycle(session, problem.adjacency, problem.directed)

    cm = ConstraintManager(session, state)
    cm.add_rule(every_node_rule)  # Every node must take a position in the cycle
    cm.add_rule(no_duplicate_nodes_rule)  # ...and at most one, apart from first == last
    cm.add_rule(occupy_positions_rule)  # Every position is assigned to a node
    cm.add_rule(one_node_per_position_rule)  # No two nodes on the same position
    cm.add_rule(adjacent_nodes_rule)  # Consecutive positions hold adjacent nodes
    cm.add_rule(form_cycle_rule)  # The first node in the cycle is the last node
    cm.apply_all()
    return session, state


# == Build CPU Partition Model ==
def build_partition_model(
    problem: PartitionProblem, session: Optional[SolverSession] = None
) -> Tuple[SolverSession, PartitionState]:
    """Assign every CPU one of two roles under sibling, zone and total constraints."""
    note = validate_partition_tables(
        problem.unitCount,
        problem.siblings,
        problem.zones,
        problem.total,
        problem.zoneMin,
        problem.zoneMax,
        problem.capacityMode,
        problem.siblingPolicy,
    )
    session = session or make_session()
    logger.info(
        f"📋 Building partition model: {problem.unitCount} units, {len(problem.zones)} zones, "
        f"total {problem.total} ({problem.capacityMode} capacity, {problem.siblingPolicy} siblings)"
    )
    state = setup_partition(
        session,
        problem.unitCount,
        problem.siblings,
        problem.zones,
        problem.total,
        zone_min=problem.zoneMin,
        zone_max=problem.zoneMax,
        capacity_mode=problem.capacityMode,
        sibling_policy=problem.siblingPolicy,
    )
    state.note = note

    cm = ConstraintManager(session, state)
    cm.add_rule(role_domain_rule)  # Every unit takes one of the roles
    cm.add_rule(sibling_rule, condition=bool(state.sibling_pairs))  # Handle units sharing a core
    cm.add_rule(zone_capacity_rule)  # Per-zone capacity bounds
    cm.add_rule(total_load_rule)  # Global number of loaded units
    cm.apply_all()
    return session, state


# == Build Boolean System ==
def build_boolean_model(
    problem: BooleanProblem, session: Optional[SolverSession] = None
) -> Tuple[SolverSession, BooleanState]:
    """CNF clauses over named boolean variables."""
    validate_clauses(problem.variables, problem.clauses)
    session = session or make_session()
    state = setup_boolean(session, problem.variables, problem.clauses)

    cm = ConstraintManager(session, state)
    cm.add_rule(clauses_rule)
    cm.apply_all()
    return session, state

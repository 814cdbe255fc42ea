from core.expressions import disjunction, eq, ge, le, ne, total
from core.state import PartitionState

"""
This module contains the capacity and partition rules for assigning CPUs to roles.
"""


def role_domain_rule(session, state: PartitionState):
    """Values assigned to units are one of the admissible roles."""
    for u in range(state.unit_count):
        unit = state.units[u]
        session.add(disjunction(*(eq(unit, r) for r in state.role_values)))


def sibling_rule(session, state: PartitionState):
    """
    Constrain units sharing a physical core.

    - 'exclusive': two siblings never both hold the loaded role.
    - 'uniform': siblings hold the same role (their sum is never exactly 1).
    """
    for i, j in state.sibling_pairs:
        pair = total([state.units[i], state.units[j]])
        if state.sibling_policy == "uniform":
            session.add(ne(pair, 1))
        else:
            session.add(le(pair, 1))


def zone_capacity_rule(session, state: PartitionState):
    """In each zone, at least zone_min (and in range mode at most zone_max) units are loaded."""
    for members in state.zone_members().values():
        load = total(members)
        session.add(ge(load, state.zone_min))
        if state.capacity_mode == "range":
            session.add(le(load, state.zone_max))


def total_load_rule(session, state: PartitionState):
    """The total number of loaded units is fixed."""
    session.add(eq(total(state.units[u] for u in range(state.unit_count)), state.total))

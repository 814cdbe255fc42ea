from core.expressions import disjunction, negate
from core.state import BooleanState
from utils.problem_utils import parse_literal

"""
This module contains the rules for toy boolean satisfiability checks.
"""


def literal_expr(state: BooleanState, literal: str):
    """Translate `'x'` / `'!x'` into the variable or its negation."""
    name, positive = parse_literal(literal)
    var = state.variables[name]
    return var if positive else negate(var)


def clauses_rule(session, state: BooleanState):
    """Assert every clause as a disjunction of its literals."""
    for clause in state.clauses:
        session.add(disjunction(*(literal_expr(state, lit) for lit in clause)))

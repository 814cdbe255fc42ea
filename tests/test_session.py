import pytest

from core.expressions import IntDomain, Variable, ge, negate, total
from core.registry import VariableRegistry
from exceptions.custom_errors import (
    MalformedConstraintError,
    NoModelAvailableError,
    UnbalancedStackError,
)
from solver.extractor import extract
from solver.oracle import CheckResult


def test_push_pop_is_exactly_reversible(session):
    a, b = session.declare("a"), session.declare("b")
    session.add(a | b)
    assert session.check() is CheckResult.SAT
    before = dict(session.get_model().values)
    assertions_before = session.assertions

    session.push()
    session.add(negate(a))
    session.add(negate(b))
    assert session.depth == 1
    assert session.check() is CheckResult.UNSAT

    session.pop()
    assert session.depth == 0
    assert session.assertions == assertions_before
    assert session.check() is CheckResult.SAT
    assert dict(session.get_model().values) == before


def test_pop_never_removes_constraints_from_before_the_push(session):
    a = session.declare("a")
    session.add(a)
    session.push()
    session.push()
    session.add(negate(a))
    session.pop(2)
    assert len(session.assertions) == 1
    assert session.check() is CheckResult.SAT
    assert extract(session.get_model(), a) is True


def test_unbalanced_pop(session):
    session.push()
    with pytest.raises(UnbalancedStackError):
        session.pop(2)
    with pytest.raises(ValueError):
        session.pop(0)
    session.pop()
    with pytest.raises(UnbalancedStackError):
        session.pop()


def test_pop_to_checkpoint_and_scope(session):
    a = session.declare("a")
    outer = session.push()
    session.add(a)
    session.push()
    session.add(negate(a))
    session.pop_to(outer)
    assert session.depth == 0
    assert session.assertions == ()
    with pytest.raises(UnbalancedStackError):
        session.pop_to(outer)

    with pytest.raises(RuntimeError):
        with session.scope():
            session.add(a)
            raise RuntimeError("boom")
    assert session.depth == 0
    assert session.assertions == ()


def test_model_requires_a_current_sat_check(session):
    a = session.declare("a")
    with pytest.raises(NoModelAvailableError):
        session.get_model()

    session.add(a)
    session.add(negate(a))
    assert session.check() is CheckResult.UNSAT
    with pytest.raises(NoModelAvailableError):
        session.get_model()


def test_model_goes_stale_after_mutation(session):
    a = session.declare("a")
    session.add(a)
    assert session.check() is CheckResult.SAT
    model = session.get_model()
    assert session.is_current(model)

    session.push()
    assert not session.is_current(model)
    with pytest.raises(NoModelAvailableError):
        session.get_model()


def test_only_boolean_constraints_over_own_variables(session):
    n = session.declare("n", IntDomain(0, 3))
    with pytest.raises(MalformedConstraintError):
        session.add(total([n]))
    with pytest.raises(MalformedConstraintError):
        session.add("n >= 1")

    stranger = VariableRegistry().declare("n", IntDomain(0, 3))
    with pytest.raises(MalformedConstraintError):
        session.add(ge(stranger, 1))
    with pytest.raises(MalformedConstraintError):
        session.add(ge(Variable("loose", IntDomain(0, 1)), 1))
    assert session.assertions == ()


def test_unknown_is_reported_not_conflated_with_unsat(scripted_session):
    session = scripted_session([CheckResult.UNKNOWN])
    a = session.declare("a")
    session.add(a)

    assert session.check() is CheckResult.UNKNOWN
    assert session.stats.unknown == 1
    assert session.stats.unsat == 0
    with pytest.raises(NoModelAvailableError):
        session.get_model()


def test_stats_and_describe(session):
    a, b = session.declare("a"), session.declare("b")
    session.add(a | b)
    session.push()
    session.add(negate(a))
    session.check()
    session.check()

    assert session.stats.checks == 2
    assert session.stats.sat == 2
    text = session.describe()
    assert "; -- push --" in text
    assert "!a" in text
    assert session.assertion_size() == 5

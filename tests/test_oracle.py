import pytest
from ortools.sat.python import cp_model

from core.expressions import (
    FALSE,
    TRUE,
    IntDomain,
    Variable,
    conjunction,
    disjunction,
    eq,
    ge,
    iff,
    implies,
    lt,
    ne,
    negate,
    total,
)
from exceptions.custom_errors import MalformedConstraintError, OracleError
from solver.extractor import extract
from solver.oracle import CheckResult, CpSatCompiler, CpSatConfig, configure_solver, get_model_size


def test_linear_constraints_reach_the_bounds(session):
    x = session.declare("x", IntDomain(0, 5))
    y = session.declare("y", IntDomain(0, 3))
    session.add(ge(total([x, y]), 7))
    session.add(lt(x, 5))

    assert session.check() is CheckResult.SAT
    model = session.get_model()
    assert extract(model, x) == 4
    assert extract(model, y) == 3


def test_reified_comparisons_inside_disjunction(session):
    x = session.declare("x", IntDomain(0, 3))
    session.add(disjunction(eq(x, 2), eq(x, 3)))
    session.add(ne(x, 2))

    assert session.check() is CheckResult.SAT
    assert extract(session.get_model(), x) == 3


def test_implication_and_equivalence(session):
    a, b = session.declare("a"), session.declare("b")
    c, d = session.declare("c"), session.declare("d")
    session.add(implies(a, b))
    session.add(a)
    session.add(ne(b, c))

    assert session.check() is CheckResult.SAT
    model = session.get_model()
    assert extract(model, b) is True
    assert extract(model, c) is False
    assert extract(model, d) is False

    session.add(iff(a, c))
    assert session.check() is CheckResult.UNSAT


def test_nested_structure_is_equivalent_both_ways(session):
    a, b, c = session.declare("a"), session.declare("b"), session.declare("c")
    # !(a & b) | c, with c false and the disjunct forced false through the negation
    session.add(disjunction(negate(conjunction(a, b)), c))
    session.add(negate(c))
    session.add(a)

    assert session.check() is CheckResult.SAT
    assert extract(session.get_model(), b) is False


def test_constant_assertions(session):
    a = session.declare("a")
    session.add(TRUE)
    session.add(a | FALSE)
    assert session.check() is CheckResult.SAT

    session.push()
    session.add(FALSE)
    assert session.check() is CheckResult.UNSAT
    session.pop()

    session.add(lt(total([]), 0))
    assert session.check() is CheckResult.UNSAT


def test_boolean_terms_count_in_sums(session):
    a, b, c = session.declare("a"), session.declare("b"), session.declare("c")
    session.add(eq(total([a, negate(b), c]), 3))

    assert session.check() is CheckResult.SAT
    model = session.get_model()
    assert (extract(model, a), extract(model, b), extract(model, c)) == (True, False, True)


def test_compiler_rejects_unknown_variables():
    model = cp_model.CpModel()
    compiler = CpSatCompiler(model, [Variable("a")])
    with pytest.raises(MalformedConstraintError):
        compiler.post(Variable("ghost"))


def test_compiler_reuses_reified_subexpressions():
    a, b = Variable("a"), Variable("b")
    model = cp_model.CpModel()
    compiler = CpSatCompiler(model, [a, b])
    both = conjunction(a, b)
    assert compiler.literal(both) is compiler.literal(both)
    _, num_vars = get_model_size(model)
    assert num_vars == 3


def test_negated_conjunction_is_posted_as_a_clause():
    a, b = Variable("a"), Variable("b")
    model = cp_model.CpModel()
    CpSatCompiler(model, [a, b]).post(negate(conjunction(a, b)))
    assert get_model_size(model) == (1, 2)


def test_negated_disjunction_is_posted_without_reification():
    a, b = Variable("a"), Variable("b")
    model = cp_model.CpModel()
    CpSatCompiler(model, [a, b]).post(negate(disjunction(a, b)))
    assert get_model_size(model) == (1, 2)


def test_negated_compounds_keep_their_meaning(session):
    a, b = session.declare("a"), session.declare("b")
    c, d = session.declare("c"), session.declare("d")
    session.add(negate(conjunction(a, b)))
    session.add(a)
    session.add(negate(disjunction(c, d)))
    assert session.check() is CheckResult.SAT
    model = session.get_model()
    assert extract(model, b) is False
    assert extract(model, c) is False
    assert extract(model, d) is False


def test_configure_solver_applies_parameters():
    solver = configure_solver(CpSatConfig(max_time_seconds=5.0, random_seed=7, num_workers=2))
    assert solver.parameters.max_time_in_seconds == 5.0
    assert solver.parameters.random_seed == 7
    assert solver.parameters.num_workers == 2


def test_invalid_model_is_an_oracle_error(session, monkeypatch):
    a = session.declare("a")
    session.add(a)
    monkeypatch.setattr(cp_model.CpSolver, "Solve", lambda self, model, *args, **kwargs: cp_model.MODEL_INVALID)

    with pytest.raises(OracleError):
        session.check()

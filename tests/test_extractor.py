import pytest

from core.expressions import IntDomain, Variable, ge
from core.state import PartitionState, QueensState
from exceptions.custom_errors import OutOfDomainError, UnboundVariableError
from solver.extractor import (
    Board,
    Cycle,
    Partition,
    board_frame,
    extract,
    extract_all,
    extract_board,
    extract_partition,
    zone_summary,
)
from solver.oracle import CheckResult
from solver.session import Model


def make_model(values):
    return Model(values=values, generation=0, check_index=1)


def test_extract_returns_typed_values():
    a, n = Variable("a"), Variable("n", IntDomain(0, 3))
    model = make_model({a: 1, n: 2})
    assert extract(model, a) is True
    assert extract(model, n) == 2
    assert extract_all(model, [a, n]) == {a: True, n: 2}


def test_missing_value_is_unbound():
    a, b = Variable("a"), Variable("b")
    with pytest.raises(UnboundVariableError):
        extract(make_model({a: True}), b)
    with pytest.raises(UnboundVariableError):
        extract(make_model({a: None}), a)


def test_value_outside_domain_is_never_coerced():
    a, n = Variable("a"), Variable("n", IntDomain(0, 1))
    with pytest.raises(OutOfDomainError):
        extract(make_model({n: 5}), n)
    with pytest.raises(OutOfDomainError):
        extract(make_model({a: 2}), a)
    with pytest.raises(OutOfDomainError):
        extract(make_model({n: 0.5}), n)


def test_board_with_two_queens_in_a_row_is_rejected():
    cells = {(r, c): Variable(f"c_{r}_{c}") for r in range(2) for c in range(2)}
    state = QueensState(size=2, cells=cells)
    values = {v: False for v in cells.values()}
    values[cells[0, 0]] = values[cells[0, 1]] = True
    with pytest.raises(OutOfDomainError):
        extract_board(make_model(values), state)


def test_partition_loads_and_shared_siblings():
    units = {u: Variable(f"cpu_{u}", IntDomain(0, 1)) for u in range(4)}
    state = PartitionState(
        unit_count=4,
        units=units,
        siblings=[0, 0, 1, 1],
        sibling_pairs=[(0, 1), (2, 3)],
        zones={"zone_0": [0, 1], "zone_1": [2, 3]},
        zone_min=0,
        zone_max=4,
        capacity_mode="lower",
        total=2,
        sibling_policy="exclusive",
    )
    model = make_model({units[0]: 1, units[1]: 0, units[2]: 1, units[3]: 1})
    partition = extract_partition(model, state)

    assert partition.roles == (1, 0, 1, 1)
    assert partition.zone_loads == {"zone_0": 1, "zone_1": 2}
    assert partition.max_load == 2
    assert partition.total == 3
    assert partition.shared_siblings == ((0, 1),)

    summary = zone_summary(partition, state, labels={0: "idle", 1: "busy"})
    assert list(summary.columns) == ["Units", "idle", "busy", "Load"]
    assert summary.loc["zone_1", "busy"] == 2
    assert summary.loc["zone_0", "idle"] == 1


def test_presentation_helpers():
    board = Board(4, (1, 3, 0, 2))
    frame = board_frame(board)
    assert frame.shape == (4, 4)
    assert frame.loc[0, 1] == "Q"
    assert (frame == "Q").sum().sum() == 4
    assert board.cells()[2] == (2, 0)

    cycle = Cycle((0, 1, 2, 0))
    assert str(cycle) == "0 -> 1 -> 2 -> 0"
    assert cycle.edges == [(0, 1), (1, 2), (2, 0)]
    assert Partition(roles=()).max_load == 0


def test_contract_violation_from_the_oracle_surfaces(scripted_session):
    session = scripted_session([CheckResult.SAT], values={"n": 9})
    n = session.declare("n", IntDomain(0, 3))
    session.add(ge(n, 0))

    assert session.check() is CheckResult.SAT
    with pytest.raises(OutOfDomainError):
        extract(session.get_model(), n)

import logging

import pytest

from exceptions.custom_errors import InputMismatchError
from problems.builder import build_boolean_model, build_partition_model
from problems.runner import (
    check_boolean_system,
    find_hamiltonian_cycle,
    optimize_partition,
    solve_queens,
)
from schemas.problems import BooleanProblem, HamiltonianProblem, PartitionProblem, QueensProblem
from solver.enumerator import StopReason, enumerate_solutions
from solver.extractor import extract_booleans, extract_partition
from solver.oracle import CheckResult
from solver.optimizer import OptimizationStatus


def test_equivalent_booleans_always_agree(session):
    problem = BooleanProblem(variables=["x", "y"], clauses=[["!x", "y"], ["!y", "x"]])
    session, state = build_boolean_model(problem, session)

    result = enumerate_solutions(
        session, list(state.variables.values()), extract=lambda m: extract_booleans(m, state)
    )

    assert result.count == 2
    assert all(model["x"] == model["y"] for model in result.solutions)


def test_contradictory_system_is_unsat():
    problem = BooleanProblem(
        variables=["x", "y", "z"],
        clauses=[["x"], ["!y"], ["!x"], ["y"], ["x"], ["z"]],
    )
    report = check_boolean_system(problem)
    assert report.status is CheckResult.UNSAT
    assert report.model == {}


def test_satisfiable_system_reports_its_model():
    problem = BooleanProblem(variables=["x", "y"], clauses=[["x", "y"], ["~x"]])
    report = check_boolean_system(problem)
    assert report.status is CheckResult.SAT
    assert report.model == {"x": False, "y": True}


def test_hamiltonian_cycle_on_small_directed_graph():
    adjacency = [[0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1], [1, 1, 0, 0]]
    report = find_hamiltonian_cycle(HamiltonianProblem(adjacency=adjacency))

    assert report.status is CheckResult.SAT
    nodes = report.cycle.nodes
    assert len(nodes) == 5
    assert nodes[0] == nodes[-1]
    assert sorted(nodes[:-1]) == [0, 1, 2, 3]
    assert all(adjacency[j][k] == 1 for j, k in report.cycle.edges)


def test_graph_without_cycle_is_a_terminal_outcome():
    report = find_hamiltonian_cycle(HamiltonianProblem(adjacency=[[0, 1], [0, 0]]))
    assert report.status is CheckResult.UNSAT
    assert report.cycle is None


def test_undirected_edges_can_be_walked_both_ways():
    dag = [[0, 1, 1], [0, 0, 1], [0, 0, 0]]
    assert find_hamiltonian_cycle(HamiltonianProblem(adjacency=dag)).status is CheckResult.UNSAT

    report = find_hamiltonian_cycle(HamiltonianProblem(adjacency=dag, directed=False))
    assert report.status is CheckResult.SAT
    assert sorted(report.cycle.nodes[:-1]) == [0, 1, 2]


def test_bad_adjacency_is_a_construction_error():
    with pytest.raises(InputMismatchError):
        find_hamiltonian_cycle(HamiltonianProblem(adjacency=[[0, 2], [1, 0]]))


def test_queens_runner_respects_the_limit():
    report = solve_queens(QueensProblem(size=8, maxSolutions=5))
    assert report.count == 5
    assert report.stop_reason is StopReason.LIMIT_REACHED
    for board in report.boards:
        assert sorted(board.queens) == list(range(8))
        diagonals = {r - c for r, c in board.cells()}
        anti_diagonals = {r + c for r, c in board.cells()}
        assert len(diagonals) == len(anti_diagonals) == 8


def test_eight_queens_has_92_solutions():
    report = solve_queens(QueensProblem(size=8))
    assert report.count == 92
    assert report.stop_reason is StopReason.EXHAUSTED


@pytest.mark.parametrize("total", [2, 3, 4])
def test_range_capacity_is_never_violated(session, total):
    problem = PartitionProblem(
        unitCount=8,
        siblings=list(range(8)),
        zones=[list(range(8))],
        total=total,
        zoneMin=2,
        zoneMax=4,
        capacityMode="range",
    )
    session, state = build_partition_model(problem, session)

    result = enumerate_solutions(
        session, list(state.units.values()), extract=lambda m: extract_partition(m, state)
    )

    assert result.complete
    assert result.count == {2: 28, 3: 56, 4: 70}[total]
    assert all(2 <= p.zone_loads["zone_0"] <= 4 for p in result.solutions)


@pytest.mark.parametrize("total", [1, 5])
def test_range_capacity_rejects_out_of_range_totals(session, total):
    problem = PartitionProblem(
        unitCount=8, siblings=list(range(8)), zones=[list(range(8))], total=total,
        zoneMin=2, zoneMax=4, capacityMode="range",
    )
    session, _ = build_partition_model(problem, session)
    assert session.check() is CheckResult.UNSAT


@pytest.mark.parametrize("policy, expected", [("exclusive", 4), ("uniform", 2)])
def test_sibling_policies(session, policy, expected):
    problem = PartitionProblem(
        unitCount=4, siblings=[0, 0, 1, 1], zones=[[0, 1, 2, 3]], total=2, siblingPolicy=policy,
    )
    session, state = build_partition_model(problem, session)

    result = enumerate_solutions(
        session, list(state.units.values()), extract=lambda m: extract_partition(m, state)
    )

    assert result.count == expected
    if policy == "exclusive":
        assert all(p.roles[0] + p.roles[1] == 1 for p in result.solutions)
    else:
        assert all(p.roles[0] == p.roles[1] for p in result.solutions)
        assert all(p.shared_siblings == () for p in result.solutions)


def test_partition_runner_reports_history_and_summary():
    problem = PartitionProblem(
        unitCount=16,
        siblings=[u % 8 for u in range(16)],
        zones=[[z * 4 + i for i in range(4)] for z in range(4)],
        zoneMin=1,
        total=6,
    )
    report = optimize_partition(problem)

    assert report.status is OptimizationStatus.OPTIMAL
    best = report.best
    assert best.total == 6
    assert best.max_load == 2
    assert list(report.summary.index) == ["zone_0", "zone_1", "zone_2", "zone_3"]
    assert report.summary["Load"].sum() == 6
    assert report.summary["Units"].tolist() == [4, 4, 4, 4]
    assert all(best.roles[u] + best.roles[u + 8] <= 1 for u in range(8))


def test_runner_logs_the_error_category(caplog):
    problem = PartitionProblem(unitCount=4, siblings=[0, 1, 2], zones=[[0, 1]], total=1)
    with caplog.at_level(logging.ERROR, logger="sat_drivers"):
        with pytest.raises(InputMismatchError):
            optimize_partition(problem)
    assert "construction error" in caplog.text


def test_partition_report_carries_the_unzoned_note():
    problem = PartitionProblem(unitCount=4, siblings=[0, 1, 2, 3], zones=[[0, 1], [2]], total=2)
    report = optimize_partition(problem)

    assert report.best is not None
    assert report.note is not None
    assert "1 unit(s) belong to no zone: 3." in report.note


def test_partition_report_has_no_note_when_every_unit_is_zoned():
    problem = PartitionProblem(unitCount=4, siblings=[0, 1, 2, 3], zones=[[0, 1], [2, 3]], total=2)
    assert optimize_partition(problem).note is None

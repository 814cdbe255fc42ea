import sys

from problems.runner import (
    check_boolean_system,
    find_hamiltonian_cycle,
    optimize_partition,
    solve_queens,
)
from schemas.problems import BooleanProblem, HamiltonianProblem, PartitionProblem, QueensProblem
from solver.extractor import board_frame
from utils.loader import load_problem_catalog
from utils.logger import logger


def log_partition(index, partition):
    """Log one optimization round the way the CPU demo prints every model."""
    logger.info(f"--- Round {index} ---")
    logger.info(f"Work assignment: {' '.join(map(str, partition.roles))}")
    logger.info(f"Loaded units: {partition.total}")
    for i, j in partition.shared_siblings:
        logger.info(f"siblings {i}, {j} share workload")
    for zone, load in partition.zone_loads.items():
        logger.info(f"Loaded units in {zone}: {load}")


def run_problem(name, problem):
    """Run one catalog entry and log its outcome."""
    logger.info(f"=== {name} ===")
    if isinstance(problem, QueensProblem):
        report = solve_queens(problem)
        for board in report.boards:
            logger.info("\n" + board_frame(board).to_string(header=False, index=False))
        logger.info(f"Total solutions: {report.count} ({report.stop_reason.value})")
    elif isinstance(problem, HamiltonianProblem):
        report = find_hamiltonian_cycle(problem)
        if report.cycle is not None:
            logger.info(f"Cycle: {report.cycle}")
    elif isinstance(problem, PartitionProblem):
        report = optimize_partition(problem)
        if report.note:
            logger.info(report.note)
        for index, partition in enumerate(report.history):
            log_partition(index, partition)
        if report.summary is not None:
            logger.info("\n" + report.summary.to_string())
        logger.info(f"Optimization status: {report.status.value}")
    elif isinstance(problem, BooleanProblem):
        report = check_boolean_system(problem)
        logger.info(f"Result: {report.status.value}")
    return report


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    catalog = load_problem_catalog()
    names = argv or list(catalog)
    unknown = [n for n in names if n not in catalog]
    if unknown:
        logger.error(f"❌ Unknown problem(s): {', '.join(unknown)}. Options: {', '.join(catalog)}")
        return 2
    for name in names:
        run_problem(name, catalog[name])
    return 0


if __name__ == "__main__":
    sys.exit(main())

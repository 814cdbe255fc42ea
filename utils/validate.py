from typing import Dict, List, Optional, Sequence
import logging

from exceptions.custom_errors import InputMismatchError
from utils.constants import CAPACITY_MODES, SIBLING_POLICIES
from utils.problem_utils import parse_literal

logger = logging.getLogger(__name__)


def validate_adjacency(adjacency: Sequence[Sequence[int]]):
    """
    Validate that an adjacency matrix is square, non-empty and 0/1.

    Raises:
        InputMismatchError: If the matrix is malformed.
    """
    n = len(adjacency)
    if n == 0:
        raise InputMismatchError("❌ Adjacency matrix is empty.")
    bad_rows = [i for i, row in enumerate(adjacency) if len(row) != n]
    if bad_rows:
        raise InputMismatchError(
            f"❌ Adjacency matrix must be {n}x{n}; rows with the wrong length: {bad_rows}"
        )
    bad_cells = [
        (j, k) for j in range(n) for k in range(n) if adjacency[j][k] not in (0, 1)
    ]
    if bad_cells:
        raise InputMismatchError(f"❌ Adjacency entries must be 0 or 1; offending cells: {bad_cells[:10]}")


def validate_partition_tables(
    unit_count: int,
    siblings: Sequence[int],
    zones: Dict[str, List[int]],
    total: int,
    zone_min: int = 0,
    zone_max: Optional[int] = None,
    capacity_mode: str = "lower",
    sibling_policy: str = "exclusive",
) -> Optional[str]:
    """
    Cross-check the sibling and zone tables of a partitioning problem.

    Returns:
        Optional[str]: Note listing units that belong to no zone (they are
            only bound by the global total), or None.

    Raises:
        InputMismatchError: If the tables contradict each other.
    """
    if capacity_mode not in CAPACITY_MODES:
        raise InputMismatchError(f"❌ Unknown capacity mode '{capacity_mode}'. Options: {', '.join(CAPACITY_MODES)}")
    if sibling_policy not in SIBLING_POLICIES:
        raise InputMismatchError(f"❌ Unknown sibling policy '{sibling_policy}'. Options: {', '.join(SIBLING_POLICIES)}")
    if len(siblings) != unit_count:
        raise InputMismatchError(
            f"⚠️ Sibling table lists {len(siblings)} units but the problem has {unit_count}."
        )
    if not 0 <= total <= unit_count:
        raise InputMismatchError(f"❌ Total {total} is outside 0..{unit_count}.")
    if capacity_mode == "range":
        if zone_max is None:
            raise InputMismatchError("❌ Range capacity mode needs a zone maximum.")
        if zone_min > zone_max:
            raise InputMismatchError(f"❌ Zone minimum {zone_min} exceeds zone maximum {zone_max}.")

    seen = {}
    for zone, members in zones.items():
        out_of_range = [u for u in members if not 0 <= u < unit_count]
        if out_of_range:
            raise InputMismatchError(
                f"⚠️ Zone {zone!r} references unknown units: {', '.join(map(str, out_of_range))}"
            )
        for u in members:
            if u in seen:
                raise InputMismatchError(f"⚠️ Unit {u} belongs to both zone {seen[u]!r} and zone {zone!r}.")
            seen[u] = zone

    unzoned = sorted(set(range(unit_count)) - set(seen))
    if unzoned:
        msg = (
            f"Note: {len(unzoned)} unit(s) belong to no zone: {', '.join(map(str, unzoned))}. "
            "They will only count towards the global total."
        )
        logger.info(msg)
        return msg
    return None


def validate_clauses(names: Sequence[str], clauses: Sequence[Sequence[str]]):
    """Ensure every literal in every clause refers to a declared variable."""
    known = set(names)
    unknown = sorted(
        {parse_literal(lit)[0] for clause in clauses for lit in clause} - known
    )
    if unknown:
        raise InputMismatchError(f"⚠️ Clauses reference undeclared variables: {', '.join(unknown)}")

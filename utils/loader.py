import json
from pathlib import Path
from typing import Dict, Union

from pydantic import BaseModel, ValidationError

from config.paths import DEMO_PROBLEMS_PATH
from exceptions.custom_errors import FileContentError, FileReadingError
from schemas.problems import BooleanProblem, HamiltonianProblem, PartitionProblem, QueensProblem

PROBLEM_FAMILIES = {
    "queens": QueensProblem,
    "hamiltonian": HamiltonianProblem,
    "partition": PartitionProblem,
    "boolean": BooleanProblem,
}


def load_problem_catalog(path: Union[str, Path, None] = None) -> Dict[str, BaseModel]:
    """
    Load a catalog of named problems from a JSON file.

    Every entry carries a `family` key (one of `PROBLEM_FAMILIES`) and the
    fields of that family's schema.

    Parameters:
        path: Path to the JSON catalog. Defaults to 'config/demo_problems.json'.

    Returns:
        Dict[str, BaseModel]: Validated problem models by entry name.
    """
    if path is None:
        path = DEMO_PROBLEMS_PATH

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise FileReadingError(f"Error loading problem catalog: {e}")

    if not isinstance(raw, dict):
        raise FileContentError("Problem catalog must be a JSON object of named problems.")

    catalog = {}
    for name, entry in raw.items():
        entry = dict(entry)
        family = entry.pop("family", None)
        if family not in PROBLEM_FAMILIES:
            raise FileContentError(
                f"Problem '{name}' has unknown family {family!r}. Options: {', '.join(PROBLEM_FAMILIES)}"
            )
        try:
            catalog[name] = PROBLEM_FAMILIES[family](**entry)
        except ValidationError as e:
            raise FileContentError(f"Problem '{name}' is malformed: {e}")
    return catalog


def load_problem(name: str, path: Union[str, Path, None] = None) -> BaseModel:
    """Load a single named problem from the catalog."""
    catalog = load_problem_catalog(path)
    try:
        return catalog[name]
    except KeyError:
        raise FileContentError(f"No problem named '{name}'. Options: {', '.join(catalog)}") from None

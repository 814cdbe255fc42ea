import json
import os
from dotenv import load_dotenv
from config.paths import CONSTANTS_PATH

"""
Loads configuration constants from config/constants.json and exposes them as module-level variables.
Edit constants.json to change values; import from utils.constants to use in code.
Solver parameters can be overridden through environment variables (or a .env file).
"""

load_dotenv()

with open(CONSTANTS_PATH, "r", encoding="utf-8") as f:
    _constants = json.load(f)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Solver parameters (env overrides win)
SOLVER_TIMEOUT = float(os.getenv("SOLVER_TIMEOUT", _constants["SOLVER_TIMEOUT"]))
SOLVER_SEED = int(os.getenv("SOLVER_SEED", _constants["SOLVER_SEED"]))
SOLVER_WORKERS = int(os.getenv("SOLVER_WORKERS", _constants["SOLVER_WORKERS"]))
USE_SOLUTION_HINTS = _env_bool("USE_SOLUTION_HINTS", _constants["USE_SOLUTION_HINTS"])
LOG_TO_FILE = _env_bool("LOG_TO_FILE", _constants["LOG_TO_FILE"])

# CPU partitioning roles
ROLE_VALUES = tuple(_constants["ROLE_VALUES"])
ROLE_LABELS = {int(k): v for k, v in _constants["ROLE_LABELS"].items()}

# Problem family defaults
DEFAULT_QUEENS_SIZE = _constants["DEFAULT_QUEENS_SIZE"]
DEFAULT_CAPACITY_MODE = _constants["DEFAULT_CAPACITY_MODE"]
DEFAULT_SIBLING_POLICY = _constants["DEFAULT_SIBLING_POLICY"]

CAPACITY_MODES = ("lower", "range")
SIBLING_POLICIES = ("exclusive", "uniform")

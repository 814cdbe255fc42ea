from pathlib import Path

# === Base project path ===
PROJECT_ROOT = Path(__file__).resolve().parents[1]

# === Common directories ===
CONFIG_DIR = PROJECT_ROOT / "config"
LOG_DIR = PROJECT_ROOT / "logs"

# === Config and log files ===
CONSTANTS_PATH = CONFIG_DIR / "constants.json"
DEMO_PROBLEMS_PATH = CONFIG_DIR / "demo_problems.json"
LOG_PATH = LOG_DIR / "solver_run.log"

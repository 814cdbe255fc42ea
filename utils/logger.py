# utils/logger.py
import logging
import sys
from config.paths import LOG_PATH
from utils.constants import LOG_TO_FILE

# Module loggers (`logging.getLogger(__name__)`) propagate to the root logger
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(message)s",
    stream=sys.stdout,
)
# basicConfig is a no-op once the root logger has handlers
logging.getLogger().setLevel(logging.INFO)

logger = logging.getLogger("sat_drivers")
logger.setLevel(logging.INFO)

# File handler, only when asked for; attached once to the root logger
if LOG_TO_FILE and not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers):
    LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)
    logging.getLogger().addHandler(file_handler)

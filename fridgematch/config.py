import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parents[1]


def _env_float(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("ignoring %s=%r: not a number", name, raw)
        return default


def _env_int(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("ignoring %s=%r: not an integer", name, raw)
        return default


DATABASE_URL = os.environ.get("FRIDGEMATCH_DATABASE_URL", "sqlite:///./recipes.db")
DATA_FILE = Path(os.environ.get("FRIDGEMATCH_DATA_FILE", str(ROOT_DIR / "data" / "recipes.json")))

# minimum score for substring/fuzzy matches
MATCH_TOLERANCE = min(1.0, max(0.0, _env_float("FRIDGEMATCH_TOLERANCE", 0.8)))
MAX_WORKERS = max(1, _env_int("FRIDGEMATCH_MAX_WORKERS", 1))
# seconds; None means no limit
TIME_BUDGET = _env_float("FRIDGEMATCH_TIME_BUDGET", None)

LOG_LEVEL = os.environ.get("FRIDGEMATCH_LOG_LEVEL", "INFO").upper()

import os

from .models import Rank

# -----------------------------
# ENGINE DEFAULTS
# -----------------------------
DEFAULT_PATTERN = "linear"
BLOCK_SIZE = 2  # tile edge for the block pattern

# -----------------------------
# OUTPUT / LOGGING
# -----------------------------
DEFAULT_OUT_SEATING = "seating.csv"
DEFAULT_OUT_INVIGILATION = "invigilation.csv"
DEFAULT_LOG_LEVEL = os.environ.get("EXAMSEAT_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# -----------------------------
# DEMO CATALOG
# -----------------------------
SEED_DATA_SEED = 42

# designation strings as they appear in staff rosters
DESIGNATION_RANKS = {
    "chief instructor": Rank.CHIEF,
    "chief": Rank.CHIEF,
    "instructor": Rank.MAIN,
    "main": Rank.MAIN,
    "junior instructor": Rank.JUNIOR,
    "junior": Rank.JUNIOR,
}


def rank_of(designation: str) -> Rank:
    key = str(designation).strip().lower()
    if key not in DESIGNATION_RANKS:
        raise ValueError(f"Unknown designation: {designation!r}")
    return DESIGNATION_RANKS[key]

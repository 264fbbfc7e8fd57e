"""
Roster Match configuration: paths, roster layout, header tokens, run defaults.
"""
import logging
import os
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths (override with ROSTERMATCH_DATA_DIR env var)
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("ROSTERMATCH_DATA_DIR", str(Path.home() / "Documents" / "Roster Match")))
REPORTS_FOLDER = _data_dir / "reports"

# ---------------------------------------------------------------------------
# Spreadsheet containers (selected by file extension, never by content)
# ---------------------------------------------------------------------------
EXCEL_ENGINES = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}

# ---------------------------------------------------------------------------
# Master roster layout (0-based column indices)
# ---------------------------------------------------------------------------
ROSTER_SHEET_INDEX = 0
ROSTER_HEADER_ROWS = 1
ROSTER_NAME_COL = 0            # A: student name
ROSTER_ID_COL = 1              # B: identity document number
ROSTER_ORGANIZATION_COL = 4    # E: school
ROSTER_LEVEL_COL = 8           # I: grade
ROSTER_COHORT_COL = 9          # J: class
ROSTER_SECONDARY_ID_COL = 10   # K: national student number

# ---------------------------------------------------------------------------
# Category extraction
# ---------------------------------------------------------------------------
# Placeholder name for category sources without a name column
UNKNOWN_NAME = "unknown"

# Header detection keywords (matched by substring, case-insensitive)
HEADER_NAME_TOKENS = ("姓名", "名字", "name")
HEADER_ID_TOKENS = ("身份证", "证件号", "id")
HEADER_SCAN_MAX_ROWS = 10

# Some sources prefix identifiers with a letter (student numbers are "G" + id).
# The prefix is only removed when what remains has the identity-number length.
ID_PREFIX = "G"
ID_LENGTH = 18

# ---------------------------------------------------------------------------
# Run defaults
# ---------------------------------------------------------------------------
# Raw environment values; checked when a run starts (see data.store)
DEFAULT_DUPLICATE_POLICY = os.environ.get("ROSTERMATCH_DUPLICATES", "last")
DEFAULT_WORKERS = os.environ.get("ROSTERMATCH_WORKERS", "1")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("ROSTERMATCH_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Attach a stderr handler to the package logger, replacing any earlier one.

    Logs go to stderr so stdout stays clean for printed results and JSON.
    """
    logger = logging.getLogger("rostermatch")
    level = logging.DEBUG if debug else getattr(logging, LOG_LEVEL, logging.INFO)
    logger.setLevel(level)

    for old in list(logger.handlers):
        logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)
    return logger

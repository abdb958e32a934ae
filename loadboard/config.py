"""
Loadboard Configuration

Paths and constants shared by the resolver, pipeline, dashboard and scripts.
"""

from pathlib import Path


# =============================================================================
# PATHS
# =============================================================================

DATA_DIR = Path(__file__).parent / "data"

SHIPMENTS_JSON_PATH = DATA_DIR / "shipments.json"
SHIPMENTS_XLSX_PATH = DATA_DIR / "shipments.xlsx"

SNAPSHOT_DIR = DATA_DIR / "snapshots"
SNAPSHOT_KEY = "loadboard.shipments"


# =============================================================================
# RESOLVER
# =============================================================================

# Seconds per resolver attempt; None waits forever
ATTEMPT_TIMEOUT_S: float | None = 10.0


# =============================================================================
# SPREADSHEET IMPORT
# =============================================================================

HEADER_SCAN_ROWS = 50       # Only the first N rows are scored as header candidates
HEADER_MIN_SCORE = 5        # Hints that must match for a row to count as the header

# The spreadsheet export never carries these
DEFAULT_COUNTRY = "ES"
DEFAULT_CARRIER = "Europillow"
DEFAULT_SPREADSHEET_STATUS = "Delivered"
DEFAULT_PIECES = 1
DEFAULT_WEIGHT_KG = 0


# =============================================================================
# PIPELINE
# =============================================================================

# Ids that mark summary rows rather than shipments
SENTINEL_IDS = frozenset({"TOTALES"})

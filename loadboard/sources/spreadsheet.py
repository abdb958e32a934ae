"""
Spreadsheet Import

Maps the invoicing spreadsheet (albaranes export) to raw shipment records.

The header row is not at a fixed position: exports start with a few title
and filter rows. Each of the first HEADER_SCAN_ROWS rows is scored against
HEADER_HINTS and the first row reaching HEADER_MIN_SCORE is the header.
Columns are then found by header text, so column order does not matter.

Grid convention: list of rows, each a list of cell values, blanks as None.
"""

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import pandas as pd

from ..config import (
    DEFAULT_CARRIER,
    DEFAULT_COUNTRY,
    DEFAULT_PIECES,
    DEFAULT_SPREADSHEET_STATUS,
    DEFAULT_WEIGHT_KG,
    HEADER_MIN_SCORE,
    HEADER_SCAN_ROWS,
)
from ..pipeline.coerce import to_int, to_money, to_number, to_timestamp


# =============================================================================
# DETECTION RULES
# =============================================================================

# Substrings expected in the header row (lowercase)
HEADER_HINTS = (
    "fecha",
    "albar",
    "remit",
    "consig",
    "bultos",
    "kilos",
    "portes",
    "reexp",
    "iva",
    "total",
)

# Raw field -> candidate header substrings. Fields claim header cells in this
# order and a claimed cell is not offered to later fields, so g_reem
# ("G.Reemb") is declared before reemb.
FIELD_COLUMNS = (
    ("id", ("albar", "nº alb", "n° alb", "expedici")),
    ("fecha", ("fecha",)),
    ("exp_ori", ("exp. ori", "exp.ori", "exp ori")),
    ("remitente", ("remit",)),
    ("consignatario", ("consig", "destinatario")),
    ("dest_city", ("poblac", "destino", "ciudad")),
    ("pieces", ("bultos", "bult")),
    ("weight_kg", ("kilos", "kgs", "kg", "peso")),
    ("portes", ("portes",)),
    ("reexp", ("reexp",)),
    ("g_reem", ("g.reem", "g. reem", "g.r.", "gastos reem")),
    ("reemb", ("reemb",)),
    ("desemb", ("desemb",)),
    ("seguro", ("seguro",)),
    ("iva", ("iva",)),
    ("total", ("total",)),
    ("payment_type", ("p/d", "pag", "tipo")),
)

TEXT_FIELDS = ("exp_ori", "remitente", "consignatario", "dest_city")
MONEY_FIELDS = ("portes", "reexp", "reemb", "g_reem", "desemb", "seguro", "iva")

# Placeholder: summed when the export has no total for a row
COST_FALLBACK_FIELDS = ("portes", "reexp", "desemb", "seguro", "iva")


# =============================================================================
# HEADER DETECTION
# =============================================================================

def _cell_text(cell) -> str:
    return "" if cell is None else str(cell).strip().lower()


def score_header(row: Sequence) -> int:
    """Number of HEADER_HINTS contained in at least one cell of the row."""
    cells = [_cell_text(c) for c in row]
    return sum(1 for hint in HEADER_HINTS if any(hint in cell for cell in cells))


def find_header_row(grid: Sequence[Sequence]) -> int | None:
    """Index of the first row scoring at least HEADER_MIN_SCORE, or None."""
    for i, row in enumerate(grid[:HEADER_SCAN_ROWS]):
        if score_header(row) >= HEADER_MIN_SCORE:
            return i
    return None


def discover_columns(header: Sequence) -> dict[str, int]:
    """
    Map raw field names to column positions using FIELD_COLUMNS.

    For each field the left-most unclaimed header cell containing any of its
    candidate substrings (case-insensitive) wins. Fields with no match are
    left out.
    """
    cells = [_cell_text(c) for c in header]
    claimed: set[int] = set()
    columns: dict[str, int] = {}

    for field, candidates in FIELD_COLUMNS:
        for idx, cell in enumerate(cells):
            if idx in claimed or not cell:
                continue
            if any(candidate in cell for candidate in candidates):
                columns[field] = idx
                claimed.add(idx)
                break

    return columns


# =============================================================================
# ROW MAPPING
# =============================================================================

def _is_blank(cell) -> bool:
    return cell is None or (isinstance(cell, str) and not cell.strip())


def _text(cell) -> str:
    if _is_blank(cell):
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def _payment_tag(cell) -> str:
    # "P", "Pagados", "D", "Debidos" -> first letter
    return _text(cell)[:1].upper()


def map_row(row: Sequence, columns: dict[str, int], now: datetime | None = None) -> dict:
    """
    Map one data row to a raw shipment record.

    Fields the export never carries get fixed defaults (country, carrier,
    "Delivered" status); pieces default to 1 and weight to 0.
    """
    def cell(field: str):
        idx = columns.get(field)
        if idx is None or idx >= len(row):
            return None
        return row[idx]

    fecha = to_timestamp(cell("fecha"), now=now)

    record = {
        "id": _text(cell("id")),
        "fecha": fecha,
        "last_seen": fecha,
        "origin_country": DEFAULT_COUNTRY,
        "dest_country": DEFAULT_COUNTRY,
        "carrier": DEFAULT_CARRIER,
        "status": DEFAULT_SPREADSHEET_STATUS,
        "pieces": to_int(cell("pieces")),
        "weight_kg": to_number(cell("weight_kg")),
        "payment_type": _payment_tag(cell("payment_type")),
    }
    for field in TEXT_FIELDS:
        record[field] = _text(cell(field))
    for field in MONEY_FIELDS:
        record[field] = to_money(cell(field))

    if record["pieces"] is None:
        record["pieces"] = DEFAULT_PIECES
    if record["weight_kg"] is None:
        record["weight_kg"] = DEFAULT_WEIGHT_KG

    total = to_money(cell("total"))
    if total is None:
        charges = [record[f] for f in COST_FALLBACK_FIELDS if record[f] is not None]
        total = round(sum(charges), 2) if charges else None
    record["total"] = total

    return record


def grid_to_records(grid: Sequence[Sequence], now: datetime | None = None) -> list[dict]:
    """
    Convert a sheet grid to raw shipment records.

    Returns an empty list when no header row is found. Blank rows below the
    header are skipped.
    """
    header_idx = find_header_row(grid)
    if header_idx is None:
        return []

    columns = discover_columns(grid[header_idx])
    return [
        map_row(row, columns, now=now)
        for row in grid[header_idx + 1:]
        if not all(_is_blank(c) for c in row)
    ]


# =============================================================================
# FILE ACCESS
# =============================================================================

def read_sheet_grid(path: Path) -> list[list]:
    """Read the first worksheet as a grid of raw cell values (no header)."""
    df = pd.read_excel(path, sheet_name=0, header=None, dtype=object)
    return [
        [None if pd.isna(v) else v for v in row]
        for row in df.itertuples(index=False, name=None)
    ]


def load_spreadsheet(path: Path, now: datetime | None = None) -> list[dict]:
    """Read a spreadsheet file and map it to raw shipment records."""
    return grid_to_records(read_sheet_grid(path), now=now)

"""
Normalize Shipments

Raw shipment records in, one fully-populated polars frame out. Raw records
are loosely typed: any field may be missing, keys may be snake_case or
camelCase, numbers may arrive as "10,50"-style text. Everything past this
module sees SHIPMENT_SCHEMA only.
"""

from collections.abc import Iterable, Mapping

import polars as pl

from ..config import SENTINEL_IDS
from .coerce import to_int, to_money, to_number
from .columns import (
    DEFAULT_STATUS,
    FIELD_ALIASES,
    MONEY_COLS,
    SHIPMENT_SCHEMA,
    TEXT_COLS,
    TIMESTAMP_COLS,
)


# =============================================================================
# FIELD ACCESS
# =============================================================================

def _lookup(raw: Mapping, column: str):
    """First non-null value among the raw keys aliased to `column`."""
    for key in FIELD_ALIASES[column]:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _as_text(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        # Spreadsheet ids come back as 12345.0
        return str(int(value))
    if isinstance(value, (Mapping, list)):
        return None
    return str(value)


def _last_checkpoint(raw: Mapping) -> Mapping | None:
    checkpoints = raw.get("checkpoints")
    if not isinstance(checkpoints, list) or not checkpoints:
        return None
    last = checkpoints[-1]
    return last if isinstance(last, Mapping) else None


def _contact_name(raw: Mapping):
    contact = raw.get("contact")
    if isinstance(contact, Mapping) and contact.get("name") is not None:
        return contact.get("name")
    return _lookup(raw, "contact_name")


# =============================================================================
# NORMALIZE
# =============================================================================

def normalize_shipment(raw) -> dict:
    """
    Normalize one raw shipment record.

    Total and pure: anything that is not a mapping is treated as an empty
    record, missing fields get their defaults, and numeric fields are
    coerced (unparseable -> None). Normalizing an already-normalized record
    returns it unchanged.

    Args:
        raw: Raw record (dict-like, any subset of fields)

    Returns:
        Dict with exactly the SHIPMENT_SCHEMA keys
    """
    if not isinstance(raw, Mapping):
        raw = {}

    values = {column: _lookup(raw, column) for column in SHIPMENT_SCHEMA}

    checkpoint = _last_checkpoint(raw)
    if checkpoint is not None:
        values["last_checkpoint_label"] = checkpoint.get("label")
        values["last_checkpoint_ts"] = checkpoint.get("ts")
    values["contact_name"] = _contact_name(raw)

    out = {}
    for column in SHIPMENT_SCHEMA:
        value = values[column]
        if column == "status":
            text = _as_text(value)
            out[column] = DEFAULT_STATUS if text is None else text
        elif column in TEXT_COLS:
            out[column] = _as_text(value) or ""
        elif column in TIMESTAMP_COLS:
            out[column] = _as_text(value) or None
        elif column in MONEY_COLS:
            out[column] = to_money(value)
        elif column == "pieces":
            out[column] = to_int(value)
        elif column == "weight_kg":
            out[column] = to_number(value)
    return out


def is_listable(raw) -> bool:
    """True if the record has a usable id (present, non-blank, not a totals row)."""
    if not isinstance(raw, Mapping):
        return False
    shipment_id = _as_text(raw.get("id"))
    if shipment_id is None or not shipment_id.strip():
        return False
    return shipment_id.strip() not in SENTINEL_IDS


def normalize_shipments(raws: Iterable | None) -> pl.DataFrame:
    """
    Normalize a raw record set into a frame with SHIPMENT_SCHEMA.

    Records without an id, or with a sentinel id, are dropped. Input order
    is kept.

    Args:
        raws: Raw records as produced by the source resolver

    Returns:
        DataFrame with one row per listable shipment (empty frame with the
        full schema when nothing is listable)
    """
    rows = [normalize_shipment(raw) for raw in (raws or []) if is_listable(raw)]
    return pl.DataFrame(rows, schema=SHIPMENT_SCHEMA)

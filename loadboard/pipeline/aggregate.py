"""
Aggregates

Summary numbers for the loadboard header:
- aggregate_counts:   shipment / status / pieces / weight cards
- aggregate_payments: PAGADOS / DEBIDOS / TOTALES finance cards
- status_breakdown:   shipments per status for the Finance page chart

Missing numbers count as zero; nothing here raises on malformed data.
"""

from dataclasses import asdict, dataclass
from typing import NamedTuple

import polars as pl

from .columns import DELIVERED_STATUSES, IN_TRANSIT_STATUSES, PAYMENT_BUCKETS, STATUSES


# =============================================================================
# COUNTS
# =============================================================================

def _sum(df: pl.DataFrame, column: str) -> float:
    return df[column].fill_null(0).sum() if len(df) else 0


def aggregate_counts(df: pl.DataFrame) -> dict:
    """Shipment counts plus total pieces and weight."""
    return {
        "total": len(df),
        "delivered": df.filter(pl.col("status").is_in(list(DELIVERED_STATUSES))).height,
        "in_transit": df.filter(pl.col("status").is_in(list(IN_TRANSIT_STATUSES))).height,
        "total_pieces": _sum(df, "pieces"),
        "total_weight": _sum(df, "weight_kg"),
    }


# =============================================================================
# PAYMENTS
# =============================================================================

@dataclass(frozen=True)
class PaymentBucket:
    """Summed invoice figures for one payment type."""

    pieces: int = 0
    kg: float = 0
    portes: float = 0
    iva: float = 0
    total: float = 0
    count: int = 0

    def __add__(self, other: "PaymentBucket") -> "PaymentBucket":
        return PaymentBucket(
            pieces=self.pieces + other.pieces,
            kg=self.kg + other.kg,
            portes=self.portes + other.portes,
            iva=self.iva + other.iva,
            total=self.total + other.total,
            count=self.count + other.count,
        )

    def as_dict(self) -> dict:
        return asdict(self)


class PaymentSummary(NamedTuple):
    paid: PaymentBucket
    due: PaymentBucket
    totals: PaymentBucket


def _bucket(df: pl.DataFrame) -> PaymentBucket:
    if len(df) == 0:
        return PaymentBucket()
    return PaymentBucket(
        pieces=int(_sum(df, "pieces")),
        kg=_sum(df, "weight_kg"),
        portes=round(_sum(df, "portes"), 2),
        iva=round(_sum(df, "iva"), 2),
        total=round(_sum(df, "total"), 2),
        count=len(df),
    )


def aggregate_payments(df: pl.DataFrame) -> PaymentSummary:
    """
    Split invoice totals into paid ("P") and due ("D") buckets.

    Rows with any other payment-type tag belong to neither bucket and are
    left out of the totals as well. `totals` is the element-wise sum of the
    two buckets, not a separate pass over the rows.
    """
    buckets = {
        name: _bucket(df.filter(pl.col("payment_type") == tag))
        for tag, name in PAYMENT_BUCKETS.items()
    }
    paid, due = buckets["paid"], buckets["due"]
    return PaymentSummary(paid=paid, due=due, totals=paid + due)


# =============================================================================
# STATUS BREAKDOWN
# =============================================================================

def status_breakdown(df: pl.DataFrame) -> pl.DataFrame:
    """
    Shipments per status, known statuses in display order, others after.

    Returns:
        DataFrame with columns: status, count
    """
    counts = df.group_by("status", maintain_order=True).agg(pl.len().alias("count"))
    order = {status: i for i, status in enumerate(STATUSES)}
    return (
        counts
        .with_columns(
            pl.col("status")
            .replace_strict(order, default=len(STATUSES), return_dtype=pl.Int64)
            .alias("_order")
        )
        .sort("_order", maintain_order=True)
        .drop("_order")
    )

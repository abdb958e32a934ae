"""
Search, Filter and Sort

Pure frame -> frame transforms behind the loadboard's search box, sidebar
filters and sort selector. Row order is only ever changed by sort_by.
"""

from collections.abc import Iterable, Sequence

import polars as pl

from .columns import SEARCH_FIELDS


def filter_by_text(
    df: pl.DataFrame,
    query: str | None,
    fields: Sequence[str] = SEARCH_FIELDS,
) -> pl.DataFrame:
    """
    Keep rows where the query is a substring of any of `fields`.

    Matching is case-insensitive and literal (no regex). A blank query
    returns the frame unchanged.

    Args:
        df: Normalized shipments
        query: Search box text
        fields: Columns to search, OR-combined

    Returns:
        Matching rows in their original order
    """
    if query is None or not query.strip():
        return df

    needle = query.lower()
    columns = [f for f in fields if f in df.columns]
    if not columns:
        return df.clear()

    return df.filter(
        pl.any_horizontal([
            pl.col(c).cast(pl.String).fill_null("").str.to_lowercase().str.contains(needle, literal=True)
            for c in columns
        ])
    )


def filter_by_values(
    df: pl.DataFrame,
    column: str,
    values: Iterable[str] | None,
) -> pl.DataFrame:
    """Keep rows whose `column` is one of `values`. No values = no filter."""
    selected = list(values or [])
    if not selected:
        return df
    return df.filter(pl.col(column).is_in(selected))


def sort_by(
    df: pl.DataFrame,
    field: str,
    descending: bool = False,
) -> pl.DataFrame:
    """
    Stable sort on one column.

    Nulls rank below every present value, so they come first ascending and
    last descending. Ties keep their original relative order.

    Raises:
        ValueError: If `field` is not a column of the frame
    """
    if field not in df.columns:
        raise ValueError(f"Cannot sort by unknown column: {field}")
    return df.sort(
        field,
        descending=descending,
        nulls_last=descending,
        maintain_order=True,
    )

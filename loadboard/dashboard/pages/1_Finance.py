"""
Page 1: Finance
===============

Paid vs due invoice figures and shipments per status, for the filtered set.
"""

import plotly.graph_objects as go
import polars as pl
import streamlit as st

from loadboard.dashboard.data import (
    STATUS_COLORS,
    apply_chart_layout,
    fmt_int,
    fmt_kg,
    fmt_money,
    init_page,
)
from loadboard.pipeline import aggregate_payments, status_breakdown

st.set_page_config(page_title="Finance | Loadboard", layout="wide")
st.title("Finance")

# ---------------------------------------------------------------------------
result, prepared_df, df = init_page()

if len(df) == 0:
    st.warning("No data matches current filters.")
    st.stop()

payments = aggregate_payments(df)

# ===========================================================================
# ROW 1: Buckets table
# ===========================================================================

st.subheader("Pagados vs Debidos")

buckets = pl.DataFrame([
    {"Bucket": "PAGADOS (P)", **payments.paid.as_dict()},
    {"Bucket": "DEBIDOS (D)", **payments.due.as_dict()},
    {"Bucket": "TOTALES", **payments.totals.as_dict()},
])
st.dataframe(
    buckets.select(
        pl.col("Bucket"),
        pl.col("count").map_elements(fmt_int, return_dtype=pl.String).alias("Envíos"),
        pl.col("pieces").map_elements(fmt_int, return_dtype=pl.String).alias("Bultos"),
        pl.col("kg").map_elements(fmt_kg, return_dtype=pl.String).alias("Kilos"),
        pl.col("portes").map_elements(fmt_money, return_dtype=pl.String).alias("Portes"),
        pl.col("iva").map_elements(fmt_money, return_dtype=pl.String).alias("IVA"),
        pl.col("total").map_elements(fmt_money, return_dtype=pl.String).alias("Total"),
    ),
    use_container_width=True,
    hide_index=True,
)

unbucketed = len(df) - payments.totals.count
if unbucketed:
    st.caption(f"{unbucketed:,} shipments have no P/D payment type and are not included above.")

st.markdown("---")

# ===========================================================================
# ROW 2: Charts
# ===========================================================================

left, right = st.columns(2)

with left:
    labels = ["Portes", "IVA", "Total"]
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=labels,
        y=[payments.paid.portes, payments.paid.iva, payments.paid.total],
        name="Pagados",
        marker_color="#27ae60",
    ))
    fig.add_trace(go.Bar(
        x=labels,
        y=[payments.due.portes, payments.due.iva, payments.due.total],
        name="Debidos",
        marker_color="#e67e22",
    ))
    fig.update_layout(
        barmode="group",
        title="Invoice Amounts: Pagados vs Debidos",
        yaxis_title="EUR",
        yaxis_ticksuffix=" €", yaxis_tickformat=",.0f",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    apply_chart_layout(fig)
    st.plotly_chart(fig, use_container_width=True)

with right:
    breakdown = status_breakdown(df)
    statuses = breakdown["status"].to_list()
    fig2 = go.Figure(go.Bar(
        x=statuses,
        y=breakdown["count"].to_list(),
        marker_color=[STATUS_COLORS.get(s, "#95a5a6") for s in statuses],
        text=breakdown["count"].to_list(),
        textposition="outside",
    ))
    fig2.update_layout(
        title="Shipments by Status",
        xaxis_title="Status", yaxis_title="Shipments",
        height=420,
    )
    apply_chart_layout(fig2, has_legend=False)
    st.plotly_chart(fig2, use_container_width=True)

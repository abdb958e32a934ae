"""
Europillow Loadboard
====================

Shipment loadboard: finance cards, status counts and a searchable,
sortable shipment table.

Data source is resolved automatically (snapshot -> shipments.json ->
shipments.xlsx). With nothing found, the page asks for pasted JSON.

Run with:
    streamlit run loadboard/dashboard/Loadboard.py
"""

import streamlit as st

from loadboard.dashboard.data import (
    SOURCE_LABELS,
    fmt_int,
    fmt_kg,
    fmt_money,
    init_page,
    paste_form,
    to_display_df,
)
from loadboard.pipeline import aggregate_counts, aggregate_payments

# =============================================================================
# PAGE CONFIG
# =============================================================================

st.set_page_config(
    page_title="Europillow Loadboard",
    page_icon="🚚",
    layout="wide",
    initial_sidebar_state="expanded",
)

# =============================================================================
# DATA + SIDEBAR FILTERS (shared via init_page)
# =============================================================================

result, prepared_df, df = init_page()

st.title("Europillow Loadboard")

if result.needs_paste:
    st.info(
        "No shipment data found (no snapshot, shipments.json or shipments.xlsx). "
        "Paste a JSON array of shipments, or an object with a `data` array."
    )
    paste_form("landing")
    st.stop()

st.caption(f"Source: {SOURCE_LABELS.get(result.source, result.source)}")

# =============================================================================
# FINANCE HEADER
# =============================================================================

payments = aggregate_payments(df)

st.markdown("**Resumen del periodo filtrado**")


def _payment_card(title: str, bucket) -> None:
    with st.container(border=True):
        st.markdown(f"**{title}** · {fmt_int(bucket.count)} envíos")
        c1, c2, c3 = st.columns(3)
        c1.metric("Bultos", fmt_int(bucket.pieces))
        c2.metric("Kilos", fmt_kg(bucket.kg))
        c3.metric("Portes", fmt_money(bucket.portes))
        c4, c5, _ = st.columns(3)
        c4.metric("IVA", fmt_money(bucket.iva))
        c5.metric("Total", fmt_money(bucket.total))


col1, col2, col3 = st.columns(3)
with col1:
    _payment_card("PAGADOS (P)", payments.paid)
with col2:
    _payment_card("DEBIDOS (D)", payments.due)
with col3:
    _payment_card("TOTALES", payments.totals)

# =============================================================================
# STATUS CARDS
# =============================================================================

counts = aggregate_counts(df)

col1, col2, col3, col4, col5 = st.columns(5)
col1.metric("Shipments", fmt_int(counts["total"]))
col2.metric("Delivered", fmt_int(counts["delivered"]))
col3.metric("In transit", fmt_int(counts["in_transit"]))
col4.metric("Pieces", fmt_int(counts["total_pieces"]))
col5.metric("Weight", fmt_kg(counts["total_weight"]))

st.markdown("---")

# =============================================================================
# SHIPMENT TABLE
# =============================================================================

st.caption(f"Showing {len(df):,} of {len(prepared_df):,} shipments")

if df.is_empty():
    st.warning("No shipments match the current search and filters.")
else:
    st.dataframe(
        to_display_df(df),
        use_container_width=True,
        hide_index=True,
    )

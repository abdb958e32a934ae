"""
Page 2: Data Source
===================

Where the loaded shipments came from, plus manual controls:
paste JSON, save / clear the snapshot, re-run source resolution.
"""

import json

import streamlit as st

from loadboard.config import SHIPMENTS_JSON_PATH, SHIPMENTS_XLSX_PATH, SNAPSHOT_DIR
from loadboard.dashboard.data import (
    SOURCE_LABELS,
    clear_snapshot,
    flash,
    init_page,
    load_raw,
    paste_form,
    reload_sources,
    save_snapshot,
)

st.set_page_config(page_title="Data Source | Loadboard", layout="wide")
st.title("Data Source")

# ---------------------------------------------------------------------------
result, prepared_df, df = init_page()

# ===========================================================================
# CURRENT SOURCE
# ===========================================================================

c1, c2, c3 = st.columns(3)
c1.metric("Source", SOURCE_LABELS.get(result.source, result.source))
c2.metric("Raw records", f"{len(result.records):,}")
c3.metric("Listed shipments", f"{len(prepared_df):,}")

st.caption(
    f"Resolution order: snapshot ({SNAPSHOT_DIR}) → {SHIPMENTS_JSON_PATH.name} "
    f"→ {SHIPMENTS_XLSX_PATH.name} → paste"
)

if result.records:
    st.download_button(
        "Download raw records (JSON)",
        json.dumps(result.records, ensure_ascii=False, indent=2, default=str),
        file_name="shipments.json",
        mime="application/json",
    )

st.markdown("---")

# ===========================================================================
# SNAPSHOT CONTROLS
# ===========================================================================

st.subheader("Snapshot")
st.caption("A saved snapshot takes precedence over the bundled files on the next load.")

col1, col2, col3 = st.columns(3)

with col1:
    if st.button("Save snapshot", disabled=result.needs_paste, use_container_width=True):
        saved = save_snapshot()
        st.success(f"Saved {saved:,} records")

with col2:
    if st.button("Clear snapshot", use_container_width=True):
        clear_snapshot()
        st.success("Snapshot cleared")

with col3:
    if st.button("Reload sources", use_container_width=True):
        reloaded = reload_sources()
        flash(
            f"Loaded {len(reloaded.records):,} records from "
            f"{SOURCE_LABELS.get(reloaded.source, reloaded.source)}"
        )
        st.rerun()

st.markdown("---")

# ===========================================================================
# PASTE
# ===========================================================================

st.subheader("Paste data")
st.caption(
    "Replaces the current session's shipments. Invalid JSON is rejected "
    "and the current data is kept."
)
paste_form("data_source")

if load_raw().source == "paste":
    st.info("Showing pasted data. Save a snapshot to keep it for the next session.")

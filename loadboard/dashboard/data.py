"""
Dashboard Data Layer
====================

Layered caching architecture:
  1. load_raw()         : resolves the raw records once per session (session_state)
  2. prepare_df()       : normalizes them (cached on the load token)
  3. get_filtered_df()  : applies sidebar search / filters / sort (cached on params)

A "load event" (resolver success, paste, reload) replaces the raw records and
issues a new load token, which busts layers 2 and 3.

Convention: Polars for all transforms. Formatting to display strings happens
only in to_display_df() / format helpers.
"""

import asyncio
import hashlib
import json
from datetime import datetime

import plotly.graph_objects as go
import polars as pl
import streamlit as st

from loadboard.config import SNAPSHOT_DIR
from loadboard.logging_config import setup_logging
from loadboard.pipeline import (
    STATUSES,
    filter_by_text,
    filter_by_values,
    normalize_shipments,
    sort_by,
)
from loadboard.sources import FileStore, InvalidPasteError, ResolveResult, SourceResolver

RESULT_KEY = "loadboard_result"
TOKEN_KEY = "loadboard_token"
FLASH_KEY = "loadboard_flash"

# Sort selector label -> column
SORT_OPTIONS = {
    "(none)": None,
    "ID": "id",
    "Fecha": "fecha",
    "ETA": "eta",
    "Last seen": "last_seen",
    "Status": "status",
    "Pieces": "pieces",
    "Kg": "weight_kg",
    "Portes": "portes",
    "Total": "total",
    "Remitente": "remitente",
    "Consignatario": "consignatario",
    "Carrier": "carrier",
}

PAYMENT_TYPE_LABELS = {
    "P": "P (Pagados)",
    "D": "D (Debidos)",
}

STATUS_ICONS = {
    "Delayed": "⚠️",
    "Delivered": "🚚",
}
DEFAULT_STATUS_ICON = "📦"

STATUS_COLORS = {
    "Created": "#cbd5e1",
    "At Pickup": "#a5b4fc",
    "In Transit": "#93c5fd",
    "At Hub": "#fcd34d",
    "Out-For-Delivery": "#5eead4",
    "Delayed": "#fca5a5",
    "Delivered": "#6ee7b7",
}

SOURCE_LABELS = {
    "snapshot": "saved snapshot",
    "json": "shipments.json",
    "spreadsheet": "shipments.xlsx",
    "paste": "pasted data",
    "empty": "no data",
}


# =============================================================================
# RESOURCES
# =============================================================================

@st.cache_resource
def get_resolver() -> SourceResolver:
    """One resolver per server process; the snapshot lives on disk."""
    setup_logging()
    return SourceResolver(FileStore(SNAPSHOT_DIR))


def _load_token(records: list) -> str:
    payload = json.dumps(records, sort_keys=True, default=str, ensure_ascii=False)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


def _set_result(result: ResolveResult) -> None:
    st.session_state[RESULT_KEY] = result
    st.session_state[TOKEN_KEY] = _load_token(result.records)


# =============================================================================
# LAYER 1: Raw records (resolved once per session)
# =============================================================================

def load_raw() -> ResolveResult:
    """Resolve the data source on first call; later calls reuse the result."""
    if RESULT_KEY not in st.session_state:
        _set_result(asyncio.run(get_resolver().resolve()))
    return st.session_state[RESULT_KEY]


def reload_sources() -> ResolveResult:
    """Discard the session's records and run the fallback chain again."""
    st.session_state.pop(RESULT_KEY, None)
    return load_raw()


def apply_paste(text: str) -> str | None:
    """
    Replace the session's records with pasted JSON.

    Returns:
        None on success, else the error message (current data is kept)
    """
    try:
        result = get_resolver().accept_paste(text)
    except InvalidPasteError as e:
        return str(e)
    _set_result(result)
    return None


def save_snapshot() -> int:
    """Persist the session's raw records; returns how many were saved."""
    records = load_raw().records
    get_resolver().save_snapshot(records)
    return len(records)


def clear_snapshot() -> None:
    get_resolver().clear_snapshot()


# =============================================================================
# LAYER 2: Normalized frame (cached on load token)
# =============================================================================

@st.cache_data
def prepare_df(_records: list, token: str) -> pl.DataFrame:
    """Normalize raw records. `token` identifies the load event for caching."""
    return normalize_shipments(_records)


# =============================================================================
# LAYER 3: Filtered + sorted frame (cached on filter parameters)
# =============================================================================

@st.cache_data
def get_filtered_df(
    _prepared_df: pl.DataFrame,
    token: str,
    query: str = "",
    statuses: tuple[str, ...] = (),
    payment_types: tuple[str, ...] = (),
    sort_field: str | None = None,
    descending: bool = False,
) -> pl.DataFrame:
    """
    Apply sidebar search, filters and sort.

    Args use tuple (hashable) instead of list for cache compatibility.
    """
    df = filter_by_text(_prepared_df, query)
    df = filter_by_values(df, "status", statuses)
    df = filter_by_values(df, "payment_type", payment_types)
    if sort_field:
        df = sort_by(df, sort_field, descending=descending)
    return df


# =============================================================================
# PAGE INIT: shared sidebar + data loading for all pages
# =============================================================================

def init_page() -> tuple[ResolveResult, pl.DataFrame, pl.DataFrame]:
    """
    Load data, render sidebar filters, return (result, prepared_df, filtered_df).

    Call at the top of every page so the sidebar filters appear regardless
    of which page the user navigates to.
    """
    result = load_raw()
    token = st.session_state[TOKEN_KEY]
    prepared_df = prepare_df(result.records, token)

    _render_sidebar(prepared_df, result)
    show_flash()

    filtered_df = get_filtered_df(
        prepared_df,
        token,
        query=st.session_state.get("filter_search", ""),
        statuses=tuple(st.session_state.get("filter_statuses", ())),
        payment_types=tuple(st.session_state.get("filter_payment_types", ())),
        sort_field=SORT_OPTIONS.get(st.session_state.get("filter_sort", "(none)")),
        descending=st.session_state.get("filter_sort_dir", "Ascending") == "Descending",
    )
    return result, prepared_df, filtered_df


def _render_sidebar(prepared_df: pl.DataFrame, result: ResolveResult) -> None:
    """Render sidebar filters shared across all pages."""
    st.sidebar.subheader("Filters")

    st.sidebar.text_input(
        "Search",
        key="filter_search",
        placeholder="ID, city, carrier, remitente...",
    )

    present = set(prepared_df["status"].unique().to_list())
    status_options = [s for s in STATUSES if s in present] + sorted(present - set(STATUSES))
    st.sidebar.multiselect("Status", status_options, default=[], key="filter_statuses")

    st.sidebar.multiselect(
        "Payment type",
        list(PAYMENT_TYPE_LABELS.keys()),
        default=[],
        format_func=lambda tag: PAYMENT_TYPE_LABELS.get(tag, tag),
        key="filter_payment_types",
    )

    st.sidebar.markdown("---")
    st.sidebar.selectbox("Sort by", list(SORT_OPTIONS.keys()), key="filter_sort")
    st.sidebar.radio(
        "Direction",
        ["Ascending", "Descending"],
        horizontal=True,
        key="filter_sort_dir",
    )

    st.sidebar.markdown("---")
    st.sidebar.metric("Total in dataset", f"{len(prepared_df):,}")
    st.sidebar.caption(f"Source: {SOURCE_LABELS.get(result.source, result.source)}")


# =============================================================================
# FLASH MESSAGES
# =============================================================================

def flash(message: str) -> None:
    """Queue a success message for the next run; st.rerun() discards this one."""
    st.session_state[FLASH_KEY] = message


def show_flash() -> None:
    message = st.session_state.pop(FLASH_KEY, None)
    if message:
        st.success(message)


# =============================================================================
# PASTE FORM
# =============================================================================

def paste_form(key: str) -> None:
    """Text area + button that loads pasted JSON into the session."""
    with st.form(key=f"paste_form_{key}"):
        text = st.text_area(
            "Paste shipments JSON",
            height=200,
            placeholder='[{"id": "EP-1", "status": "In Transit", ...}]  or  {"data": [...]}',
        )
        submitted = st.form_submit_button("Load pasted data")

    if submitted:
        error = apply_paste(text)
        if error:
            st.error(error)
        else:
            flash(f"Loaded {len(load_raw().records):,} pasted records")
            st.rerun()


# =============================================================================
# DISPLAY HELPERS
# =============================================================================

def _es_number(value: float, decimals: int) -> str:
    # 1234.5 -> "1.234,50"
    return f"{value:,.{decimals}f}".replace(",", "_").replace(".", ",").replace("_", ".")


def fmt_int(value) -> str:
    return _es_number(float(value or 0), 0)


def fmt_kg(value) -> str:
    if value is None:
        return ""
    return f"{_es_number(float(value), 0)} kg"


def fmt_money(value) -> str:
    if value is None:
        return ""
    return f"{_es_number(float(value), 2)} €"


def fmt_datetime(value: str | None) -> str:
    if not value:
        return ""
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return ""
    return dt.astimezone().strftime("%d/%m/%Y %H:%M")


def status_label(status: str) -> str:
    return f"{STATUS_ICONS.get(status, DEFAULT_STATUS_ICON)} {status}"


def to_display_df(df: pl.DataFrame) -> pl.DataFrame:
    """Loadboard table: formatted money / kg / dates, status icons."""
    money = ["portes", "reexp", "reemb", "g_reem", "desemb", "seguro", "iva", "total"]
    return df.select(
        pl.col("id").alias("ID"),
        pl.col("origin_city").alias("Origin"),
        pl.col("dest_city").alias("Destination"),
        pl.col("remitente").alias("Remitente"),
        pl.col("consignatario").alias("Consignatario"),
        pl.col("pieces").alias("Pcs"),
        pl.col("weight_kg").map_elements(fmt_kg, return_dtype=pl.String).alias("Kg"),
        *[
            pl.col(c).map_elements(fmt_money, return_dtype=pl.String).alias(c.replace("_", ".").title())
            for c in money
        ],
        pl.col("payment_type").alias("?"),
        pl.col("product_type").alias("Product"),
        pl.col("carrier").alias("Carrier"),
        pl.col("status").map_elements(status_label, return_dtype=pl.String).alias("Status"),
        pl.col("eta").map_elements(fmt_datetime, return_dtype=pl.String).alias("ETA"),
        pl.col("last_seen").map_elements(fmt_datetime, return_dtype=pl.String).alias("Last seen"),
        pl.col("current_loc").alias("Location"),
        pl.col("last_checkpoint_label").alias("Checkpoint"),
        pl.col("last_checkpoint_ts").map_elements(fmt_datetime, return_dtype=pl.String).alias("Checkpoint at"),
        pl.col("contact_name").alias("Contact"),
    )


def apply_chart_layout(fig: go.Figure, has_legend: bool = True) -> go.Figure:
    """Apply consistent layout settings to prevent label cutoff."""
    fig.update_xaxes(automargin=True)
    fig.update_yaxes(automargin=True)
    fig.update_layout(
        margin=dict(l=10, r=10, t=80 if has_legend else 50, b=10),
        autosize=True,
    )
    return fig

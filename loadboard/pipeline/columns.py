"""
Column Schema Definitions

Documents every column of the normalized shipment frame, the raw keys each
column is read from, and the field sets used by search and aggregation.
"""

import polars as pl


# =============================================================================
# NORMALIZED SCHEMA
# =============================================================================

TEXT_COLS = [
    "id",                     # Shipment / albarán number
    "origin_city",
    "origin_country",
    "dest_city",
    "dest_country",
    "product_type",
    "carrier",
    "status",                 # One of STATUSES (free text tolerated)
    "current_loc",            # Current location
    "last_checkpoint_label",  # Hoisted from the last checkpoint
    "contact_name",           # Hoisted from contact.name
    "exp_ori",                # Origin expedition reference
    "remitente",              # Remitter
    "consignatario",          # Consignee
    "payment_type",           # "P" paid / "D" due
]

TIMESTAMP_COLS = [
    "eta",
    "last_seen",
    "last_checkpoint_ts",     # Hoisted from the last checkpoint
    "fecha",                  # Invoice date
]

MONEY_COLS = [
    "portes",                 # Freight charge
    "reexp",                  # Re-expedition charge
    "reemb",                  # Cash on delivery amount
    "g_reem",                 # COD fee
    "desemb",                 # Customs / clearance charge
    "seguro",                 # Insurance
    "iva",                    # VAT
    "total",
]

SHIPMENT_SCHEMA = {
    "id": pl.String,
    "origin_city": pl.String,
    "origin_country": pl.String,
    "dest_city": pl.String,
    "dest_country": pl.String,
    "product_type": pl.String,
    "carrier": pl.String,
    "pieces": pl.Int64,
    "weight_kg": pl.Float64,
    "status": pl.String,
    "eta": pl.String,
    "last_seen": pl.String,
    "current_loc": pl.String,
    "last_checkpoint_label": pl.String,
    "last_checkpoint_ts": pl.String,
    "contact_name": pl.String,
    "fecha": pl.String,
    "exp_ori": pl.String,
    "remitente": pl.String,
    "consignatario": pl.String,
    **{col: pl.Float64 for col in MONEY_COLS},
    "payment_type": pl.String,
}


# =============================================================================
# RAW KEY ALIASES
# =============================================================================

# Normalized column -> raw keys, first present wins. The camelCase keys are
# what the browser view serialized, so re-loading its output still works.
FIELD_ALIASES = {
    "id": ("id",),
    "origin_city": ("origin_city", "originCity"),
    "origin_country": ("origin_country", "originCountry"),
    "dest_city": ("dest_city", "destCity"),
    "dest_country": ("dest_country", "destCountry"),
    "product_type": ("product_type", "productType"),
    "carrier": ("carrier",),
    "pieces": ("pieces",),
    "weight_kg": ("weight_kg", "weightKg"),
    "status": ("status",),
    "eta": ("eta",),
    "last_seen": ("last_seen", "lastSeen"),
    "current_loc": ("current_loc", "currentLoc"),
    "last_checkpoint_label": ("last_checkpoint_label", "lastCheckpointLabel"),
    "last_checkpoint_ts": ("last_checkpoint_ts", "lastCheckpointTs"),
    "contact_name": ("contact_name", "contactName"),
    "fecha": ("fecha",),
    "exp_ori": ("exp_ori", "expOri"),
    "remitente": ("remitente",),
    "consignatario": ("consignatario",),
    "portes": ("portes",),
    "reexp": ("reexp",),
    "reemb": ("reemb",),
    "g_reem": ("g_reem", "gReem"),
    "desemb": ("desemb",),
    "seguro": ("seguro",),
    "iva": ("iva",),
    "total": ("total",),
    "payment_type": ("payment_type", "paymentType"),
}


# =============================================================================
# STATUS VOCABULARY
# =============================================================================

DEFAULT_STATUS = "In Transit"

# Display order for the status breakdown
STATUSES = [
    "Created",
    "At Pickup",
    "In Transit",
    "At Hub",
    "Out-For-Delivery",
    "Delayed",
    "Delivered",
]

DELIVERED_STATUSES = ("Delivered",)
IN_TRANSIT_STATUSES = ("In Transit", "Out-For-Delivery")


# =============================================================================
# SEARCH / PAYMENTS
# =============================================================================

SEARCH_FIELDS = (
    "id",
    "origin_city",
    "dest_city",
    "remitente",
    "consignatario",
    "carrier",
)

# Payment-type tag -> bucket name; other tags belong to neither bucket
PAYMENT_BUCKETS = {
    "P": "paid",
    "D": "due",
}

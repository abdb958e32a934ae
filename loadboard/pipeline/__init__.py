"""
Pipeline Package

Source-agnostic shipment processing:
- columns:   normalized schema, raw key aliases, search fields
- coerce:    int / amount / timestamp coercion
- normalize: raw records -> normalized frame
- search:    text search, value filters, stable sort
- aggregate: status counts and payment buckets
"""

from .aggregate import PaymentBucket, PaymentSummary, aggregate_counts, aggregate_payments, status_breakdown
from .columns import SEARCH_FIELDS, SHIPMENT_SCHEMA, STATUSES
from .normalize import normalize_shipment, normalize_shipments
from .search import filter_by_text, filter_by_values, sort_by

__all__ = [
    "PaymentBucket",
    "PaymentSummary",
    "SEARCH_FIELDS",
    "SHIPMENT_SCHEMA",
    "STATUSES",
    "aggregate_counts",
    "aggregate_payments",
    "filter_by_text",
    "filter_by_values",
    "normalize_shipment",
    "normalize_shipments",
    "sort_by",
    "status_breakdown",
]

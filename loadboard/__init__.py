"""
Europillow Loadboard

Shipment loadboard: resolves raw shipment records from a snapshot, JSON file,
spreadsheet or manual paste, normalizes them, and aggregates them for the
dashboard.
"""

from .version import VERSION

__all__ = ["VERSION"]

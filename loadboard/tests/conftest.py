"""
Shared fixtures for loadboard tests

Run with: pytest loadboard/tests/ -v
"""

import pytest

from loadboard.pipeline import normalize_shipments


@pytest.fixture
def two_records() -> list[dict]:
    """
    Two-shipment invoicing scenario:
    - A1: delivered, paid, 3 pcs / 10 kg
    - A2: in transit, due, 2 pcs / 5 kg
    """
    return [
        {
            "id": "A1", "status": "Delivered", "pieces": 3, "weight_kg": 10,
            "payment_type": "P", "portes": "10,50", "iva": "2,10", "total": "12,60",
        },
        {
            "id": "A2", "status": "In Transit", "pieces": 2, "weight_kg": 5,
            "payment_type": "D", "portes": "5,00", "iva": "1,00", "total": "6,00",
        },
    ]


@pytest.fixture
def two_df(two_records):
    return normalize_shipments(two_records)

"""
Tests for spreadsheet import

Run with: pytest loadboard/tests/test_spreadsheet.py -v
"""

from datetime import datetime, timezone

import pandas as pd
import pytest

from loadboard.sources.spreadsheet import (
    discover_columns,
    find_header_row,
    grid_to_records,
    load_spreadsheet,
    map_row,
    score_header,
)


NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)

HEADER = [
    "Fecha", "Nº Albarán", "Exp. Ori", "Remitente", "Consignatario", "Población",
    "Bultos", "Kilos", "Portes", "Reexp.", "Reemb.", "G.Reemb", "Desemb.",
    "Seguro", "IVA", "Total", "P/D",
]


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def grid() -> list[list]:
    """Export with two title rows, the header, two shipments and a blank row."""
    return [
        ["LISTADO DE ALBARANES", None, None],
        ["Desde 01/01/2025 hasta 31/01/2025", None, None],
        HEADER,
        ["07/01/2025", 5531, "VLC-5531", "Europillow S.L.", "Descanso Centro", "Madrid",
         12, "84", "48,20", None, None, None, None, "1,50", "10,44", "60,14", "Pagados"],
        [None] * len(HEADER),
        [datetime(2025, 1, 8), "5540", None, "Europillow S.L.", "Hogar Sur", "Sevilla",
         None, None, "72,00", "6,00", "350,00", "3,50", None, None, "17,12", None, "d"],
    ]


# =============================================================================
# TESTS: HEADER DETECTION
# =============================================================================

class TestHeaderDetection:
    """Tests for score_header / find_header_row / discover_columns."""

    def test_score(self):
        assert score_header(HEADER) == 10
        assert score_header(["LISTADO DE ALBARANES"]) == 1
        assert score_header([None, 3.5, ""]) == 0

    def test_row_zero_header_selected(self):
        grid = [["fecha", "albarán", "remitente", "consignatario", "bultos"], ["x"] * 5]
        assert find_header_row(grid) == 0

    def test_first_qualifying_row(self, grid):
        assert find_header_row(grid) == 2

    def test_no_qualifying_row(self):
        grid = [["fecha", "albarán", "remitente", "total"], [1, 2, 3, 4]]
        assert find_header_row(grid) is None
        assert grid_to_records(grid) == []

    def test_scan_limit(self):
        grid = [[None]] * 50 + [HEADER]
        assert find_header_row(grid) is None

    def test_columns(self):
        columns = discover_columns(HEADER)
        assert columns["fecha"] == 0
        assert columns["id"] == 1
        assert columns["dest_city"] == 5
        assert columns["reemb"] == 10
        assert columns["g_reem"] == 11
        assert columns["total"] == 15
        assert columns["payment_type"] == 16

    def test_claimed_cell_not_reused(self):
        # "G.Reemb" also contains "reemb"; it must not be handed to reemb too
        columns = discover_columns(["G.Reemb", "Reemb."])
        assert columns["g_reem"] == 0
        assert columns["reemb"] == 1

    def test_only_combined_column_leaves_reemb_unmapped(self):
        columns = discover_columns(["G.Reemb"])
        assert columns == {"g_reem": 0}


# =============================================================================
# TESTS: ROW MAPPING
# =============================================================================

class TestMapRows:
    """Tests for map_row / grid_to_records."""

    def test_maps_rows_and_skips_blank(self, grid):
        records = grid_to_records(grid, now=NOW)
        assert [r["id"] for r in records] == ["5531", "5540"]

    def test_first_row(self, grid):
        record = grid_to_records(grid, now=NOW)[0]
        assert record["fecha"] == "2025-01-07T00:00:00.000Z"
        assert record["last_seen"] == record["fecha"]
        assert record["exp_ori"] == "VLC-5531"
        assert record["remitente"] == "Europillow S.L."
        assert record["dest_city"] == "Madrid"
        assert record["pieces"] == 12
        assert record["weight_kg"] == pytest.approx(84)
        assert record["portes"] == pytest.approx(48.20)
        assert record["seguro"] == pytest.approx(1.50)
        assert record["total"] == pytest.approx(60.14)
        assert record["payment_type"] == "P"

    def test_fixed_defaults(self, grid):
        record = grid_to_records(grid, now=NOW)[0]
        assert record["origin_country"] == "ES"
        assert record["dest_country"] == "ES"
        assert record["carrier"] == "Europillow"
        assert record["status"] == "Delivered"

    def test_missing_values(self, grid):
        record = grid_to_records(grid, now=NOW)[1]
        assert record["fecha"] == "2025-01-08T00:00:00.000Z"
        assert record["pieces"] == 1
        assert record["weight_kg"] == 0
        assert record["exp_ori"] == ""
        assert record["payment_type"] == "D"
        assert record["reemb"] == pytest.approx(350.00)
        assert record["g_reem"] == pytest.approx(3.50)

    def test_total_fallback_sums_charges(self, grid):
        record = grid_to_records(grid, now=NOW)[1]
        # portes + reexp + iva (reemb / g_reem are not charges)
        assert record["total"] == pytest.approx(72.00 + 6.00 + 17.12)

    def test_invalid_date_uses_now(self):
        columns = discover_columns(HEADER)
        record = map_row(["sin fecha", "1"], columns, now=NOW)
        assert record["fecha"] == "2025-03-01T00:00:00.000Z"

    def test_short_row(self):
        record = map_row(["07/01/2025"], discover_columns(HEADER), now=NOW)
        assert record["id"] == ""
        assert record["total"] is None


# =============================================================================
# TESTS: FILE ACCESS
# =============================================================================

class TestLoadSpreadsheet:
    """Tests for load_spreadsheet (xlsx round trip through openpyxl)."""

    def test_reads_first_sheet(self, tmp_path, grid):
        path = tmp_path / "albaranes.xlsx"
        pd.DataFrame(grid).to_excel(path, header=False, index=False)

        records = load_spreadsheet(path, now=NOW)
        assert [r["id"] for r in records] == ["5531", "5540"]
        assert records[0]["total"] == pytest.approx(60.14)
        assert records[1]["payment_type"] == "D"

"""
Tests for the spreadsheet conversion script

Run with: pytest loadboard/tests/test_convert_spreadsheet.py -v
"""

import json

import pandas as pd
import pytest

from loadboard.scripts.convert_spreadsheet import convert, main


@pytest.fixture
def xlsx(tmp_path):
    path = tmp_path / "albaranes.xlsx"
    pd.DataFrame([
        ["Fecha", "Albarán", "Remitente", "Consignatario", "Bultos", "Kilos", "Portes", "IVA", "Total", "P/D"],
        ["07/01/2025", "A1", "Europillow", "Cliente Uno", 3, 10, "10,50", "2,10", "12,60", "P"],
        ["08/01/2025", "A2", "Europillow", "Cliente Dos", 2, 5, "5,00", "1,00", "6,00", "D"],
    ]).to_excel(path, header=False, index=False)
    return path


class TestConvert:
    """Tests for convert / main."""

    def test_writes_json(self, xlsx, tmp_path):
        out = tmp_path / "out" / "shipments.json"
        records = convert(xlsx, out)

        written = json.loads(out.read_text(encoding="utf-8"))
        assert written == records
        assert [r["id"] for r in written] == ["A1", "A2"]
        assert written[0]["total"] == pytest.approx(12.60)

    def test_missing_input(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            convert(tmp_path / "nope.xlsx", tmp_path / "out.json")

    def test_no_header_row(self, tmp_path):
        path = tmp_path / "empty.xlsx"
        pd.DataFrame([["nothing", "here"]]).to_excel(path, header=False, index=False)
        with pytest.raises(ValueError, match="No header row"):
            convert(path, tmp_path / "out.json")

    def test_main_default_output_and_summary(self, xlsx, capsys):
        main([str(xlsx), "--summary"])

        assert xlsx.with_suffix(".json").exists()
        out = capsys.readouterr().out
        assert "SUMMARY" in out
        assert "PAGADOS" in out
        assert "18.60" in out
        assert "Successfully converted 2 rows" in out

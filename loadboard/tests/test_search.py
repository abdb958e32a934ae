"""
Tests for search, filters and sort

Run with: pytest loadboard/tests/test_search.py -v
"""

import itertools

import polars as pl
import pytest

from loadboard.pipeline import filter_by_text, filter_by_values, normalize_shipments, sort_by


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def board() -> pl.DataFrame:
    return normalize_shipments([
        {"id": "EP-1", "origin_city": "Valencia", "dest_city": "Madrid", "carrier": "Europillow",
         "status": "Delivered", "payment_type": "P", "total": "30,00", "eta": "2025-01-03T00:00:00.000Z"},
        {"id": "EP-2", "origin_city": "Alicante", "dest_city": "Sevilla", "carrier": "TransIberia",
         "status": "Delayed", "payment_type": "D", "total": "10,00"},
        {"id": "EP-3", "origin_city": "Valencia", "dest_city": "Bilbao", "consignatario": "Hogar Norte",
         "status": "In Transit", "payment_type": "P", "total": "30,00", "eta": "2025-01-01T00:00:00.000Z"},
    ])


# =============================================================================
# TESTS: TEXT SEARCH
# =============================================================================

class TestFilterByText:
    """Tests for filter_by_text."""

    def test_scenario_query(self, two_df):
        assert filter_by_text(two_df, "a1")["id"].to_list() == ["A1"]

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_blank_query_is_identity(self, board, query):
        assert filter_by_text(board, query).equals(board)

    def test_case_insensitive(self, board):
        for query in ("valencia", "VALENCIA", "VaLeNcIa"):
            assert filter_by_text(board, query)["id"].to_list() == ["EP-1", "EP-3"]

    def test_searches_every_field(self, board):
        assert filter_by_text(board, "sevilla")["id"].to_list() == ["EP-2"]
        assert filter_by_text(board, "transiberia")["id"].to_list() == ["EP-2"]
        assert filter_by_text(board, "hogar")["id"].to_list() == ["EP-3"]

    def test_literal_match(self, board):
        assert len(filter_by_text(board, "EP-.")) == 0

    def test_no_match(self, board):
        result = filter_by_text(board, "lisboa")
        assert len(result) == 0
        assert result.columns == board.columns


# =============================================================================
# TESTS: VALUE FILTERS
# =============================================================================

class TestFilterByValues:
    """Tests for filter_by_values."""

    def test_filters(self, board):
        assert filter_by_values(board, "payment_type", ["D"])["id"].to_list() == ["EP-2"]
        assert filter_by_values(board, "status", ("Delivered", "Delayed"))["id"].to_list() == ["EP-1", "EP-2"]

    @pytest.mark.parametrize("values", [None, [], ()])
    def test_no_values_is_identity(self, board, values):
        assert filter_by_values(board, "status", values).equals(board)


# =============================================================================
# TESTS: SORT
# =============================================================================

class TestSortBy:
    """Tests for sort_by."""

    def test_numeric(self, board):
        assert sort_by(board, "total")["id"].to_list() == ["EP-2", "EP-1", "EP-3"]
        assert sort_by(board, "total", descending=True)["id"].to_list() == ["EP-1", "EP-3", "EP-2"]

    def test_stable_for_all_permutations(self, board):
        for perm in itertools.permutations(range(len(board))):
            df = board[list(perm)]
            tied = [i for i in df["id"].to_list() if i != "EP-2"]
            for descending in (False, True):
                ids = sort_by(df, "total", descending=descending)["id"].to_list()
                assert [i for i in ids if i != "EP-2"] == tied

    def test_nulls_first_ascending_last_descending(self, board):
        assert sort_by(board, "eta")["id"].to_list() == ["EP-2", "EP-3", "EP-1"]
        assert sort_by(board, "eta", descending=True)["id"].to_list() == ["EP-1", "EP-3", "EP-2"]

    def test_does_not_mutate_input(self, board):
        before = board["id"].to_list()
        sort_by(board, "total", descending=True)
        assert board["id"].to_list() == before

    def test_unknown_field(self, board):
        with pytest.raises(ValueError, match="unknown column"):
            sort_by(board, "colour")

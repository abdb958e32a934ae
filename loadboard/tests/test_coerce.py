"""
Tests for value coercion

Run with: pytest loadboard/tests/test_coerce.py -v
"""

from datetime import date, datetime, timezone

import pytest

from loadboard.pipeline.coerce import (
    format_timestamp,
    to_int,
    to_money,
    to_number,
    to_timestamp,
)


NOW = datetime(2025, 3, 1, 8, 30, tzinfo=timezone.utc)


# =============================================================================
# TESTS: AMOUNTS
# =============================================================================

class TestToMoney:
    """Tests for to_money currency coercion."""

    @pytest.mark.parametrize("value", ["1.234,56", "1234.56", "1234,56", "1,234.56", "1.234,56 €"])
    def test_both_separator_styles(self, value):
        assert to_money(value) == pytest.approx(1234.56)

    def test_small_decimal_comma(self):
        assert to_money("12,60") == pytest.approx(12.60)

    def test_numbers_pass_through_rounded(self):
        assert to_money(10) == 10.0
        assert to_money(3.14159) == 3.14

    def test_lone_comma(self):
        assert to_money("1,5") == pytest.approx(1.5)
        assert to_money("1,234,567") == pytest.approx(1234567)

    @pytest.mark.parametrize("value, expected", [("12,500", 12500), ("1,234", 1234), ("-3,000", -3000)])
    def test_comma_before_three_digits_groups_thousands(self, value, expected):
        assert to_money(value) == pytest.approx(expected)

    def test_out_of_float_range(self):
        assert to_money(10 ** 400) is None
        assert to_money("1" + "0" * 400) is None

    def test_negative(self):
        assert to_money("-5,25") == pytest.approx(-5.25)

    @pytest.mark.parametrize("value", [None, "", "abc", "€", True, float("nan")])
    def test_non_numeric_is_none(self, value):
        assert to_money(value) is None


# =============================================================================
# TESTS: NUMBERS
# =============================================================================

class TestToNumber:
    """Tests for to_number / to_int."""

    def test_comma_decimal(self):
        assert to_number("95,5") == pytest.approx(95.5)

    def test_unparseable(self):
        assert to_number("n/a") is None
        assert to_number("  ") is None
        assert to_number(float("inf")) is None

    def test_int_rounds_half_up(self):
        assert to_int("3") == 3
        assert to_int("2,5") == 3
        assert to_int(2.4) == 2

    def test_int_unparseable(self):
        assert to_int("abc") is None
        assert to_int(None) is None

    @pytest.mark.parametrize("value", [10 ** 400, "1e30", 2 ** 63, "-1e20", "1e400"])
    def test_out_of_range_is_none(self, value):
        assert to_int(value) is None

    def test_large_in_range_kept(self):
        assert to_int(10 ** 12) == 10 ** 12
        assert to_int("-1e12") == -(10 ** 12)

    def test_huge_int_number(self):
        assert to_number(10 ** 400) is None


# =============================================================================
# TESTS: TIMESTAMPS
# =============================================================================

class TestToTimestamp:
    """Tests for to_timestamp normalization."""

    def test_format(self):
        assert format_timestamp(NOW) == "2025-03-01T08:30:00.000Z"

    def test_iso_string(self):
        assert to_timestamp("2025-01-07T10:15:00Z") == "2025-01-07T10:15:00.000Z"

    def test_naive_is_utc(self):
        assert to_timestamp(datetime(2025, 1, 7, 10, 15)) == "2025-01-07T10:15:00.000Z"

    def test_date(self):
        assert to_timestamp(date(2025, 1, 7)) == "2025-01-07T00:00:00.000Z"

    def test_day_first_text(self):
        assert to_timestamp("15/01/2025") == "2025-01-15T00:00:00.000Z"

    def test_epoch_millis(self):
        assert to_timestamp(0) == "1970-01-01T00:00:00.000Z"

    def test_invalid_falls_back_to_now(self):
        assert to_timestamp("not a date", now=NOW) == "2025-03-01T08:30:00.000Z"
        assert to_timestamp(None, now=NOW) == "2025-03-01T08:30:00.000Z"

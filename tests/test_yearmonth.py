"""Tests for year-month helpers."""

from datetime import date

import pytest
from futureflow.yearmonth import (
    add_month,
    current_ym,
    diff_months,
    format_date_to_ym,
    parse_year_month,
    split_ym,
)


class TestParseFormat:
    def test_parse_first_of_month(self):
        assert parse_year_month("2025-03") == date(2025, 3, 1)

    def test_format_zero_pads_month(self):
        assert format_date_to_ym(date(2025, 3, 17)) == "2025-03"

    def test_parse_unpadded_month(self):
        assert format_date_to_ym(parse_year_month("2025-3")) == "2025-03"

    def test_malformed_raises(self):
        with pytest.raises(ValueError):
            parse_year_month("2025")
        with pytest.raises(ValueError):
            parse_year_month("2025-13")
        with pytest.raises(ValueError):
            parse_year_month("abcd-ef")

    def test_split(self):
        assert split_ym("2031-12") == (2031, 12)


class TestAddMonth:
    def test_mid_year(self):
        assert add_month(date(2025, 5, 1)) == date(2025, 6, 1)

    def test_december_rolls_year(self):
        assert add_month(date(2025, 12, 1)) == date(2026, 1, 1)

    def test_from_mid_month(self):
        """Day of month is dropped: the result is always the 1st."""
        assert add_month(date(2025, 1, 31)) == date(2025, 2, 1)


class TestDiffMonths:
    def test_same_month(self):
        assert diff_months("2025-04", "2025-04") == 0

    def test_across_years(self):
        assert diff_months("2027-02", "2025-11") == 15

    def test_negative(self):
        assert diff_months("2025-01", "2025-03") == -2


class TestCurrentYm:
    def test_injected_today(self):
        assert current_ym(date(2025, 1, 15)) == "2025-01"

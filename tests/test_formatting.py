"""Tests for display formatting."""

from futureflow.formatting import format_compact, format_currency, format_duration


class TestFormatCurrency:
    def test_grouping(self):
        assert format_currency(1234567) == "￥1,234,567"

    def test_negative(self):
        assert format_currency(-50000) == "-￥50,000"

    def test_rounds_to_yen(self):
        assert format_currency(1000.6) == "￥1,001"

    def test_missing(self):
        assert format_currency(None) == "N/A"
        assert format_currency(float("nan")) == "N/A"


class TestFormatCompact:
    def test_oku(self):
        assert format_compact(123_000_000) == "1.2億"

    def test_man(self):
        assert format_compact(3_500_000) == "350万"

    def test_negative_man(self):
        assert format_compact(-3_500_000) == "-350万"

    def test_small(self):
        assert format_compact(9999) == "￥9,999"


class TestFormatDuration:
    def test_years_and_months(self):
        assert format_duration(29) == "2年 5ヶ月"

    def test_under_a_year(self):
        assert format_duration(7) == "0年 7ヶ月"

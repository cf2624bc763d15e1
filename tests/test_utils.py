"""Tests for currency formatting and date helpers."""

import pytest
from datetime import date
from decimal import Decimal

from cashflow.utils.currency import HIDDEN_AMOUNT, format_currency
from cashflow.utils.dates import add_months, month_days


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_rounds_to_whole_units(self):
        """Test grouping and half-up rounding."""
        assert format_currency(Decimal("1234.5")) == "฿1,235"

    def test_negative_auto_sign(self):
        """Test that the minus goes before the symbol."""
        assert format_currency(Decimal("-1234")) == "-฿1,234"

    def test_always_sign(self):
        """Test explicit plus for positive amounts."""
        assert format_currency(500, sign_display="always") == "+฿500"
        assert format_currency(0, sign_display="always") == "+฿0"

    def test_never_sign(self):
        """Test that no sign is shown."""
        assert format_currency(-500, sign_display="never") == "฿500"

    def test_hidden(self):
        """Test that hidden amounts are masked."""
        assert format_currency(1000, hide_amount=True) == HIDDEN_AMOUNT

    def test_other_and_unknown_currencies(self):
        """Test known symbols and code fallback."""
        assert format_currency(10, currency="USD") == "$10"
        assert format_currency(10, currency="CHF") == "CHF10"

    def test_without_symbol(self):
        """Test plain grouped numbers."""
        assert format_currency(1000000, show_symbol=False) == "1,000,000"


class TestDates:
    """Tests for date helpers."""

    def test_add_months_clamps_day(self):
        """Test month-end clamping including leap years."""
        assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
        assert add_months(date(2028, 1, 31), 1) == date(2028, 2, 29)

    def test_add_months_crosses_years(self):
        """Test positive and negative offsets across year boundaries."""
        assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)
        assert add_months(date(2026, 1, 15), -1) == date(2025, 12, 15)

    def test_month_days(self):
        """Test that every day of the month is listed."""
        days = month_days(2026, 2)
        assert days[0] == date(2026, 2, 1)
        assert len(days) == 28


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""Tests for decimal parsing, formatting and sign reconciliation."""

from decimal import Decimal

import pytest

from cii2ubl.numeric import format_decimal, parse_decimal, reconcile_sign


class TestParseDecimal:
    """Tests for parse_decimal."""

    def test_plain_value(self):
        assert parse_decimal("1428.00") == Decimal("1428.00")

    def test_surrounding_whitespace(self):
        assert parse_decimal("  19 \n") == Decimal("19")

    def test_negative_value(self):
        assert parse_decimal("-50.5") == Decimal("-50.5")

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "1,5", "NaN", "Infinity"])
    def test_invalid_values(self, value):
        assert parse_decimal(value) is None


class TestFormatDecimal:
    """Decimals are written without trailing zeros and without exponent."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("19.00"), "19"),
            (Decimal("1428.00"), "1428"),
            (Decimal("7.6923"), "7.6923"),
            (Decimal("0.50"), "0.5"),
            (Decimal("1E+2"), "100"),
            (Decimal("0.000"), "0"),
            (Decimal("-0.00"), "0"),
            (Decimal("-12.340"), "-12.34"),
        ],
    )
    def test_formatting(self, value, expected):
        assert format_decimal(value) == expected

    def test_int_and_str_input(self):
        assert format_decimal(5) == "5"
        assert format_decimal("2.50") == "2.5"

    def test_no_rounding(self):
        assert format_decimal(Decimal("0.123456789")) == "0.123456789"


class TestReconcileSign:
    """A negative line amount moves into the quantity sign."""

    def test_positive_line_unchanged(self):
        assert reconcile_sign(Decimal("5"), Decimal("10"), Decimal("50"), True) == (
            Decimal("5"),
            Decimal("10"),
        )

    def test_negative_amount_negates_quantity(self):
        quantity, price = reconcile_sign(Decimal("5"), Decimal("10"), Decimal("-50"), True)
        assert quantity == Decimal("-5")
        assert price == Decimal("10")

    def test_negative_price_made_positive(self):
        quantity, price = reconcile_sign(Decimal("5"), Decimal("-10"), Decimal("-50"), True)
        assert quantity == Decimal("-5")
        assert price == Decimal("10")

    def test_already_negative_quantity_kept(self):
        quantity, price = reconcile_sign(Decimal("-5"), Decimal("10"), Decimal("-50"), True)
        assert quantity == Decimal("-5")
        assert price == Decimal("10")

    def test_disabled(self):
        assert reconcile_sign(Decimal("5"), Decimal("-10"), Decimal("-50"), False) == (
            Decimal("5"),
            Decimal("-10"),
        )

    def test_missing_amount(self):
        assert reconcile_sign(Decimal("5"), Decimal("10"), None, True) == (
            Decimal("5"),
            Decimal("10"),
        )

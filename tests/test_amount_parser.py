"""Tests for amount parsing."""

import pytest
from decimal import Decimal
from ledgerline.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", "123.45"),
        ("-123.45", "-123.45"),
        ("$1,234.56", "1234.56"),
        ("-$45.00", "-45.00"),
        ("€12", "12.00"),
        ("(99.10)", "-99.10"),
        ("($1,000.00)", "-1000.00"),
        ("250.00 CR", "250.00"),
        ("250.00 DR", "-250.00"),
        ("-250.00 CR", "250.00"),
        ("7.5", "7.50"),
    ],
)
def test_parse_amount_formats(text, expected):
    """Test the amount notations banks export."""
    assert parse_amount(text) == Decimal(expected)


def test_parse_amount_keeps_cents_exact():
    """Amounts are exact decimals, not floats."""
    total = parse_amount("0.10") + parse_amount("0.20")
    assert total == Decimal("0.30")


def test_parse_amount_rejects_extra_precision():
    """More than two significant decimals is an error, never rounded."""
    with pytest.raises(ValueError, match="more than two decimal places"):
        parse_amount("1.005")


def test_parse_amount_allows_trailing_zero_precision():
    assert parse_amount("1.500") == Decimal("1.50")


@pytest.mark.parametrize("text", ["", "  ", "abc", "12..3", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    """Test that unreadable amounts raise ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)


@pytest.mark.parametrize("text", ["12,50", "-4,5", "1.234,50", "€12,50"])
def test_parse_amount_rejects_decimal_comma(text):
    """A comma before the cents is not read as a thousands separator."""
    with pytest.raises(ValueError, match="decimal comma"):
        parse_amount(text)


def test_parse_amount_thousands_separator_still_accepted():
    assert parse_amount("12,500") == Decimal("12500.00")

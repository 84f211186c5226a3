"""Tests for bank layout detection and CSV parsing."""

import pytest
from datetime import date
from decimal import Decimal

from ledgerline.domain.bank_formats import (
    BANK_LAYOUTS,
    detect_layout,
    resolve_layout,
    supported_banks,
)
from ledgerline.domain.csv_parser import EMPTY_CSV_ERROR, parse_csv, read_csv_rows
from ledgerline.domain.entities import TransactionType
from ledgerline.domain.errors import ValidationError


def test_detect_chase_headers():
    """Test that Chase headers are detected regardless of case."""
    layout = detect_layout(["details", "POSTING DATE", " Description ", "Amount", "Type"])
    assert layout.key == "chase"


def test_detect_prefers_most_specific_layout():
    """A layout with a larger signature beats the generic one."""
    assert detect_layout(["Date", "Description", "Amount", "Reference"]).key == "amex"
    assert detect_layout(["Date", "Description", "Amount"]).key == "generic"


def test_detect_tie_is_ambiguous():
    """Two equally specific matches count as no match."""
    headers = ["Date", "Description", "Amount", "Running Bal.", "Reference"]
    assert detect_layout(headers) is None


def test_detect_unknown_headers():
    assert detect_layout(["When", "What", "Value"]) is None


def test_supported_banks_lists_every_layout():
    banks = supported_banks()
    assert len(banks) == len(BANK_LAYOUTS)
    assert ("chase", "Chase Bank") in banks


def test_resolve_unknown_bank_format():
    """Test that an unknown hint raises ValidationError."""
    with pytest.raises(ValidationError, match="Unknown bank format"):
        resolve_layout(["Date"], "nonexistent")


def test_resolve_custom_without_mapping():
    with pytest.raises(ValidationError, match="requires a column mapping"):
        resolve_layout(["Date"], "custom")


def test_resolve_mapping_with_fixed_bank():
    with pytest.raises(ValidationError, match="cannot be combined"):
        resolve_layout(["When", "What", "Value"], "chase", {"date": "When"})


def test_resolve_mapping_missing_fields():
    with pytest.raises(ValidationError, match="missing required field"):
        resolve_layout(["When", "What", "Value"], "auto", {"date": "When"})


def test_resolve_mapping_unknown_column():
    with pytest.raises(ValidationError, match="not in CSV headers"):
        resolve_layout(
            ["When", "What", "Value"],
            "custom",
            {"date": "When", "description": "What", "amount": "Total"},
        )


def test_resolve_mapping_unknown_field():
    with pytest.raises(ValidationError, match="Unknown mapping field"):
        resolve_layout(["When"], "custom", {"when": "When"})


def test_read_csv_rows_strips_bom_and_blank_rows():
    """BOM, surrounding whitespace and blank rows are removed."""
    headers, rows = read_csv_rows("\ufeffDate , Amount\n2024-01-01, 5.00 \n,\n\n")
    assert headers == ["Date", "Amount"]
    assert rows == [{"Date": "2024-01-01", "Amount": "5.00"}]


def test_read_csv_rows_semicolon_delimiter():
    headers, rows = read_csv_rows("Date;Description;Amount\n2024-01-01;Coffee;-3.50\n")
    assert headers == ["Date", "Description", "Amount"]
    assert rows[0]["Amount"] == "-3.50"


def test_parse_chase_csv(fixtures_dir):
    """Test parsing a Chase export end to end."""
    result = parse_csv((fixtures_dir / "chase.csv").read_text(encoding="utf-8"))

    assert result.success
    assert result.detected_bank == "chase"
    assert result.detected_bank_name == "Chase Bank"
    assert not result.requires_mapping
    assert result.total_rows == 7
    assert result.parsed_count == 6
    assert len(result.transactions) == 6

    first = result.transactions[0]
    assert first.date == date(2024, 1, 15)
    assert first.amount == Decimal("-45.00")
    assert first.description == "SHELL OIL 12345 HOUSTON TX"
    assert first.type == TransactionType.EXPENSE
    assert first.row_index == 2

    payroll = result.transactions[1]
    assert payroll.amount == Decimal("2500.00")
    assert payroll.type == TransactionType.INCOME


def test_parse_chase_row_details(fixtures_dir):
    """Check numbers, deposit slips and transfers follow the type column."""
    result = parse_csv((fixtures_dir / "chase.csv").read_text(encoding="utf-8"))
    by_description = {t.description: t for t in result.transactions}

    assert by_description["CHECK 1042"].check_number == "1042"
    assert by_description["DEPOSIT ID NUMBER 99"].check_number is None
    assert by_description["ONLINE TRANSFER TO SAV"].type == TransactionType.TRANSFER


def test_parse_chase_reports_bad_row(fixtures_dir):
    """Rows without a date are reported with their line number."""
    result = parse_csv((fixtures_dir / "chase.csv").read_text(encoding="utf-8"))

    assert len(result.errors) == 1
    assert result.errors[0].row_index == 8
    assert result.errors[0].reason == "Missing date"
    assert str(result.errors[0]) == "Row 8: Missing date"


def test_parse_split_debit_credit(fixtures_dir):
    """Debit and credit columns resolve to signed amounts."""
    result = parse_csv((fixtures_dir / "capital_one.csv").read_text(encoding="utf-8"))

    assert result.detected_bank == "capital_one"
    assert [t.amount for t in result.transactions] == [Decimal("-5.75"), Decimal("200.00")]
    assert result.transactions[0].date == date(2024, 2, 1)
    assert result.errors[0].reason == "Missing amount"
    assert result.errors[0].row_index == 4


def test_parse_unknown_headers_requires_mapping(fixtures_dir):
    """Unrecognized headers return raw rows marked for mapping."""
    result = parse_csv((fixtures_dir / "unknown_headers.csv").read_text(encoding="utf-8"))

    assert result.success
    assert result.requires_mapping
    assert result.detected_bank is None
    assert result.headers == ["When", "What", "Value"]
    assert result.parsed_count == 0
    assert result.total_rows == 2
    assert all(t.needs_mapping for t in result.transactions)
    assert result.transactions[0].raw == {"When": "2024-03-01", "What": "Coffee shop", "Value": "-4.50"}
    assert result.valid_transactions == []
    assert len(result.sample_rows) == 2


def test_parse_with_custom_mapping(fixtures_dir):
    """An explicit mapping resolves previously unknown columns."""
    text = (fixtures_dir / "unknown_headers.csv").read_text(encoding="utf-8")
    result = parse_csv(
        text,
        mapping={"date": "When", "description": "What", "amount": "Value"},
        date_format="%Y-%m-%d",
    )

    assert not result.requires_mapping
    assert result.detected_bank == "custom"
    assert [t.amount for t in result.transactions] == [Decimal("-4.50"), Decimal("1000.00")]
    assert result.transactions[1].type == TransactionType.INCOME


def test_parse_forced_layout():
    """A known bank key skips detection."""
    text = "Date,Description,Amount\n01/02/2024,Coffee,-3.00\n"
    result = parse_csv(text, bank_format="amex")
    assert result.detected_bank == "amex"
    assert result.transactions[0].amount == Decimal("-3.00")


def test_parse_rejects_excess_precision():
    text = "Date,Description,Amount\n01/02/2024,Coffee,-3.005\n"
    result = parse_csv(text)
    assert result.transactions == []
    assert "more than two decimal places" in result.errors[0].reason


def test_parse_invalid_date():
    text = "Date,Description,Amount\nsometime,Coffee,-3.00\n"
    result = parse_csv(text)
    assert result.errors[0].reason == "Invalid date: sometime"


@pytest.mark.parametrize("text", ["", "Date,Description,Amount\n", "\n\n"])
def test_parse_empty_csv(text):
    """Test that files without data rows fail softly."""
    result = parse_csv(text)
    assert not result.success
    assert result.error == EMPTY_CSV_ERROR
    assert result.transactions == []

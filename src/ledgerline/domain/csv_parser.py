"""Bank CSV parsing and row normalization."""

import csv
import io
import logging
from decimal import Decimal
from typing import Optional

from ledgerline.domain.bank_formats import AUTO, AmountStyle, BankLayout, resolve_layout
from ledgerline.domain.entities import (
    ParseResult,
    RowError,
    TransactionCandidate,
    TransactionType,
)
from ledgerline.utils.amount_parser import parse_amount
from ledgerline.utils.date_parser import parse_date
from ledgerline.utils.text import collapse_whitespace

logger = logging.getLogger(__name__)

EMPTY_CSV_ERROR = "CSV file is empty or has no data rows"
SAMPLE_ROW_COUNT = 5


def read_csv_rows(text: str) -> tuple[list[str], list[dict[str, str]]]:
    """Read headers and non-blank rows from CSV text.

    Values are whitespace-trimmed. Short rows are padded with empty strings;
    surplus cells are dropped.
    """
    text = text.lstrip("\ufeff")
    sample = text[:1024]
    try:
        delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
    except csv.Error:
        delimiter = ","

    reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
    if reader.fieldnames is None:
        return [], []

    headers = [h.strip() for h in reader.fieldnames]
    rows = []
    for record in reader:
        row = {}
        for original, header in zip(reader.fieldnames, headers):
            value = record.get(original)
            row[header] = value.strip() if isinstance(value, str) else ""
        if any(row.values()):
            rows.append(row)
    return headers, rows


def _find_value(row: dict[str, str], columns: tuple[str, ...]) -> Optional[str]:
    """Return the first non-empty value among candidate columns."""
    lowered = {k.casefold(): v for k, v in row.items()}
    for column in columns:
        value = lowered.get(column.casefold())
        if value:
            return value
    return None


def _resolve_amount(row: dict[str, str], layout: BankLayout) -> Decimal:
    if layout.amount_style == AmountStyle.SPLIT:
        debit_value = _find_value(row, layout.columns.get("debit", ()))
        credit_value = _find_value(row, layout.columns.get("credit", ()))
        if debit_value is None and credit_value is None:
            raise ValueError("Missing amount")
        debit = parse_amount(debit_value) if debit_value else Decimal("0.00")
        if debit != 0:
            return -abs(debit)
        credit = parse_amount(credit_value) if credit_value else Decimal("0.00")
        return abs(credit)

    amount_value = _find_value(row, layout.columns.get("amount", ()))
    if amount_value is None:
        raise ValueError("Missing amount")
    return parse_amount(amount_value)


def normalize_row(row: dict[str, str], layout: BankLayout, row_index: int) -> TransactionCandidate:
    """Turn one CSV row into a candidate using ``layout``.

    Raises:
        ValueError: If the date or amount is missing or unparseable
    """
    date_value = _find_value(row, layout.columns.get("date", ()))
    if date_value is None:
        raise ValueError("Missing date")
    try:
        txn_date = parse_date(date_value, layout.date_formats)
    except ValueError:
        raise ValueError(f"Invalid date: {date_value}")

    amount = _resolve_amount(row, layout)

    bank_type = (_find_value(row, layout.columns.get("type", ())) or "").upper()
    check_number = _find_value(row, layout.columns.get("check_number", ()))
    if "DEPOSIT" in bank_type or "DSLIP" in bank_type:
        # slip numbers on deposits are not check numbers
        check_number = None

    if "TRANSFER" in bank_type or "XFER" in bank_type:
        txn_type = TransactionType.TRANSFER
    elif amount >= 0:
        txn_type = TransactionType.INCOME
    else:
        txn_type = TransactionType.EXPENSE

    payee = collapse_whitespace(_find_value(row, layout.columns.get("payee", ())))

    return TransactionCandidate(
        date=txn_date,
        amount=amount,
        description=collapse_whitespace(_find_value(row, layout.columns.get("description", ()))),
        payee=payee or None,
        type=txn_type,
        row_index=row_index,
        reference_number=_find_value(row, layout.columns.get("reference_number", ())),
        check_number=check_number,
    )


def parse_csv(
    text: str,
    bank_format: str = AUTO,
    mapping: Optional[dict[str, str]] = None,
    date_format: Optional[str] = None,
) -> ParseResult:
    """Parse bank CSV text into transaction candidates.

    Args:
        text: Raw CSV text
        bank_format: "auto", "custom", or a known layout key
        mapping: Explicit field -> column mapping (implies "custom")
        date_format: strptime format for a custom mapping

    Returns:
        ParseResult. When no layout applies every row comes back with
        ``needs_mapping`` set and ``requires_mapping`` is True.
        Unparseable rows are listed in ``errors`` by 1-based line number.

    Raises:
        ValidationError: If the format hint or mapping is invalid
    """
    headers, rows = read_csv_rows(text)
    if not headers or not rows:
        return ParseResult(success=False, headers=headers, error=EMPTY_CSV_ERROR)

    layout = resolve_layout(headers, bank_format, mapping, date_format)

    transactions = []
    errors = []
    # Line 1 is the header row
    for row_index, row in enumerate(rows, start=2):
        if layout is None:
            transactions.append(
                TransactionCandidate(
                    date=None,
                    amount=None,
                    description="",
                    needs_mapping=True,
                    row_index=row_index,
                    raw=row,
                )
            )
            continue
        try:
            transactions.append(normalize_row(row, layout, row_index))
        except ValueError as e:
            errors.append(RowError(row_index=row_index, reason=str(e)))

    if errors:
        logger.info("Skipped %d of %d CSV rows", len(errors), len(rows))

    return ParseResult(
        success=True,
        transactions=transactions,
        detected_bank=layout.key if layout else None,
        detected_bank_name=layout.name if layout else "Unknown",
        headers=headers,
        total_rows=len(rows),
        parsed_count=0 if layout is None else len(transactions),
        requires_mapping=layout is None,
        errors=errors,
        sample_rows=rows[:SAMPLE_ROW_COUNT],
    )

"""Bank statement text extraction.

Statement text (typically pulled out of a PDF) is split into sections by
their headings. Lines inside a section are read as ``date description
amount`` (checks read ``number [issued] paid amount``). The section decides
the transaction type and the sign of the printed amount.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerline.domain.entities import (
    AccountInfo,
    ParseResult,
    RowError,
    SectionCode,
    StatementSummary,
    TransactionCandidate,
    TransactionType,
)
from ledgerline.utils.amount_parser import parse_amount
from ledgerline.utils.date_parser import month_day_with_year, parse_date
from ledgerline.utils.text import collapse_whitespace

logger = logging.getLogger(__name__)

MAX_CONTINUATION_LINES = 2

_CONTINUED = r"(?:\s*\(continued\))?"

SECTION_HEADINGS: tuple[tuple[re.Pattern, SectionCode], ...] = tuple(
    (re.compile(rf"^{heading}{_CONTINUED}$", re.IGNORECASE), code)
    for heading, code in (
        (r"deposits\s+and\s+additions", SectionCode.DEPOSITS),
        (r"deposits", SectionCode.DEPOSITS),
        (r"checks\s+paid", SectionCode.CHECKS),
        (r"atm\s*&\s*debit\s+card\s+withdrawals", SectionCode.CARD),
        (r"card\s+purchases", SectionCode.CARD),
        (r"electronic\s+withdrawals", SectionCode.ELECTRONIC),
        (r"fees", SectionCode.FEES),
        (r"service\s+charges", SectionCode.FEES),
        (r"other\s+withdrawals", SectionCode.OTHER),
        (r"other", SectionCode.OTHER),
    )
)

# Sections whose printed amounts are money in; the rest print outflows
# as positive magnitudes. OTHER takes its sign from the printed value.
SECTION_TYPES = {
    SectionCode.DEPOSITS: TransactionType.INCOME,
    SectionCode.CHECKS: TransactionType.EXPENSE,
    SectionCode.CARD: TransactionType.EXPENSE,
    SectionCode.ELECTRONIC: TransactionType.EXPENSE,
    SectionCode.FEES: TransactionType.EXPENSE,
}

_DATE = r"\d{1,2}/\d{1,2}(?:/\d{2,4})?"
_AMOUNT = r"\(?-?\$?-?(?:\d{1,3}(?:,\d{3})+|\d+)\.\d{2}\)?"

LINE_RE = re.compile(rf"^(?P<date>{_DATE})\s+(?P<description>.+?)\s+(?P<amount>{_AMOUNT})$")
DATE_LED_RE = re.compile(rf"^(?P<date>{_DATE})\s+(?P<description>.+)$")
CHECK_RE = re.compile(
    rf"^(?P<number>\d+)\s*(?:[*^]\s*)*(?:(?P<issued>{_DATE})\s+)?(?P<date>{_DATE})\s+(?P<amount>{_AMOUNT})$"
)
TRAILING_AMOUNT_RE = re.compile(rf"^(?P<text>.*?)\s*(?P<amount>{_AMOUNT})$")
TOTAL_RE = re.compile(rf"^total\b.*?(?P<amount>{_AMOUNT})?$", re.IGNORECASE)

ACCOUNT_NUMBER_RE = re.compile(r"Account\s+Number:?\s*([\d\- ]*\d)", re.IGNORECASE)
PERIOD_RE = re.compile(r"([A-Z][a-z]+ \d{1,2}, \d{4})\s+(?:through|to|-)\s+([A-Z][a-z]+ \d{1,2}, \d{4})")
OPENING_RE = re.compile(r"Beginning\s+Balance\s*\$?(-?[\d,]+\.\d{2})", re.IGNORECASE)
CLOSING_RE = re.compile(r"Ending\s+Balance\s*\$?(-?[\d,]+\.\d{2})", re.IGNORECASE)

_CARD_PREFIX_RE = re.compile(r"^(?:recurring\s+)?card\s+purchase(?:\s+return)?(?:\s+with\s+pin)?\s+", re.IGNORECASE)
_LEADING_DATE_RE = re.compile(rf"^{_DATE}\s+")
_CARD_SUFFIX_RE = re.compile(r"\s+card\s+\d{4}$", re.IGNORECASE)
_ORIG_CO_RE = re.compile(r"Orig\s+CO\s+Name:\s*(.+?)(?:\s+Orig\s+ID:|\s+Desc\s+Date:|\s+CO\s+Entry|$)", re.IGNORECASE)

STATEMENT_BANKS = (
    ("chase", "Chase Bank", re.compile(r"\bchase\b", re.IGNORECASE)),
    ("bank_of_america", "Bank of America", re.compile(r"bank\s+of\s+america", re.IGNORECASE)),
    ("wells_fargo", "Wells Fargo", re.compile(r"wells\s+fargo", re.IGNORECASE)),
)


@dataclass
class _PendingLine:
    line_number: int
    date_text: str
    description: str
    continuations: int = 0


@dataclass
class _Extraction:
    transactions: list[TransactionCandidate] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    reported_totals: dict[str, Decimal] = field(default_factory=dict)


def match_section_heading(line: str) -> Optional[SectionCode]:
    """Return the section a heading line opens, if it is one."""
    for pattern, code in SECTION_HEADINGS:
        if pattern.match(line):
            return code
    return None


def extract_payee(description: str) -> Optional[str]:
    """Pull the counterparty name out of a statement description."""
    orig = _ORIG_CO_RE.search(description)
    if orig:
        return collapse_whitespace(orig.group(1)) or None

    text = _CARD_PREFIX_RE.sub("", description)
    if text == description:
        return None
    text = _LEADING_DATE_RE.sub("", text)
    text = _CARD_SUFFIX_RE.sub("", text)
    return collapse_whitespace(text) or None


def extract_account_info(text: str) -> AccountInfo:
    """Read account number, statement period and balances from the header."""
    account_number = None
    match = ACCOUNT_NUMBER_RE.search(text)
    if match:
        account_number = re.sub(r"[\s\-]", "", match.group(1))

    period_start = period_end = None
    match = PERIOD_RE.search(text)
    if match:
        try:
            period_start = parse_date(match.group(1))
            period_end = parse_date(match.group(2))
        except ValueError:
            logger.debug("Unreadable statement period %r", match.group(0))

    def _balance(pattern: re.Pattern) -> Optional[Decimal]:
        found = pattern.search(text)
        return parse_amount(found.group(1)) if found else None

    return AccountInfo(
        account_number=account_number,
        period_start=period_start,
        period_end=period_end,
        opening_balance=_balance(OPENING_RE),
        closing_balance=_balance(CLOSING_RE),
    )


def detect_statement_bank(text: str) -> tuple[str, str]:
    """Return (key, name) of the issuing bank, or a generic statement label."""
    for key, name, pattern in STATEMENT_BANKS:
        if pattern.search(text):
            return key, name
    return "statement", "Bank Statement"


def _resolve_date(date_text: str, info: AccountInfo, year: Optional[int]) -> date:
    parts = date_text.split("/")
    if len(parts) == 3:
        return parse_date(date_text, ("%m/%d/%Y", "%m/%d/%y"))
    return month_day_with_year(
        int(parts[0]),
        int(parts[1]),
        period_start=info.period_start,
        period_end=info.period_end,
        year=year,
    )


def _build_candidate(
    line_number: int,
    date_text: str,
    description: str,
    amount_text: str,
    section: SectionCode,
    info: AccountInfo,
    year: Optional[int],
    check_number: Optional[str] = None,
) -> TransactionCandidate:
    """Apply the section's sign convention to one parsed line.

    Raises:
        ValueError: If the date or amount is unreadable
    """
    txn_date = _resolve_date(date_text, info, year)
    printed = parse_amount(amount_text)
    description = collapse_whitespace(description)

    section_type = SECTION_TYPES.get(section)
    needs_review = False
    if section_type is None:
        amount = printed
        txn_type = TransactionType.INCOME if printed >= 0 else TransactionType.EXPENSE
    else:
        magnitude = abs(printed)
        amount = magnitude if section_type == TransactionType.INCOME else -magnitude
        txn_type = section_type
        # A negative printed value only contradicts an inflow section
        needs_review = section_type == TransactionType.INCOME and printed < 0

    return TransactionCandidate(
        date=txn_date,
        amount=amount,
        description=description,
        payee=extract_payee(description),
        type=txn_type,
        section_code=section,
        needs_review=needs_review,
        row_index=line_number,
        check_number=check_number,
    )


def _extract(lines: list[str], info: AccountInfo, year: Optional[int]) -> _Extraction:
    result = _Extraction()
    section: Optional[SectionCode] = None
    pending: Optional[_PendingLine] = None

    def drop(line_number: int, reason: str) -> None:
        logger.debug("Dropped statement line %d: %s", line_number, reason)
        result.errors.append(RowError(row_index=line_number, reason=reason))

    def add(line_number, date_text, description, amount_text, check_number=None) -> None:
        try:
            result.transactions.append(
                _build_candidate(
                    line_number, date_text, description, amount_text, section, info, year, check_number
                )
            )
        except ValueError as e:
            drop(line_number, str(e))

    for line_number, raw_line in enumerate(lines, start=1):
        line = collapse_whitespace(raw_line)
        if not line:
            continue

        heading = match_section_heading(line)
        if heading is not None:
            if pending is not None:
                drop(pending.line_number, "Missing amount")
                pending = None
            section = heading
            continue

        if section is None:
            continue

        total = TOTAL_RE.match(line)
        if total:
            if pending is not None:
                drop(pending.line_number, "Missing amount")
                pending = None
            if total.group("amount"):
                result.reported_totals[section.value] = abs(parse_amount(total.group("amount")))
            section = None
            continue

        if section == SectionCode.CHECKS:
            check = CHECK_RE.match(line)
            if check:
                add(
                    line_number,
                    check.group("date"),
                    f"CHECK #{check.group('number')}",
                    check.group("amount"),
                    check_number=check.group("number"),
                )
                continue

        full = LINE_RE.match(line)
        if full:
            if pending is not None:
                drop(pending.line_number, "Missing amount")
                pending = None
            add(line_number, full.group("date"), full.group("description"), full.group("amount"))
            continue

        date_led = DATE_LED_RE.match(line)
        if date_led:
            if pending is not None:
                drop(pending.line_number, "Missing amount")
            pending = _PendingLine(line_number, date_led.group("date"), date_led.group("description"))
            continue

        if pending is not None:
            tail = TRAILING_AMOUNT_RE.match(line)
            if tail:
                description = f"{pending.description} {tail.group('text')}"
                add(pending.line_number, pending.date_text, description, tail.group("amount"))
                pending = None
                continue
            pending.description = f"{pending.description} {line}"
            pending.continuations += 1
            if pending.continuations >= MAX_CONTINUATION_LINES:
                drop(pending.line_number, "Missing amount")
                pending = None

    if pending is not None:
        drop(pending.line_number, "Missing amount")

    return result


def summarize(
    transactions: list[TransactionCandidate],
    info: AccountInfo,
    reported_totals: dict[str, Decimal],
    dropped_lines: int,
) -> StatementSummary:
    """Compute counts and totals for reconciling a statement."""
    section_counts: dict[str, int] = {}
    section_totals: dict[str, Decimal] = {}
    income = Decimal("0.00")
    expenses = Decimal("0.00")

    for txn in transactions:
        key = txn.section_code.value if txn.section_code else SectionCode.OTHER.value
        section_counts[key] = section_counts.get(key, 0) + 1
        section_totals[key] = section_totals.get(key, Decimal("0.00")) + txn.amount
        if txn.amount >= 0:
            income += txn.amount
        else:
            expenses += -txn.amount

    net = income - expenses
    reconciles = None
    if info.opening_balance is not None and info.closing_balance is not None:
        reconciles = info.opening_balance + net == info.closing_balance

    return StatementSummary(
        total_transactions=len(transactions),
        section_counts=section_counts,
        section_totals=section_totals,
        reported_totals=dict(reported_totals),
        total_income=income,
        total_expenses=expenses,
        net=net,
        needs_review_count=sum(1 for t in transactions if t.needs_review),
        dropped_lines=dropped_lines,
        reconciles=reconciles,
    )


def parse_statement(text: str, year: Optional[int] = None) -> ParseResult:
    """Extract transaction candidates from statement text.

    Args:
        text: Plain text of one statement
        year: Year for MM/DD dates when the statement period is not printed

    Returns:
        ParseResult with ``account_info`` and ``summary`` filled in. Lines
        that start like a transaction but lack a readable date or amount are
        dropped and listed in ``errors`` by line number.
    """
    if not text or not text.strip():
        return ParseResult(success=False, error="Statement text is empty")

    info = extract_account_info(text)
    bank_key, bank_name = detect_statement_bank(text)
    extraction = _extract(text.splitlines(), info, year)
    transactions = extraction.transactions

    if extraction.errors:
        logger.info("Dropped %d unreadable statement lines", len(extraction.errors))

    return ParseResult(
        success=bool(transactions),
        transactions=transactions,
        detected_bank=bank_key,
        detected_bank_name=bank_name,
        total_rows=len(transactions) + len(extraction.errors),
        parsed_count=len(transactions),
        requires_mapping=False,
        errors=extraction.errors,
        error=None if transactions else "No transactions found in statement text",
        account_info=info,
        summary=summarize(transactions, info, extraction.reported_totals, len(extraction.errors)),
    )

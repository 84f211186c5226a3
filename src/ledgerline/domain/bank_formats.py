"""Known bank CSV layouts and column mapping resolution.

Each layout is plain data: the header signature used for detection, the
candidate source columns for every canonical field, the date formats the
bank exports, and how the amount sign is expressed. Supporting a new bank
means adding an entry to ``BANK_LAYOUTS``.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ledgerline.domain.errors import ValidationError

logger = logging.getLogger(__name__)

AUTO = "auto"
CUSTOM = "custom"

MAPPABLE_FIELDS = (
    "date",
    "description",
    "amount",
    "debit",
    "credit",
    "payee",
    "reference_number",
    "check_number",
    "type",
)


class AmountStyle(str, Enum):
    """How a layout expresses the amount sign."""

    SIGNED = "signed"  # one column, negative = money out
    SPLIT = "split"  # separate debit and credit columns


@dataclass(frozen=True)
class BankLayout:
    """Declarative description of one bank's CSV export."""

    key: str
    name: str
    signature: frozenset[str]
    columns: dict[str, tuple[str, ...]]
    date_formats: tuple[str, ...] = ("%m/%d/%Y",)
    amount_style: AmountStyle = AmountStyle.SIGNED

    def matches(self, headers: list[str]) -> bool:
        """Return True if every signature column is present (case-insensitive)."""
        present = {h.strip().casefold() for h in headers}
        return {s.casefold() for s in self.signature} <= present


def _layout(key, name, signature, columns, date_formats, amount_style=AmountStyle.SIGNED):
    return BankLayout(
        key=key,
        name=name,
        signature=frozenset(signature),
        columns={f: tuple(cols) for f, cols in columns.items()},
        date_formats=tuple(date_formats),
        amount_style=amount_style,
    )


BANK_LAYOUTS: tuple[BankLayout, ...] = (
    _layout(
        "chase",
        "Chase Bank",
        ["Posting Date", "Description"],
        {
            "date": ["Posting Date", "Transaction Date"],
            "description": ["Description"],
            "amount": ["Amount"],
            "check_number": ["Check or Slip #"],
            "type": ["Type"],
        },
        ["%m/%d/%Y"],
    ),
    _layout(
        "bank_of_america",
        "Bank of America",
        ["Date", "Description", "Amount", "Running Bal."],
        {
            "date": ["Date", "Posted Date"],
            "description": ["Description", "Payee"],
            "amount": ["Amount"],
            "reference_number": ["Reference Number"],
        },
        ["%m/%d/%Y"],
    ),
    _layout(
        "capital_one",
        "Capital One",
        ["Transaction Date", "Debit", "Credit"],
        {
            "date": ["Transaction Date", "Posted Date"],
            "description": ["Description", "Transaction Description"],
            "debit": ["Debit"],
            "credit": ["Credit"],
        },
        ["%Y-%m-%d", "%m/%d/%Y"],
        AmountStyle.SPLIT,
    ),
    _layout(
        "discover",
        "Discover",
        ["Trans. Date", "Amount"],
        {
            "date": ["Trans. Date", "Post Date"],
            "description": ["Description"],
            "amount": ["Amount"],
        },
        ["%m/%d/%Y"],
    ),
    _layout(
        "us_bank",
        "US Bank",
        ["Date", "Name", "Amount"],
        {
            "date": ["Date"],
            "description": ["Name", "Memo"],
            "amount": ["Amount"],
            "payee": ["Name"],
        },
        ["%m/%d/%Y", "%Y-%m-%d"],
    ),
    _layout(
        "citi",
        "Citibank",
        ["Date", "Description", "Debit", "Credit"],
        {
            "date": ["Date"],
            "description": ["Description"],
            "debit": ["Debit"],
            "credit": ["Credit"],
        },
        ["%m/%d/%Y"],
        AmountStyle.SPLIT,
    ),
    _layout(
        "pnc",
        "PNC Bank",
        ["Date", "Description", "Withdrawals", "Deposits"],
        {
            "date": ["Date"],
            "description": ["Description"],
            "debit": ["Withdrawals"],
            "credit": ["Deposits"],
        },
        ["%m/%d/%Y"],
        AmountStyle.SPLIT,
    ),
    _layout(
        "amex",
        "American Express",
        ["Date", "Description", "Amount", "Reference"],
        {
            "date": ["Date"],
            "description": ["Description"],
            "amount": ["Amount"],
            "reference_number": ["Reference"],
        },
        ["%m/%d/%Y", "%m/%d/%y"],
    ),
    _layout(
        "generic",
        "Generic (Date/Description/Amount)",
        ["Date", "Description", "Amount"],
        {
            "date": ["Date"],
            "description": ["Description"],
            "amount": ["Amount"],
            "payee": ["Payee"],
            "reference_number": ["Reference", "Reference Number"],
            "check_number": ["Check Number", "Check #"],
        },
        ["%m/%d/%Y", "%Y-%m-%d"],
    ),
)

LAYOUTS_BY_KEY = {layout.key: layout for layout in BANK_LAYOUTS}


def supported_banks() -> list[tuple[str, str]]:
    """Return (key, name) for every known layout."""
    return [(layout.key, layout.name) for layout in BANK_LAYOUTS]


def detect_layout(headers: list[str]) -> Optional[BankLayout]:
    """Find the known layout matching a header row.

    Among matching layouts the one with the largest signature wins. Two
    equally specific matches are ambiguous and yield None, same as no match.
    """
    matching = [layout for layout in BANK_LAYOUTS if layout.matches(headers)]
    if not matching:
        return None

    best = max(len(layout.signature) for layout in matching)
    top = [layout for layout in matching if len(layout.signature) == best]
    if len(top) > 1:
        logger.info(
            "Ambiguous CSV headers %s match layouts %s",
            headers,
            ", ".join(layout.key for layout in top),
        )
        return None
    return top[0]


def custom_layout(
    mapping: dict[str, str],
    headers: list[str],
    date_format: Optional[str] = None,
) -> BankLayout:
    """Build a layout from an explicit field -> column mapping.

    Raises:
        ValidationError: If the mapping names unknown fields, lacks required
            fields, or references columns missing from the headers
    """
    mapping = {k: v.strip() for k, v in mapping.items() if v and v.strip()}

    unknown = sorted(set(mapping) - set(MAPPABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown mapping field(s): {', '.join(unknown)}")

    missing = [f for f in ("date", "description") if f not in mapping]
    if "amount" not in mapping and "debit" not in mapping and "credit" not in mapping:
        missing.append("amount (or debit/credit)")
    if missing:
        raise ValidationError(f"Mapping is missing required field(s): {', '.join(missing)}")

    present = {h.strip().casefold() for h in headers}
    absent = [column for column in mapping.values() if column.casefold() not in present]
    if absent:
        raise ValidationError(f"Mapped column(s) not in CSV headers: {', '.join(absent)}")

    split = "amount" not in mapping
    date_formats = (date_format,) if date_format else ("%m/%d/%Y", "%Y-%m-%d")
    return _layout(
        CUSTOM,
        "Custom",
        mapping.values(),
        {f: [column] for f, column in mapping.items()},
        date_formats,
        AmountStyle.SPLIT if split else AmountStyle.SIGNED,
    )


def resolve_layout(
    headers: list[str],
    bank_format: str = AUTO,
    mapping: Optional[dict[str, str]] = None,
    date_format: Optional[str] = None,
) -> Optional[BankLayout]:
    """Pick the layout for a CSV file.

    Args:
        headers: CSV header row
        bank_format: "auto" to detect, "custom" to use ``mapping``, or a
            known layout key to force that layout
        mapping: Explicit field -> column mapping
        date_format: strptime format for a custom mapping

    Returns:
        The layout, or None when detection found no unique match

    Raises:
        ValidationError: For an unknown hint, "custom" without a mapping,
            a mapping combined with a fixed layout, or an invalid mapping
    """
    bank_format = (bank_format or AUTO).strip().lower()

    if mapping:
        if bank_format not in (AUTO, CUSTOM):
            raise ValidationError(
                f"A column mapping cannot be combined with bank format '{bank_format}'"
            )
        return custom_layout(mapping, headers, date_format)

    if bank_format == AUTO:
        return detect_layout(headers)
    if bank_format == CUSTOM:
        raise ValidationError("Bank format 'custom' requires a column mapping")

    layout = LAYOUTS_BY_KEY.get(bank_format)
    if layout is None:
        known = ", ".join(LAYOUTS_BY_KEY)
        raise ValidationError(f"Unknown bank format '{bank_format}'. Known formats: {known}")
    return layout

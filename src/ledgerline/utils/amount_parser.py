"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CENTS = Decimal("0.01")

_CURRENCY_RE = re.compile(r"[$€£¥]")
_SUFFIX_RE = re.compile(r"\s*(CR|DR)$", re.IGNORECASE)
_DECIMAL_COMMA_RE = re.compile(r",\d{1,2}$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a two-decimal Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "123.45 CR" / "123.45 DR" (credit positive, debit negative)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount quantized to cents

    Raises:
        ValueError: If the string cannot be parsed, uses a decimal comma
            ("12,50"), or carries more than two significant fractional digits
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    text = str(amount_str).strip()

    indicator = None
    suffix = _SUFFIX_RE.search(text)
    if suffix:
        indicator = suffix.group(1).upper()
        text = text[: suffix.start()].strip()

    if text.startswith("(") and text.endswith(")"):
        indicator = "DR"
        text = text[1:-1].strip()

    text = _CURRENCY_RE.sub("", text)
    if _DECIMAL_COMMA_RE.search(text):
        raise ValueError(f"Amount '{amount_str}' uses a decimal comma")
    text = text.replace(",", "").replace(" ", "")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    quantized = amount.quantize(CENTS)
    if quantized != amount:
        raise ValueError(f"Amount '{amount_str}' has more than two decimal places")

    if indicator == "DR":
        return -abs(quantized)
    if indicator == "CR":
        return abs(quantized)
    return quantized


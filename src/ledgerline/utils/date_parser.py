"""Date parsing utilities."""

from datetime import date, datetime
from typing import Iterable, Optional

from dateutil import parser as date_parser

COMMON_DATE_FORMATS = (
    "%m/%d/%Y",
    "%Y-%m-%d",
    "%m-%d-%Y",
    "%m/%d/%y",
    "%d/%m/%Y",
)


def parse_date(date_str: str, formats: Optional[Iterable[str]] = None) -> date:
    """Parse a date string into a date object.

    Explicit formats are tried first, then the common bank export formats,
    then a lenient ``dateutil`` parse ("January 15, 2024", "15 Jan 2024", ...).

    Args:
        date_str: Date string
        formats: strptime formats to try before the common ones

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_str is None or not str(date_str).strip():
        raise ValueError("Empty date string")

    text = str(date_str).strip()

    for fmt in (*(formats or ()), *COMMON_DATE_FORMATS):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{text}': {e}")


def month_day_with_year(
    month: int,
    day: int,
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    year: Optional[int] = None,
) -> date:
    """Build a full date for a statement line printed as MM/DD.

    The year comes from the statement period when known. For a period that
    spans a year boundary (Dec 15 - Jan 14), months after the end month
    belong to the start year.

    Raises:
        ValueError: If the month/day pair is not a valid calendar date
    """
    if period_end is not None:
        resolved = period_end.year
        if period_start is not None and period_start.year != period_end.year and month > period_end.month:
            resolved = period_start.year
    elif period_start is not None:
        resolved = period_start.year
    elif year is not None:
        resolved = year
    else:
        resolved = date.today().year

    return date(resolved, month, day)

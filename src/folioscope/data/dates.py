"""Date parsing helpers for portfolio CSV files.

Two textual shapes are accepted:
  - DD/MM/YYYY (as exported by the brokerage spreadsheet)
  - YYYY-MM-DD (ISO, passed through unchanged once validated)

Dates are naive calendar dates; no timezone conversion is performed.
"""

from datetime import date
from typing import Iterable

MIN_YEAR = 1900
MAX_YEAR = 2100


class InvalidDateFormat(ValueError):
    """Raised when a date token is not a valid DD/MM/YYYY or YYYY-MM-DD date."""

    pass


def _parse_day_month_year(text: str) -> date:
    parts = text.split("/")
    if len(parts) != 3 or not all(p.strip().isdigit() for p in parts):
        raise InvalidDateFormat(f"Invalid date format '{text}' (expected DD/MM/YYYY)")

    day, month, year = (int(p) for p in parts)

    if not (1 <= day <= 31 and 1 <= month <= 12 and MIN_YEAR <= year <= MAX_YEAR):
        raise InvalidDateFormat(f"Invalid date values in '{text}'")

    try:
        return date(year, month, day)
    except ValueError as e:
        # e.g. 30/02 or 29/02 outside a leap year
        raise InvalidDateFormat(f"Invalid calendar date '{text}'") from e


def _parse_iso(text: str) -> date:
    parts = text.split("-")
    if len(parts) != 3 or [len(p) for p in parts] != [4, 2, 2] or not all(p.isdigit() for p in parts):
        raise InvalidDateFormat(f"Invalid ISO date format '{text}'")
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise InvalidDateFormat(f"Invalid ISO date format '{text}'") from e


def parse_portfolio_date(text: str) -> date:
    """
    Parse a portfolio date token into a date.

    Args:
        text: DD/MM/YYYY or YYYY-MM-DD

    Returns:
        Parsed calendar date

    Raises:
        InvalidDateFormat: If the token has another shape or is not a real date

    Example:
        >>> parse_portfolio_date("29/02/2020")
        datetime.date(2020, 2, 29)
        >>> parse_portfolio_date("29/02/2019")
        Traceback (most recent call last):
        ...
        InvalidDateFormat: Invalid calendar date '29/02/2019'
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidDateFormat("Date is required")

    token = text.strip()
    if "/" in token:
        return _parse_day_month_year(token)
    if "-" in token:
        return _parse_iso(token)
    raise InvalidDateFormat(f"Unrecognized date format '{token}' (supported: DD/MM/YYYY, YYYY-MM-DD)")


def normalize_date(text: str) -> str:
    """
    Normalize a portfolio date token to canonical YYYY-MM-DD.

    ISO input is returned unchanged after validation.

    Raises:
        InvalidDateFormat: If the token cannot be parsed
    """
    return format_date_for_api(parse_portfolio_date(text))


def format_date_for_api(value: date) -> str:
    """Format a date as zero-padded YYYY-MM-DD."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def is_same_day(first: date, second: date) -> bool:
    """True when both values fall on the same calendar day."""
    return (first.year, first.month, first.day) == (second.year, second.month, second.day)


def get_date_range(tokens: Iterable[str]) -> tuple[date | None, date | None]:
    """
    Earliest and latest valid date among the tokens.

    Unparseable tokens are ignored. Returns (None, None) when nothing parses.
    """
    start: date | None = None
    end: date | None = None

    for token in tokens:
        try:
            parsed = parse_portfolio_date(token)
        except InvalidDateFormat:
            continue
        if start is None or parsed < start:
            start = parsed
        if end is None or parsed > end:
            end = parsed

    return start, end

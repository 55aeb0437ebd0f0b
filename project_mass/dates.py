"""
Date parsing for hand-entered spreadsheet dates.

The date column holds a mix of formats accumulated over the years:
"2/3/16", "3/19/2018", "5/12" (year taken from earlier rows),
"2020-01-15" and occasional raw spreadsheet serial numbers.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional


SERIAL_EPOCH = date(1899, 12, 30)

_CYCLE_PATTERN = re.compile(r"^cycle\s*\d", re.IGNORECASE)
_ISO_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_US_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})$")
_SHORT_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})$")

FALLBACK_FORMATS = [
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%Y/%m/%d",
    "%d %B %Y",
    "%d %b %Y",
]


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    """Build a date, returning None for impossible calendar values."""
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _expand_year(year: int) -> int:
    """Two-digit years pivot at 50."""
    if year < 100:
        return 1900 + year if year >= 50 else 2000 + year
    return year


def parse_date(raw: Optional[str], year_hint: Optional[int] = None) -> Optional[date]:
    """
    Parse a date cell.

    Parameters:
        raw: Raw cell text.
        year_hint: Year used for "M/D" dates that omit it.

    Returns:
        date if parsing succeeds, None otherwise.
    """
    if not raw:
        return None
    trimmed = raw.strip()
    if not trimmed:
        return None

    if _CYCLE_PATTERN.match(trimmed):
        return None

    # google sheets serial date
    try:
        serial = float(trimmed)
    except ValueError:
        serial = None
    if serial is not None:
        if 40000 < serial < 60000:
            return SERIAL_EPOCH + timedelta(days=int(serial))
        return None

    match = _ISO_PATTERN.match(trimmed)
    if match:
        return _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = _US_PATTERN.match(trimmed)
    if match:
        year = _expand_year(int(match.group(3)))
        return _safe_date(year, int(match.group(1)), int(match.group(2)))

    match = _SHORT_PATTERN.match(trimmed)
    if match:
        if not year_hint:
            return None
        return _safe_date(year_hint, int(match.group(1)), int(match.group(2)))

    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(trimmed, fmt).date()
        except ValueError:
            continue

    return None


def days_between(a: date, b: date) -> int:
    """Absolute number of whole days between two dates."""
    return abs((b - a).days)


def format_date(d: date) -> str:
    """Format as YYYY-MM-DD."""
    return d.isoformat()


def format_date_short(d: date) -> str:
    """Format as M/D/YYYY."""
    return f"{d.month}/{d.day}/{d.year}"

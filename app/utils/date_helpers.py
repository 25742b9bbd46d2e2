"""
Date parsing for scraped and API payloads.
"""

from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

_COMPACT_DATE_FORMAT = "%Y%m%d"


def parse_date(value: Any) -> date | None:
    """
    Parse a date from whatever shape a source hands us.

    Accepts date/datetime objects, ISO strings (``2025-10-20``,
    ``2025-10-20T14:00Z``), compact ``20251020`` strings and free text such
    as ``"Mon, 20 Oct 2025 14:00"``. Returns None when nothing parses.

    Examples:
        >>> parse_date("2025-10-20T14:00Z")
        datetime.date(2025, 10, 20)
        >>> parse_date("not a date") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if len(text) == 8 and text.isdigit():
        try:
            return datetime.strptime(text, _COMPACT_DATE_FORMAT).date()
        except ValueError:
            return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date_parser.parse(text, fuzzy=True).date()
    except (ValueError, OverflowError):
        return None


def compact_date(value: date) -> str:
    """Format a date as ``YYYYMMDD`` (ESPN scoreboard query format)."""
    return value.strftime(_COMPACT_DATE_FORMAT)

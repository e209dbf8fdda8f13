# rusunawa/utils/date_utils.py
from __future__ import annotations

"""
Calendar-date helpers used by the reservation engine.

Notes:
- Booking dates carry no time-of-day; datetimes are truncated to their date.
- Month arithmetic uses `dateutil.relativedelta`, which clamps to the last
  valid day of the target month (2025-01-31 + 1 month -> 2025-02-28).
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterator, Optional

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)


class DateUtilsError(Exception):
    """Custom exception for date utilities errors."""
    pass


def parse_date(value: Any) -> date:
    """
    Coerce a date-like value into a calendar date.

    Accepts `date`, `datetime` (time is dropped) and ISO-8601 strings such as
    ``2025-01-15`` or ``2025-01-15T00:00:00.000Z``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise DateUtilsError("Date value cannot be empty")

    try:
        return isoparse(value.strip()).date()
    except (ValueError, OverflowError) as e:
        logger.debug(f"Failed to parse date '{value}': {e}")
        raise DateUtilsError(f"Invalid date: {value!r}. Expected format: YYYY-MM-DD") from e


def parse_optional_date(value: Any) -> Optional[date]:
    """Like `parse_date`, but ``None`` and blank strings map to ``None``."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_date(value)


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping to the end of shorter months."""
    if not isinstance(start, date):
        raise DateUtilsError("Start must be a date object")
    return start + relativedelta(months=months)


def days_between(start: date, end: date) -> int:
    """Number of whole days from start to end (negative if end is earlier)."""
    return (end - start).days


def iter_days(start: date, end: date) -> Iterator[date]:
    """
    Yield every date in the half-open range [start, end).
    If start >= end, yields nothing.
    """
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


def format_long_date(d: date) -> str:
    """Format as e.g. ``March 15, 2025``."""
    return f"{d:%B} {d.day}, {d.year}"

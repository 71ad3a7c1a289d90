"""
Domain time utilities (pure).

Sales are recorded against calendar dates, not instants. "Today" is always
resolved in the business time zone so that a sale rung up late in the evening
does not land on tomorrow's ledger page.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

DEFAULT_BUSINESS_TIMEZONE: str = "America/Bogota"


class InvalidDateRangeError(ValueError):
    """Raised when a date range starts after it ends."""


def today_in(timezone_name: str = DEFAULT_BUSINESS_TIMEZONE) -> date:
    """Return the current calendar date in the given IANA time zone."""

    return datetime.now(ZoneInfo(timezone_name)).date()


def require_date_range(start: date, end: date) -> None:
    """
    Enforces inclusive date range ordering.

    Invariants:
    - Both bounds must be provided.
    - start must not be after end (start == end is a one-day range).
    """

    if start is None or end is None:
        raise InvalidDateRangeError("start_date and end_date are required")
    if start > end:
        raise InvalidDateRangeError(
            f"start_date {start.isoformat()} is after end_date {end.isoformat()}"
        )

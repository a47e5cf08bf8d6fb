"""
Calendar day helpers for price lookups.
Supports the market timezone and inclusive date ranges.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, List

import pytz

from src.config import settings


def iter_dates(start_date: date, end_date: date) -> Iterator[date]:
    """
    Yield every calendar day from start_date to end_date, both inclusive.

    Yields nothing when start_date is after end_date.
    """
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def missing_dates(start_date: date, end_date: date, known_dates) -> List[date]:
    """
    List the days in the inclusive range that are not in known_dates.

    Args:
        start_date: First day of the range
        end_date: Last day of the range (inclusive)
        known_dates: Collection of days that already have a price

    Returns:
        Days without a price, in calendar order
    """
    known = set(known_dates)
    return [day for day in iter_dates(start_date, end_date) if day not in known]


def range_length_days(start_date: date, end_date: date) -> int:
    """Number of days in the inclusive range, 0 for an inverted range."""
    return max((end_date - start_date).days + 1, 0)


def today_in_market_timezone(reference_time: datetime = None) -> date:
    """
    Get the current calendar day in the market timezone.

    Args:
        reference_time: Reference datetime. If None, uses the current time.
            A timezone-naive value is assumed to be UTC.

    Returns:
        The calendar day in settings.market_timezone
    """
    market_tz = pytz.timezone(settings.market_timezone)

    if reference_time is None:
        return datetime.now(market_tz).date()

    if reference_time.tzinfo is None:
        reference_time = pytz.UTC.localize(reference_time)

    return reference_time.astimezone(market_tz).date()

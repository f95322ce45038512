"""Calendar helpers: day iteration, month lengths, and per-day windows."""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, Tuple

from core.models import Interval

_MIDDAY = time(12, 0)
_END_OF_DAY = time(23, 59, 59, 999999)


def each_day_inclusive(start_day: date, end_day: date) -> Iterator[date]:
    """Yield every civil date from start_day to end_day, ascending.

    The cursor sits at 12:00 so a one-hour clock shift can never push it
    across a midnight.
    """

    cursor = datetime.combine(start_day, _MIDDAY)
    while cursor.date() <= end_day:
        yield cursor.date()
        cursor = datetime.combine(cursor.date() + timedelta(days=1), _MIDDAY)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def each_day_of_month(year: int, month: int) -> Iterator[date]:
    first = date(year, month, 1)
    last = date(year, month, days_in_month(year, month))
    return each_day_inclusive(first, last)


def clip_to_day(interval: Interval, day: date) -> Optional[Tuple[datetime, datetime]]:
    """Return the part of the interval inside ``day``, or None if empty."""

    day_start = datetime.combine(day, time.min)
    day_end = datetime.combine(day, _END_OF_DAY)
    start = max(day_start, interval.start)
    end = min(day_end, interval.end)
    if start > end:
        return None
    return start, end

"""Date manipulation utilities"""

from datetime import date
from typing import Optional, Tuple

# Stand-in end date for open-ended tenancies and occupancy entries
OPEN_END = date(2099, 12, 31)


def year_bounds(year: int) -> Tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def days_in_year(year: int) -> int:
    """365 or 366, from real date arithmetic"""
    start, end = year_bounds(year)
    return day_index(end, start) + 1


def day_index(day: date, year_start: date) -> int:
    """Offset of a date from 1 January (may be negative or past year end)"""
    return (day - year_start).days


def clamp_span(
    start: date,
    end: Optional[date],
    year_start: date,
    year_length: int,
) -> Optional[Tuple[int, int]]:
    """
    Intersect [start, end] with the calendar year as day indices.

    Returns None when the span does not touch the year.
    """
    start_idx = max(0, day_index(start, year_start))
    end_idx = min(year_length - 1, day_index(end or OPEN_END, year_start))
    if start_idx > end_idx:
        return None
    return start_idx, end_idx


def first_of_month(day: date) -> date:
    return date(day.year, day.month, 1)

"""
utils/dates.py
--------------
Calendar helpers for month windows.
"""

from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """
    First and last calendar day of a month.

    Returns:
        Tuple (first_day, last_day), both inclusive.
    """
    first = date(year, month, 1)
    return first, first + relativedelta(months=1, days=-1)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by `delta` months, crossing year boundaries."""
    shifted = date(year, month, 1) + relativedelta(months=delta)
    return shifted.year, shifted.month


def start_of_day(day: date) -> datetime:
    """Midnight at the beginning of `day`."""
    return datetime.combine(day, time.min)


def end_exclusive(day: date) -> datetime:
    """Midnight after `day`; use with `<` to include the whole day."""
    return start_of_day(day + timedelta(days=1))

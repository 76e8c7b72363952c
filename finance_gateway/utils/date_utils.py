"""Date manipulation utilities"""

from calendar import monthrange
from datetime import date, timedelta
from typing import List

from dateutil.relativedelta import relativedelta


def start_of_month(d: date) -> date:
    """First day of the month containing d"""
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    """Last day of the month containing d (inclusive bound)"""
    return d.replace(day=monthrange(d.year, d.month)[1])


def week_start(d: date) -> date:
    """Sunday on or before d. Weeks are always Sunday-aligned."""
    # date.weekday(): Monday=0 ... Sunday=6
    return d - timedelta(days=(d.weekday() + 1) % 7)


def days_between(a: date, b: date) -> int:
    """Whole days from a to b (negative when b is before a)"""
    return (b - a).days


def days_between_inclusive(a: date, b: date) -> int:
    """Days from a to b counting both ends. Zero or negative means b < a."""
    return days_between(a, b) + 1


def months_between_inclusive(a: date, b: date) -> int:
    """Calendar months from a's month to b's month counting both ends"""
    return (b.year - a.year) * 12 + (b.month - a.month) + 1


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping to the last valid day (Jan 31 + 1 -> Feb 28/29)"""
    return d + relativedelta(months=months)


def is_same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def month_window(reference: date, months_back: int) -> List[date]:
    """
    First day of each of the `months_back` consecutive months ending at the
    month containing `reference`, oldest first.
    """
    current = start_of_month(reference)
    return [add_months(current, -offset) for offset in range(months_back - 1, -1, -1)]

"""Unit tests for calendar helpers"""

from datetime import date
from finance_gateway.utils.date_utils import (
    add_months,
    days_between_inclusive,
    end_of_month,
    month_window,
    months_between_inclusive,
    start_of_month,
    week_start,
)


def test_month_bounds_leap_year():
    assert start_of_month(date(2024, 2, 15)) == date(2024, 2, 1)
    assert end_of_month(date(2024, 2, 15)) == date(2024, 2, 29)
    assert end_of_month(date(2023, 2, 1)) == date(2023, 2, 28)
    assert end_of_month(date(2024, 12, 31)) == date(2024, 12, 31)


def test_week_start_is_sunday():
    # 2024-03-05 is a Tuesday
    assert week_start(date(2024, 3, 5)) == date(2024, 3, 3)
    # Sunday maps to itself, Saturday to the previous Sunday
    assert week_start(date(2024, 3, 3)) == date(2024, 3, 3)
    assert week_start(date(2024, 3, 9)) == date(2024, 3, 3)


def test_days_between_inclusive():
    assert days_between_inclusive(date(2024, 3, 1), date(2024, 3, 5)) == 5
    assert days_between_inclusive(date(2024, 3, 5), date(2024, 3, 5)) == 1
    assert days_between_inclusive(date(2024, 3, 5), date(2024, 3, 1)) == -3


def test_months_between_inclusive():
    assert months_between_inclusive(date(2024, 1, 15), date(2024, 6, 15)) == 6
    assert months_between_inclusive(date(2023, 11, 30), date(2024, 2, 1)) == 4
    assert months_between_inclusive(date(2024, 3, 1), date(2024, 3, 31)) == 1


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 3, 15), -3) == date(2023, 12, 15)


def test_month_window_oldest_first():
    assert month_window(date(2024, 3, 10), 3) == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]
    assert month_window(date(2024, 1, 5), 2) == [date(2023, 12, 1), date(2024, 1, 1)]

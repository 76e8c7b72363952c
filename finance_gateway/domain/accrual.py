"""Accrual engine - how much of a recurring cost has been incurred as of a date"""

import logging
from datetime import date
from typing import Iterable

from finance_gateway.domain.models import Frequency, RecurringCost
from finance_gateway.utils.date_utils import (
    days_between,
    days_between_inclusive,
    months_between_inclusive,
    week_start,
)

logger = logging.getLogger(__name__)


def accrued_units(frequency: Frequency, effective_start: date, reference_date: date) -> int:
    """
    Number of periods accrued between effective_start and reference_date.

    The period containing effective_start and the period containing
    reference_date both count in full (no pro-rating of partial periods):
    - DAILY:   days, inclusive of both ends
    - WEEKLY:  Sunday-aligned weeks, inclusive of both ends
    - MONTHLY: calendar months, inclusive of both ends

    Returns 0 for frequencies that do not accrue over time.
    """
    if frequency == Frequency.DAILY:
        return days_between_inclusive(effective_start, reference_date)

    if frequency == Frequency.WEEKLY:
        weeks = days_between(week_start(effective_start), week_start(reference_date)) // 7
        return weeks + 1

    if frequency == Frequency.MONTHLY:
        return months_between_inclusive(effective_start, reference_date)

    return 0


def accrued_amount(cost: RecurringCost, reference_date: date, window_start: date) -> float:
    """
    Amount of `cost` accrued as of `reference_date` within a window opening at
    `window_start`.

    Rules:
    - Inactive costs and costs created after the reference date accrue 0
    - One-off costs (not fixed, or frequency ONCE) count once, unscaled
    - Fixed costs accrue amount * units from max(created_at, window_start)
    - Unknown frequencies accrue 0 (display aggregate, fail-soft)
    """
    if not cost.is_active:
        return 0.0

    if cost.created_at > reference_date:
        return 0.0

    if not cost.is_fixed or cost.frequency == Frequency.ONCE:
        return float(cost.amount)

    try:
        frequency = Frequency(cost.frequency)
    except ValueError:
        logger.debug("Skipping cost with unknown frequency", extra={"frequency": str(cost.frequency)})
        return 0.0

    effective_start = max(cost.created_at, window_start)
    units = accrued_units(frequency, effective_start, reference_date)

    if units <= 0:
        return 0.0

    return cost.amount * units


def total_accrued(costs: Iterable[RecurringCost], reference_date: date, window_start: date) -> float:
    """Sum of accrued_amount over every cost in scope"""
    return sum((accrued_amount(cost, reference_date, window_start) for cost in costs), 0.0)

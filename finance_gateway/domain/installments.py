"""Installment plan generation for split purchases"""

from typing import List

from finance_gateway.domain.exceptions import InvalidInstallmentPlanError
from finance_gateway.domain.models import Installment, InstallmentPlan
from finance_gateway.utils.date_utils import add_months, months_between_inclusive

MIN_INSTALLMENTS = 2
MAX_INSTALLMENTS = 24


def validate_plan(plan: InstallmentPlan) -> None:
    """
    Reject plans outside the supported bounds.

    Raises:
        InvalidInstallmentPlanError: count outside 2..24 or end_date not after start_date
    """
    if plan.count < MIN_INSTALLMENTS or plan.count > MAX_INSTALLMENTS:
        raise InvalidInstallmentPlanError(
            "installments",
            f"Installment count must be between {MIN_INSTALLMENTS} and {MAX_INSTALLMENTS}, got {plan.count}",
        )
    if plan.end_date <= plan.start_date:
        raise InvalidInstallmentPlanError(
            "installment_end_date",
            "Installment end date must be after the start date",
        )


def distribute(plan: InstallmentPlan) -> List[Installment]:
    """
    Spread a purchase over `plan.count` installments between start and end date.

    Requirements:
    - Equal split, no rounding adjustment on the last installment
    - Due dates spread as evenly as possible over the month span, not one per month
    - Day of month preserved from start_date, clamped at month end

    Example:
        1200 in 3 between 2024-01-15 and 2024-06-15
        span = 6 months, interval = 2, remainder = 0
        -> 400 on 2024-01-15, 2024-03-15, 2024-05-15
    """
    validate_plan(plan)

    installment_amount = plan.total_amount / plan.count

    total_months_span = months_between_inclusive(plan.start_date, plan.end_date)
    month_interval = total_months_span // plan.count
    remainder = total_months_span % plan.count

    installments = []
    for i in range(plan.count):
        # Earlier installments absorb the remainder, one extra month each
        months_to_add = i * month_interval + min(i, remainder)
        due_date = add_months(plan.start_date, months_to_add)

        installments.append(Installment(index=i + 1, amount=installment_amount, due_date=due_date))

    return installments

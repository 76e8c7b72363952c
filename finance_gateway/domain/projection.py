"""Monthly projections - revenue/cost/profit series, spend-so-far and balance projection"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from finance_gateway.domain.accrual import total_accrued
from finance_gateway.domain.classification import classify
from finance_gateway.domain.models import (
    FinancialProfile,
    MonthBreakdown,
    MonthlyProjection,
    MonthlyStat,
    RecurringCost,
    StockItem,
    Subscription,
    Transaction,
    TransactionType,
)
from finance_gateway.domain.recurrence import is_recurring, is_subscription_linked
from finance_gateway.utils.date_utils import (
    add_months,
    end_of_month,
    is_same_month,
    month_window,
    start_of_month,
)


def reference_for_month(month: date, reference_now: date) -> date:
    """Past months settle at month end; the current month accrues only up to now"""
    if is_same_month(month, reference_now):
        return reference_now
    return end_of_month(month)


def in_month(day: date, month: date) -> bool:
    return start_of_month(month) <= day <= end_of_month(month)


def costs_for_month(costs: Iterable[RecurringCost], month: date, reference_now: date) -> float:
    """Accrued total of every cost created by the end of `month`"""
    month_end = end_of_month(month)
    in_scope = [cost for cost in costs if cost.created_at <= month_end]
    return total_accrued(in_scope, reference_for_month(month, reference_now), start_of_month(month))


def stock_value_at(items: Iterable[StockItem], month_end: date) -> float:
    return sum(
        (item.quantity * item.cost_price for item in items if item.is_active and item.created_at <= month_end),
        0.0,
    )


def monthly_stats(
    costs: Sequence[RecurringCost],
    transactions: Sequence[Transaction],
    stock_items: Sequence[StockItem],
    months_back: int,
    reference_now: date,
    track_stock: bool = False,
) -> List[MonthlyStat]:
    """
    Revenue, cost, profit and stock value for `months_back` consecutive months
    ending at the month containing `reference_now`, oldest first.

    Pure: identical inputs always produce identical output.
    """
    stats = []
    for month in month_window(reference_now, months_back):
        month_end = end_of_month(month)

        revenues = sum(
            (t.amount for t in transactions if t.type == TransactionType.DEPOSIT and in_month(t.date, month)),
            0.0,
        )
        month_costs = costs_for_month(costs, month, reference_now)
        stock_value = stock_value_at(stock_items, month_end) if track_stock else 0.0

        stats.append(
            MonthlyStat(
                month=month.month,
                year=month.year,
                revenues=revenues,
                costs=month_costs,
                profit=revenues - month_costs,
                stock_value=stock_value,
            )
        )

    return stats


def spend_so_far_this_month(costs: Sequence[RecurringCost], reference_now: date) -> float:
    return costs_for_month(costs, reference_now, reference_now)


def spend_so_far_last_month(costs: Sequence[RecurringCost], reference_now: date) -> float:
    return costs_for_month(costs, add_months(start_of_month(reference_now), -1), reference_now)


def due_this_month(subscription: Subscription, month: date) -> bool:
    """Active subscription already due, or due before this month ends"""
    if not subscription.active:
        return False
    return subscription.next_due_date is None or subscription.next_due_date <= end_of_month(month)


def month_breakdown(
    transactions: Sequence[Transaction],
    history: Sequence[Transaction],
    subscriptions: Sequence[Subscription],
    month: date,
    keywords: Optional[Iterable[str]] = None,
    lookback_months: int = 3,
) -> MonthBreakdown:
    """
    Classify every transaction dated in `month` and total it by bucket.

    Recurrence comes from `history`; subscriptions due this month are added
    to fixed expenses.
    """
    breakdown = MonthBreakdown(month=month.month, year=month.year)

    for transaction in transactions:
        if not in_month(transaction.date, month):
            continue

        recurring = transaction.is_recurring_observed or is_recurring(transaction, history, lookback_months)
        linked = transaction.is_subscription_linked or is_subscription_linked(transaction.name, subscriptions)
        flags = classify(transaction.type, transaction.category, transaction.name, recurring, linked, keywords)

        if flags.is_salary:
            breakdown.salary += transaction.amount
        elif flags.is_benefit:
            breakdown.benefits += transaction.amount
        elif flags.is_variable_income:
            breakdown.variable_income += transaction.amount
        elif flags.is_fixed_expense:
            breakdown.fixed_expenses += transaction.amount
        elif flags.is_variable_expense:
            breakdown.variable_expenses += transaction.amount
        elif flags.is_investment:
            breakdown.investments += transaction.amount

    breakdown.subscriptions = sum((s.amount for s in subscriptions if due_this_month(s, month)), 0.0)
    breakdown.fixed_expenses += breakdown.subscriptions

    return breakdown


def monthly_projection(
    profile: FinancialProfile,
    costs: Sequence[RecurringCost],
    subscriptions: Sequence[Subscription],
    transactions: Sequence[Transaction],
    month: date,
    reference_now: date,
    goal_ratio: float = 0.2,
) -> MonthlyProjection:
    """
    Expected balance at the end of `month`.

    income    = fixed salary + average variable income
    committed = active subscriptions + month expenses + recurring cost accrual
    projected = income + benefit balances - committed
    """
    income_total = profile.fixed_income + profile.variable_income_avg
    benefits_total = sum((b.value for b in profile.benefits), 0.0)
    subscriptions_total = sum((s.amount for s in subscriptions if s.active), 0.0)
    expenses_total = sum(
        (t.amount for t in transactions if t.type == TransactionType.EXPENSE and in_month(t.date, month)),
        0.0,
    )
    recurring_total = costs_for_month(costs, month, reference_now)

    committed = subscriptions_total + expenses_total + recurring_total
    projected_balance = income_total + benefits_total - committed
    percent_committed = committed / income_total * 100 if income_total > 0 else 0.0
    goal_suggestion = projected_balance * goal_ratio if projected_balance > 0 else 0.0

    return MonthlyProjection(
        month=month.strftime("%Y-%m"),
        income_total=income_total,
        benefits_total=benefits_total,
        subscriptions_total=subscriptions_total,
        expenses_total=expenses_total,
        recurring_costs_total=recurring_total,
        projected_balance=projected_balance,
        percent_committed=round(percent_committed, 2),
        goal_suggestion=round(goal_suggestion, 2),
    )


def projection_from_transactions(
    transactions: Sequence[Transaction],
    subscriptions: Sequence[Subscription],
    month: date,
    goal_ratio: float = 0.3,
) -> MonthlyProjection:
    """Projection for owners without a financial profile: income is the month's deposits"""
    month_transactions = [t for t in transactions if in_month(t.date, month)]

    income_total = sum((t.amount for t in month_transactions if t.type == TransactionType.DEPOSIT), 0.0)
    expenses_total = sum((t.amount for t in month_transactions if t.type == TransactionType.EXPENSE), 0.0)
    subscriptions_total = sum((s.amount for s in subscriptions if s.active), 0.0)

    committed = expenses_total + subscriptions_total
    projected_balance = income_total - committed
    percent_committed = committed / income_total * 100 if income_total > 0 else 0.0
    goal_suggestion = projected_balance * goal_ratio if projected_balance > 0 else 0.0

    return MonthlyProjection(
        month=month.strftime("%Y-%m"),
        income_total=income_total,
        benefits_total=0.0,
        subscriptions_total=subscriptions_total,
        expenses_total=expenses_total,
        recurring_costs_total=0.0,
        projected_balance=projected_balance,
        percent_committed=round(percent_committed, 2),
        goal_suggestion=round(goal_suggestion, 2),
    )

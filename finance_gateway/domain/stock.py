"""Stock valuation summary for owners with inventory tracking"""

from datetime import date
from typing import Sequence

from finance_gateway.domain.models import StockItem, StockSummary
from finance_gateway.utils.date_utils import days_between

IDLE_AFTER_DAYS = 30


def stock_summary(items: Sequence[StockItem], reference_now: date) -> StockSummary:
    """
    Aggregate inventory figures over active items.

    - idle: untouched for more than 30 days while still holding quantity
    - average_margin: (sale - cost) / sale as a percentage, clamped to 0..100
    """
    active = [item for item in items if item.is_active]

    total_cost = 0.0
    total_sale = 0.0
    low_stock = 0
    idle = 0
    oldest_days = 0

    for item in active:
        total_cost += item.quantity * item.cost_price
        total_sale += item.quantity * item.sale_price

        if item.quantity <= item.min_quantity:
            low_stock += 1

        oldest_days = max(oldest_days, days_between(item.created_at, reference_now))

        last_touched = item.updated_at or item.created_at
        if days_between(last_touched, reference_now) > IDLE_AFTER_DAYS and item.quantity > 0:
            idle += 1

    margin = 0.0
    if total_sale > 0:
        margin = min(max((total_sale - total_cost) / total_sale * 100, 0.0), 100.0)

    return StockSummary(
        total_cost_value=total_cost,
        total_sale_value=total_sale,
        total_products=len(active),
        low_stock_count=low_stock,
        idle_count=idle,
        oldest_product_days=oldest_days,
        average_margin=margin,
    )

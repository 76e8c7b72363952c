"""GET /v1/stats, /v1/costs, /v1/projection, /v1/dashboard, /v1/stock - read-side reports"""

import re
import time
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    BreakdownResponse,
    MonthlyStatSchema,
    MonthlyStatsResponse,
    ProjectionResponse,
    SpendSoFarResponse,
    StockSummaryResponse,
)
from finance_gateway.api.dependencies import get_engine_tables, get_reference_date, get_request_id
from finance_gateway.config import settings
from finance_gateway.domain.exceptions import InvalidProfileDataError
from finance_gateway.domain.models import EngineTables
from finance_gateway.domain.projection import (
    month_breakdown,
    monthly_projection,
    monthly_stats,
    projection_from_transactions,
    spend_so_far_last_month,
    spend_so_far_this_month,
)
from finance_gateway.domain.stock import stock_summary
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.mappers import (
    to_cost,
    to_profile,
    to_stock_item,
    to_subscription,
    to_transaction,
)
from finance_gateway.infrastructure.database.repositories import (
    CostRepository,
    ProfileRepository,
    StockRepository,
    SubscriptionRepository,
    TransactionRepository,
)
from finance_gateway.infrastructure.observability.logging import log_stats_computed
from finance_gateway.infrastructure.observability.metrics import stats_duration_histogram
from finance_gateway.utils.date_utils import add_months, end_of_month, start_of_month

router = APIRouter()

MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def parse_month(month: Optional[str], reference: date) -> date:
    """First day of a YYYY-MM month; the reference month when omitted"""
    if month is None:
        return start_of_month(reference)
    if not MONTH_PATTERN.match(month):
        raise HTTPException(status_code=400, detail="Invalid month format, use YYYY-MM")
    year, month_number = (int(part) for part in month.split("-"))
    try:
        return date(year, month_number, 1)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid month format, use YYYY-MM")


@router.get("/stats/monthly", response_model=MonthlyStatsResponse)
def get_monthly_stats(
    request: Request,
    owner_id: str = Query(..., description="Owner identifier"),
    months: int = Query(settings.default_stats_months, ge=1, le=settings.max_stats_months),
    reference: date = Depends(get_reference_date),
    db: Session = Depends(get_db),
):
    """
    Revenue, accrued costs, profit and stock value for the last `months` months.

    Returns:
        One entry per month, oldest first, ending at the reference month
    """
    start_time = time.time()

    with stats_duration_histogram.labels(report="monthly_stats").time():
        profile = ProfileRepository(db).get_by_owner(owner_id)
        costs = [to_cost(row) for row in CostRepository(db).list_by_owner(owner_id)]
        window_start = add_months(start_of_month(reference), -(months - 1))
        transactions = [
            to_transaction(row)
            for row in TransactionRepository(db).list_by_owner(owner_id, window_start, end_of_month(reference))
        ]
        stock_items = [to_stock_item(row) for row in StockRepository(db).list_by_owner(owner_id)]

        stats = monthly_stats(
            costs,
            transactions,
            stock_items,
            months,
            reference,
            track_stock=bool(profile and profile.has_stock),
        )

    log_stats_computed(get_request_id(request), owner_id, "monthly_stats", (time.time() - start_time) * 1000)

    return MonthlyStatsResponse(
        owner_id=owner_id,
        reference=reference,
        stats=[MonthlyStatSchema(**vars(stat)) for stat in stats],
    )


@router.get("/costs/spend-so-far", response_model=SpendSoFarResponse)
def get_spend_so_far(
    owner_id: str = Query(...),
    period: str = Query("current", pattern="^(current|last)$"),
    reference: date = Depends(get_reference_date),
    db: Session = Depends(get_db),
):
    """Accrued cost total for the current month up to today, or for the whole previous month"""
    with stats_duration_histogram.labels(report="spend_so_far").time():
        costs = [to_cost(row) for row in CostRepository(db).list_by_owner(owner_id)]

        if period == "current":
            month = start_of_month(reference)
            total = spend_so_far_this_month(costs, reference)
        else:
            month = add_months(start_of_month(reference), -1)
            total = spend_so_far_last_month(costs, reference)

    return SpendSoFarResponse(owner_id=owner_id, period=period, month=month.month, year=month.year, total=total)


@router.get("/projection", response_model=ProjectionResponse)
def get_projection(
    owner_id: str = Query(...),
    month: Optional[str] = Query(None, description="YYYY-MM"),
    reference: date = Depends(get_reference_date),
    db: Session = Depends(get_db),
):
    """
    Expected end-of-month balance.

    Uses the financial profile when present, otherwise falls back to the
    month's actual deposits and expenses.
    """
    target = parse_month(month, reference)

    with stats_duration_histogram.labels(report="projection").time():
        profile_row = ProfileRepository(db).get_by_owner(owner_id)
        subscriptions = [to_subscription(row) for row in SubscriptionRepository(db).list_by_owner(owner_id)]
        transactions = [
            to_transaction(row)
            for row in TransactionRepository(db).list_by_owner(owner_id, target, end_of_month(target))
        ]

        if profile_row is None:
            source = "transactions"
            projection = projection_from_transactions(
                transactions, subscriptions, target, settings.fallback_goal_suggestion_ratio
            )
        else:
            source = "profile"
            costs = [to_cost(row) for row in CostRepository(db).list_by_owner(owner_id)]
            try:
                profile = to_profile(profile_row)
            except InvalidProfileDataError as e:
                logging.error(f"Unreadable benefit balances: {e}", extra={"owner_id": owner_id})
                raise HTTPException(status_code=500, detail="Financial profile has invalid benefit data")
            projection = monthly_projection(
                profile,
                costs,
                subscriptions,
                transactions,
                target,
                reference,
                settings.goal_suggestion_ratio,
            )

    return ProjectionResponse(owner_id=owner_id, source=source, **vars(projection))


@router.get("/dashboard/breakdown", response_model=BreakdownResponse)
def get_breakdown(
    owner_id: str = Query(...),
    month: Optional[str] = Query(None, description="YYYY-MM"),
    reference: date = Depends(get_reference_date),
    db: Session = Depends(get_db),
    tables: EngineTables = Depends(get_engine_tables),
):
    """Month totals by salary / benefit / variable income / fixed / variable expense / investment"""
    target = parse_month(month, reference)
    lookback = settings.recurrence_lookback_months

    with stats_duration_histogram.labels(report="breakdown").time():
        history = [
            to_transaction(row)
            for row in TransactionRepository(db).list_by_owner(
                owner_id, add_months(target, -lookback), end_of_month(target)
            )
        ]
        subscriptions = [to_subscription(row) for row in SubscriptionRepository(db).list_by_owner(owner_id)]

        breakdown = month_breakdown(history, history, subscriptions, target, tables.keywords, lookback)

    return BreakdownResponse(owner_id=owner_id, **vars(breakdown))


@router.get("/stock/summary", response_model=StockSummaryResponse)
def get_stock_summary(
    owner_id: str = Query(...),
    reference: date = Depends(get_reference_date),
    db: Session = Depends(get_db),
):
    profile = ProfileRepository(db).get_by_owner(owner_id)
    if profile is None or not profile.has_stock:
        raise HTTPException(status_code=404, detail="Stock tracking not enabled")

    items = [to_stock_item(row) for row in StockRepository(db).list_by_owner(owner_id)]
    return StockSummaryResponse(owner_id=owner_id, **vars(stock_summary(items, reference)))

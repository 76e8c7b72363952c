"""Row -> domain record normalisation at the storage boundary"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from finance_gateway.domain.exceptions import InvalidProfileDataError
from finance_gateway.domain.models import (
    BenefitBalance,
    BenefitType,
    FinancialProfile,
    Frequency,
    RecurringCost,
    StockItem,
    Subscription,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from finance_gateway.infrastructure.database.models import (
    FinancialProfileRecord,
    RecurringCostRecord,
    StockItemRecord,
    SubscriptionRecord,
    TransactionRecord,
)


def as_date(value: Optional[Any]) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_frequency(raw: Any):
    """Known frequencies become enum members; anything else stays raw and accrues nothing"""
    try:
        return Frequency(str(raw).strip().upper())
    except ValueError:
        return raw


def to_benefits(raw: Optional[List[Dict[str, Any]]]) -> List[BenefitBalance]:
    """
    Benefit balances stored as JSON on the profile.

    Raises:
        InvalidProfileDataError: an entry has no known type or a non-numeric value.
            Entries are never dropped, since the list is written back after a deduction.
    """
    balances = []
    for item in raw or []:
        try:
            balances.append(BenefitBalance(type=BenefitType(item["type"]), value=float(item.get("value") or 0)))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidProfileDataError(f"Malformed benefit entry {item!r}: {e}")
    return balances


def from_benefits(balances: List[BenefitBalance]) -> List[Dict[str, Any]]:
    return [{"type": b.type.value, "value": b.value} for b in balances]


def to_profile(row: FinancialProfileRecord) -> FinancialProfile:
    return FinancialProfile(
        fixed_income=row.fixed_income or 0.0,
        variable_income_avg=row.variable_income_avg or 0.0,
        benefits=to_benefits(row.benefits),
        has_stock=bool(row.has_stock),
    )


def to_cost(row: RecurringCostRecord) -> RecurringCost:
    return RecurringCost(
        amount=row.amount,
        frequency=parse_frequency(row.frequency),
        is_fixed=bool(row.is_fixed),
        is_active=bool(row.is_active),
        created_at=as_date(row.created_at),
        name=row.name,
    )


def to_transaction(row: TransactionRecord) -> Transaction:
    return Transaction(
        type=TransactionType(row.type),
        category=TransactionCategory(row.category),
        amount=row.amount,
        name=row.name,
        date=row.date,
        installment_group_id=row.installment_group_id,
    )


def to_subscription(row: SubscriptionRecord) -> Subscription:
    return Subscription(name=row.name, amount=row.amount, active=bool(row.active), next_due_date=row.next_due_date)


def to_stock_item(row: StockItemRecord) -> StockItem:
    return StockItem(
        quantity=row.quantity,
        cost_price=row.cost_price,
        sale_price=row.sale_price,
        min_quantity=row.min_quantity,
        is_active=bool(row.is_active),
        created_at=as_date(row.created_at),
        updated_at=as_date(row.updated_at),
    )

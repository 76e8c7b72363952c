"""Benefit ledger - deduct purchases from meal/transport voucher balances"""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from finance_gateway.domain.models import (
    DEFAULT_BENEFIT_CATEGORY_MAP,
    BenefitBalance,
    BenefitType,
    DeductionError,
    DeductionResult,
    TransactionCategory,
)

CategoryMap = Dict[TransactionCategory, Optional[BenefitType]]

# Float drift allowed when installments of an equal split use up a balance exactly
BALANCE_TOLERANCE = 1e-9


def benefit_type_for(category: TransactionCategory, category_map: Optional[CategoryMap] = None) -> Optional[BenefitType]:
    """Benefit type a category draws from; None when the category cannot use benefits"""
    table = DEFAULT_BENEFIT_CATEGORY_MAP if category_map is None else category_map
    return table.get(category)


def find_balance_index(balances: Sequence[BenefitBalance], benefit_type: BenefitType) -> int:
    """Index of the matching balance, falling back to OUTRO; -1 when neither exists"""
    for i, balance in enumerate(balances):
        if balance.type == benefit_type:
            return i

    for i, balance in enumerate(balances):
        if balance.type == BenefitType.OUTRO:
            return i

    return -1


def deduct(
    balances: List[BenefitBalance],
    category: TransactionCategory,
    amount: float,
    category_map: Optional[CategoryMap] = None,
) -> DeductionResult:
    """
    Deduct `amount` from the balance matching `category`.

    Never raises for business-rule failures and never mutates `balances`:
    on failure the result carries the input list itself; on success a new
    list with one replaced entry.

    Non-positive amounts are rejected with INVALID_AMOUNT. An amount that
    exceeds the balance by no more than BALANCE_TOLERANCE empties it, so a
    balance never goes negative.
    """
    if amount <= 0:
        return DeductionResult(
            ok=False,
            balances=balances,
            error=DeductionError.INVALID_AMOUNT,
            message=f"Deduction amount must be positive, got {amount}",
        )

    benefit_type = benefit_type_for(category, category_map)
    if benefit_type is None:
        return DeductionResult(
            ok=False,
            balances=balances,
            error=DeductionError.CATEGORY_NOT_ELIGIBLE,
            message=f"Category {category.value} cannot be paid with benefits",
        )

    index = find_balance_index(balances, benefit_type)
    if index == -1:
        return DeductionResult(
            ok=False,
            balances=balances,
            error=DeductionError.NO_MATCHING_BENEFIT,
            message=f"No {benefit_type.value} benefit registered in the financial profile",
        )

    balance = balances[index]
    if amount - balance.value > BALANCE_TOLERANCE:
        shortfall = amount - balance.value
        return DeductionResult(
            ok=False,
            balances=balances,
            remaining=balance.value,
            error=DeductionError.INSUFFICIENT_BALANCE,
            shortfall=shortfall,
            message=(
                f"Insufficient {balance.type.value} balance: available {balance.value:.2f}, "
                f"required {amount:.2f}, missing {shortfall:.2f}"
            ),
        )

    new_value = max(balance.value - amount, 0.0)
    updated = list(balances)
    updated[index] = replace(balance, value=new_value)

    return DeductionResult(ok=True, balances=updated, remaining=new_value)


def deduct_many(
    balances: List[BenefitBalance],
    category: TransactionCategory,
    amounts: Sequence[float],
    category_map: Optional[CategoryMap] = None,
) -> DeductionResult:
    """
    Deduct several amounts as one unit (installments of a single purchase).

    Each deduction is applied to a pending copy; if any fails the original
    balances are returned untouched along with the failing position (1-based).
    """
    pending = balances
    remaining = None

    for position, amount in enumerate(amounts, start=1):
        result = deduct(pending, category, amount, category_map)
        if not result.ok:
            return replace(result, balances=balances, failed_index=position)
        pending = result.balances
        remaining = result.remaining

    return DeductionResult(ok=True, balances=list(pending), remaining=remaining)

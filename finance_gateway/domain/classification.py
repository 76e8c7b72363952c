"""Semantic classification of transactions for reporting"""

from typing import Iterable, Optional

from finance_gateway.domain.models import (
    DEFAULT_FIXED_EXPENSE_KEYWORDS,
    Classification,
    TransactionCategory,
    TransactionType,
)

FIXED_EXPENSE_CATEGORIES = {TransactionCategory.HOUSING, TransactionCategory.UTILITY}


def is_salary(type: TransactionType, category: TransactionCategory) -> bool:
    return type == TransactionType.DEPOSIT and category == TransactionCategory.SALARY


def is_benefit(type: TransactionType, category: TransactionCategory, is_recurring: bool = False) -> bool:
    """Recurring non-salary deposit (meal/transport vouchers). One-off deposits never qualify."""
    return type == TransactionType.DEPOSIT and category != TransactionCategory.SALARY and is_recurring


def is_variable_income(type: TransactionType, category: TransactionCategory, is_recurring: bool = False) -> bool:
    return (
        type == TransactionType.DEPOSIT
        and not is_salary(type, category)
        and not is_benefit(type, category, is_recurring)
    )


def matches_fixed_keyword(name: str, keywords: Iterable[str]) -> bool:
    lower_name = name.lower()
    return any(keyword.lower() in lower_name for keyword in keywords)


def is_fixed_expense(
    type: TransactionType,
    category: TransactionCategory,
    name: str,
    is_subscription: bool = False,
    is_recurring: bool = False,
    keywords: Optional[Iterable[str]] = None,
) -> bool:
    """
    Expense that repeats every month.

    Any of: linked to a subscription, observed recurring, housing/utility
    category, or a name containing a fixed-expense keyword.
    """
    if type != TransactionType.EXPENSE:
        return False

    if is_subscription or is_recurring:
        return True

    if category in FIXED_EXPENSE_CATEGORIES:
        return True

    return matches_fixed_keyword(name, DEFAULT_FIXED_EXPENSE_KEYWORDS if keywords is None else keywords)


def classify(
    type: TransactionType,
    category: TransactionCategory,
    name: str,
    is_recurring: bool = False,
    is_subscription: bool = False,
    keywords: Optional[Iterable[str]] = None,
) -> Classification:
    """
    Full flag bundle for a transaction.

    Exactly one income flag (or is_investment) is set for non-expenses and
    exactly one of fixed/variable is set for expenses.
    """
    fixed = is_fixed_expense(type, category, name, is_subscription, is_recurring, keywords)

    return Classification(
        is_salary=is_salary(type, category),
        is_benefit=is_benefit(type, category, is_recurring),
        is_variable_income=is_variable_income(type, category, is_recurring),
        is_fixed_expense=fixed,
        is_variable_expense=type == TransactionType.EXPENSE and not fixed,
        is_investment=type == TransactionType.INVESTMENT,
    )

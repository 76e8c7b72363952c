"""History-based recurrence heuristic feeding the classifier"""

from typing import Iterable

from finance_gateway.domain.models import Subscription, Transaction
from finance_gateway.utils.date_utils import add_months

AMOUNT_SIMILARITY_RATIO = 0.2
MIN_PRIOR_OCCURRENCES = 2


def is_similar(candidate: Transaction, other: Transaction) -> bool:
    """
    Same name and category, or same category with a close amount (within 20%)
    and at least one name word in common.
    """
    if other.category != candidate.category:
        return False

    if other.name.lower() == candidate.name.lower():
        return True

    amount_ratio = abs(other.amount - candidate.amount) / max(candidate.amount, 1)
    if amount_ratio >= AMOUNT_SIMILARITY_RATIO:
        return False

    candidate_words = set(candidate.name.lower().split())
    return any(word in candidate_words for word in other.name.lower().split())


def is_recurring(candidate: Transaction, history: Iterable[Transaction], lookback_months: int = 3) -> bool:
    """Candidate is recurring when 2+ similar transactions precede it within the lookback"""
    lookback_start = add_months(candidate.date, -lookback_months)

    similar_count = sum(
        1
        for other in history
        if lookback_start <= other.date < candidate.date and is_similar(candidate, other)
    )
    return similar_count >= MIN_PRIOR_OCCURRENCES


def is_subscription_linked(name: str, subscriptions: Iterable[Subscription]) -> bool:
    lower_name = name.lower()
    return any(sub.active and sub.name.lower() == lower_name for sub in subscriptions)

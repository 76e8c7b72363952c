"""Unit tests for the benefit ledger"""

import copy
import pytest
from finance_gateway.domain.benefits import deduct, deduct_many
from finance_gateway.domain.models import (
    BenefitBalance,
    BenefitType,
    DeductionError,
    TransactionCategory,
)


def test_deduct_insufficient_balance_leaves_balances_untouched():
    balances = [BenefitBalance(BenefitType.VR, 30)]
    snapshot = copy.deepcopy(balances)

    result = deduct(balances, TransactionCategory.FOOD, 40)

    assert result.ok is False
    assert result.error == DeductionError.INSUFFICIENT_BALANCE
    assert result.remaining == 30
    assert result.shortfall == 10
    assert result.balances == snapshot
    assert balances == snapshot


def test_deduct_success_returns_new_list():
    balances = [BenefitBalance(BenefitType.VR, 100), BenefitBalance(BenefitType.VT, 50)]

    result = deduct(balances, TransactionCategory.FOOD, 40)

    assert result.ok is True
    assert result.remaining == 60
    assert result.balances == [BenefitBalance(BenefitType.VR, 60), BenefitBalance(BenefitType.VT, 50)]
    # Input snapshot is not mutated
    assert balances[0].value == 100


def test_deduct_exact_balance_reaches_zero():
    result = deduct([BenefitBalance(BenefitType.VT, 25)], TransactionCategory.TRANSPORTATION, 25)

    assert result.ok is True
    assert result.remaining == 0


def test_deduct_falls_back_to_outro():
    balances = [BenefitBalance(BenefitType.OUTRO, 200)]

    result = deduct(balances, TransactionCategory.TRANSPORTATION, 50)

    assert result.ok is True
    assert result.balances == [BenefitBalance(BenefitType.OUTRO, 150)]


def test_deduct_salary_is_not_eligible():
    balances = [BenefitBalance(BenefitType.OUTRO, 200)]

    result = deduct(balances, TransactionCategory.SALARY, 50)

    assert result.ok is False
    assert result.error == DeductionError.CATEGORY_NOT_ELIGIBLE
    assert result.balances is balances


def test_deduct_without_matching_benefit():
    result = deduct([BenefitBalance(BenefitType.VR, 500)], TransactionCategory.TRANSPORTATION, 10)

    assert result.ok is False
    assert result.error == DeductionError.NO_MATCHING_BENEFIT


def test_deduct_with_injected_category_map():
    category_map = {TransactionCategory.HEALTH: BenefitType.VA}

    ok = deduct([BenefitBalance(BenefitType.VA, 80)], TransactionCategory.HEALTH, 30, category_map)
    missing = deduct([BenefitBalance(BenefitType.VA, 80)], TransactionCategory.FOOD, 30, category_map)

    assert ok.remaining == 50
    assert missing.error == DeductionError.CATEGORY_NOT_ELIGIBLE


def test_deduct_many_is_all_or_nothing():
    balances = [BenefitBalance(BenefitType.VR, 100)]

    result = deduct_many(balances, TransactionCategory.FOOD, [40, 40, 40])

    assert result.ok is False
    assert result.error == DeductionError.INSUFFICIENT_BALANCE
    assert result.failed_index == 3
    assert result.remaining == 20
    assert result.balances == [BenefitBalance(BenefitType.VR, 100)]
    assert balances[0].value == 100


def test_deduct_many_applies_every_amount():
    result = deduct_many([BenefitBalance(BenefitType.VR, 100)], TransactionCategory.FOOD, [30, 30])

    assert result.ok is True
    assert result.remaining == pytest.approx(40)
    assert result.balances[0].value == pytest.approx(40)


@pytest.mark.parametrize("count", [3, 6, 7, 9, 24])
def test_deduct_many_equal_split_can_empty_balance(count):
    """Float drift of an equal split must not refuse a purchase worth the whole balance"""
    result = deduct_many([BenefitBalance(BenefitType.VR, 100)], TransactionCategory.FOOD, [100 / count] * count)

    assert result.ok is True
    assert result.remaining == pytest.approx(0, abs=1e-9)
    assert result.balances[0].value >= 0


def test_deduct_still_rejects_real_overdraw():
    result = deduct([BenefitBalance(BenefitType.VR, 100)], TransactionCategory.FOOD, 100.01)

    assert result.ok is False
    assert result.error == DeductionError.INSUFFICIENT_BALANCE
    assert result.shortfall == pytest.approx(0.01)


@pytest.mark.parametrize("amount", [0, -5])
def test_deduct_rejects_non_positive_amount(amount):
    balances = [BenefitBalance(BenefitType.VR, 100)]

    result = deduct(balances, TransactionCategory.FOOD, amount)

    assert result.ok is False
    assert result.error == DeductionError.INVALID_AMOUNT
    assert result.balances is balances
    assert balances[0].value == 100

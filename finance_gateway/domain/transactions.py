"""Transaction creation planner - installments plus benefit payment as one unit"""

import uuid
from typing import List, Optional

from finance_gateway.domain.benefits import CategoryMap, deduct_many
from finance_gateway.domain.exceptions import BenefitPaymentRejectedError, InvalidInstallmentPlanError
from finance_gateway.domain.installments import distribute
from finance_gateway.domain.models import (
    BenefitBalance,
    InstallmentPlan,
    PaymentMethod,
    TransactionDraft,
    TransactionPlan,
    TransactionRequest,
    TransactionType,
)


def build_drafts(request: TransactionRequest, group_id: Optional[str] = None) -> List[TransactionDraft]:
    """
    Explode a request into the transactions to persist.

    Only expenses are split; deposits and investments with an installment
    count are stored as a single transaction.
    """
    if not request.installments or request.type != TransactionType.EXPENSE:
        return [
            TransactionDraft(
                name=request.name,
                amount=request.amount,
                type=request.type,
                category=request.category,
                payment_method=request.payment_method,
                date=request.date,
            )
        ]

    if request.installment_end_date is None:
        raise InvalidInstallmentPlanError(
            "installment_end_date",
            "An end date is required when splitting into installments",
        )

    installments = distribute(
        InstallmentPlan(
            total_amount=request.amount,
            count=request.installments,
            start_date=request.date,
            end_date=request.installment_end_date,
        )
    )
    group_id = group_id or str(uuid.uuid4())

    return [
        TransactionDraft(
            name=f"{request.name} ({inst.index}/{request.installments})",
            amount=inst.amount,
            type=request.type,
            category=request.category,
            payment_method=request.payment_method,
            date=inst.due_date,
            installments=request.installments,
            current_installment=inst.index,
            installment_group_id=group_id,
        )
        for inst in installments
    ]


def plan_transactions(
    request: TransactionRequest,
    balances: List[BenefitBalance],
    category_map: Optional[CategoryMap] = None,
    group_id: Optional[str] = None,
) -> TransactionPlan:
    """
    Compute every draft and every benefit deduction before anything is stored.

    Raises:
        InvalidInstallmentPlanError: installment count or dates out of bounds
        BenefitPaymentRejectedError: any installment cannot be paid with benefits;
            no deduction is applied in that case
    """
    drafts = build_drafts(request, group_id)

    if request.payment_method != PaymentMethod.BENEFIT:
        return TransactionPlan(drafts=drafts, balances=balances)

    result = deduct_many(balances, request.category, [draft.amount for draft in drafts], category_map)
    if not result.ok:
        raise BenefitPaymentRejectedError(result)

    return TransactionPlan(drafts=drafts, balances=result.balances, remaining=result.remaining, benefit_used=True)

"""POST/DELETE /v1/transactions - create (with installments and benefit payment), delete, classify"""

import time
import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    BulkDeleteRequest,
    ClassificationSchema,
    ClassifyRequest,
    DeleteResponse,
    TransactionCreateRequest,
    TransactionCreateResponse,
)
from finance_gateway.api.dependencies import get_engine_tables, get_request_id
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import ProfileRepository, TransactionRepository
from finance_gateway.infrastructure.database.mappers import to_benefits
from finance_gateway.domain.classification import classify
from finance_gateway.domain.exceptions import (
    BenefitPaymentRejectedError,
    InvalidInstallmentPlanError,
    InvalidProfileDataError,
    ProfileNotFoundError,
)
from finance_gateway.domain.models import EngineTables, PaymentMethod, TransactionRequest
from finance_gateway.domain.transactions import plan_transactions
from finance_gateway.infrastructure.observability.metrics import record_deduction, record_transactions
from finance_gateway.infrastructure.observability.logging import log_benefit_deduction, log_transaction_created

router = APIRouter()


@router.post("/transactions", response_model=TransactionCreateResponse, status_code=201)
def create_transaction(
    body: TransactionCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    tables: EngineTables = Depends(get_engine_tables),
):
    """
    Create a transaction, optionally split into installments and paid with benefits.

    Flow:
    1. Lock the owner's profile when paying with benefits
    2. Compute every installment and every deduction up front
    3. Persist all installments and the new balances in one commit
    Any rejected installment aborts the whole purchase.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        profile_repo = ProfileRepository(db)
        profile = None
        balances = []

        if body.payment_method == PaymentMethod.BENEFIT:
            profile = profile_repo.get_by_owner(body.owner_id, for_update=True)
            if profile is None:
                raise ProfileNotFoundError(f"No financial profile for owner {body.owner_id}")
            balances = to_benefits(profile.benefits)

        plan = plan_transactions(
            TransactionRequest(
                name=body.name,
                amount=body.amount,
                type=body.type,
                category=body.category,
                payment_method=body.payment_method,
                date=body.date,
                installments=body.installments,
                installment_end_date=body.installment_end_date,
            ),
            balances,
            tables.category_map,
        )

        rows = TransactionRepository(db).create_many(body.owner_id, plan.drafts)
        if plan.benefit_used:
            profile_repo.save_benefits(profile, plan.balances)

        db.commit()

    except InvalidInstallmentPlanError as e:
        db.rollback()
        logging.warning(f"Invalid installment plan: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail={"field": e.field, "message": e.message})

    except BenefitPaymentRejectedError as e:
        db.rollback()
        result = e.result
        record_deduction(result.error.value)
        log_benefit_deduction(request_id, body.owner_id, result.error.value, body.amount, result.remaining, result.shortfall)
        raise HTTPException(
            status_code=409,
            detail={
                "error": result.error.value,
                "message": result.message,
                "remaining": result.remaining,
                "shortfall": result.shortfall,
                "failed_installment": result.failed_index,
            },
        )

    except ProfileNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except InvalidProfileDataError as e:
        db.rollback()
        logging.error(f"Unreadable benefit balances: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Financial profile has invalid benefit data")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    if plan.benefit_used:
        record_deduction("ok")
        log_benefit_deduction(request_id, body.owner_id, "ok", body.amount, plan.remaining)
    record_transactions(len(rows))
    duration_ms = (time.time() - start_time) * 1000
    log_transaction_created(
        request_id, body.owner_id, len(rows), body.amount, plan.benefit_used, plan.remaining, duration_ms
    )

    return TransactionCreateResponse(
        transaction_ids=[str(row.id) for row in rows],
        installment_group_id=plan.drafts[0].installment_group_id,
        count=len(rows),
        benefit_remaining=plan.remaining,
    )


@router.delete("/transactions/{transaction_id}", response_model=DeleteResponse)
def delete_transaction(transaction_id: str, owner_id: str, db: Session = Depends(get_db)):
    """Delete a transaction; an installment takes its whole group along"""
    try:
        transaction_uuid = uuid.UUID(transaction_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid transaction ID format")

    repo = TransactionRepository(db)
    if repo.get(owner_id, transaction_uuid) is None:
        raise HTTPException(status_code=404, detail="Transaction not found")

    deleted = repo.delete_with_group(owner_id, [transaction_uuid])
    db.commit()
    return DeleteResponse(deleted_count=deleted)


@router.post("/transactions/bulk-delete", response_model=DeleteResponse)
def delete_transactions(body: BulkDeleteRequest, db: Session = Depends(get_db)):
    deleted = TransactionRepository(db).delete_with_group(body.owner_id, body.ids)
    if deleted == 0:
        raise HTTPException(status_code=404, detail="No transactions found")
    db.commit()
    return DeleteResponse(deleted_count=deleted)


@router.post("/transactions/classify", response_model=ClassificationSchema)
def classify_transaction(body: ClassifyRequest, tables: EngineTables = Depends(get_engine_tables)):
    flags = classify(
        body.type,
        body.category,
        body.name,
        is_recurring=body.is_recurring,
        is_subscription=body.is_subscription,
        keywords=tables.keywords,
    )
    return ClassificationSchema(**vars(flags))

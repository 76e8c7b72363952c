"""POST /v1/benefits/deduct - spend from a benefit balance"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import BenefitBalanceSchema, BenefitDeductRequest, BenefitDeductResponse
from finance_gateway.api.dependencies import get_engine_tables, get_request_id
from finance_gateway.domain.benefits import deduct
from finance_gateway.domain.exceptions import InvalidProfileDataError
from finance_gateway.domain.models import EngineTables
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.mappers import to_benefits
from finance_gateway.infrastructure.database.repositories import ProfileRepository
from finance_gateway.infrastructure.observability.logging import log_benefit_deduction
from finance_gateway.infrastructure.observability.metrics import record_deduction

router = APIRouter()


@router.post("/benefits/deduct", response_model=BenefitDeductResponse)
def deduct_benefit(
    body: BenefitDeductRequest,
    request: Request,
    db: Session = Depends(get_db),
    tables: EngineTables = Depends(get_engine_tables),
):
    """
    Deduct an amount from the benefit matching the category.

    The profile row stays locked from read to commit. Rejections (not
    eligible, no benefit, insufficient balance) return 409 and leave the
    balances untouched.
    """
    request_id = get_request_id(request)
    repo = ProfileRepository(db)

    profile = repo.get_by_owner(body.owner_id, for_update=True)
    if profile is None:
        db.rollback()
        raise HTTPException(status_code=404, detail="Financial profile not found")

    try:
        balances = to_benefits(profile.benefits)
    except InvalidProfileDataError as e:
        db.rollback()
        logging.error(f"Unreadable benefit balances: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Financial profile has invalid benefit data")

    result = deduct(balances, body.category, body.amount, tables.category_map)

    if not result.ok:
        db.rollback()
        record_deduction(result.error.value)
        log_benefit_deduction(request_id, body.owner_id, result.error.value, body.amount, result.remaining, result.shortfall)
        raise HTTPException(
            status_code=409,
            detail={
                "error": result.error.value,
                "message": result.message,
                "remaining": result.remaining,
                "shortfall": result.shortfall,
            },
        )

    try:
        repo.save_benefits(profile, result.balances)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to persist benefit balances: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_deduction("ok")
    log_benefit_deduction(request_id, body.owner_id, "ok", body.amount, result.remaining)

    return BenefitDeductResponse(
        remaining=result.remaining,
        benefits=[BenefitBalanceSchema(type=b.type, value=b.value) for b in result.balances],
    )

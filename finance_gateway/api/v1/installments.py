"""POST /v1/installments/preview - installment schedule without persisting"""

from fastapi import APIRouter, HTTPException

from finance_gateway.api.v1.schemas import InstallmentPreviewRequest, InstallmentPreviewResponse, InstallmentSchema
from finance_gateway.domain.exceptions import InvalidInstallmentPlanError
from finance_gateway.domain.installments import distribute
from finance_gateway.domain.models import InstallmentPlan

router = APIRouter()


@router.post("/installments/preview", response_model=InstallmentPreviewResponse)
def preview_installments(body: InstallmentPreviewRequest):
    """
    Show how a purchase would be split before creating it.

    Returns:
        Installments with equal amounts spread across the date range
    """
    try:
        installments = distribute(
            InstallmentPlan(
                total_amount=body.total_amount,
                count=body.count,
                start_date=body.start_date,
                end_date=body.end_date,
            )
        )
    except InvalidInstallmentPlanError as e:
        raise HTTPException(status_code=422, detail={"field": e.field, "message": e.message})

    return InstallmentPreviewResponse(
        total_amount=body.total_amount,
        installments=[
            InstallmentSchema(index=inst.index, amount=inst.amount, due_date=inst.due_date)
            for inst in installments
        ],
    )

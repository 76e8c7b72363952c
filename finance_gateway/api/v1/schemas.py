"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, UUID4, model_validator
from datetime import date
from typing import List, Optional

from finance_gateway.domain.installments import MAX_INSTALLMENTS, MIN_INSTALLMENTS
from finance_gateway.domain.models import (
    BenefitType,
    PaymentMethod,
    TransactionCategory,
    TransactionType,
)


class TransactionCreateRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    owner_id: str = Field(..., min_length=1, description="Owner identifier")
    name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, description="Total amount; split equally across installments")
    type: TransactionType
    category: TransactionCategory
    payment_method: PaymentMethod
    date: date
    installments: Optional[int] = Field(None, ge=MIN_INSTALLMENTS, le=MAX_INSTALLMENTS)
    installment_end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_installment_dates(self):
        if self.installments and not self.installment_end_date:
            raise ValueError("installment_end_date is required when installments are set")
        if self.installment_end_date and self.installment_end_date <= self.date:
            raise ValueError("installment_end_date must be after date")
        return self


class TransactionCreateResponse(BaseModel):
    transaction_ids: List[str]
    installment_group_id: Optional[str] = None
    count: int
    benefit_remaining: Optional[float] = None


class BulkDeleteRequest(BaseModel):
    owner_id: str = Field(..., min_length=1)
    ids: List[UUID4] = Field(..., min_length=1)


class DeleteResponse(BaseModel):
    deleted_count: int


class ClassifyRequest(BaseModel):
    """Request body for POST /v1/transactions/classify"""

    type: TransactionType
    category: TransactionCategory
    name: str
    is_recurring: bool = False
    is_subscription: bool = False


class ClassificationSchema(BaseModel):
    is_salary: bool
    is_benefit: bool
    is_variable_income: bool
    is_fixed_expense: bool
    is_variable_expense: bool
    is_investment: bool


class InstallmentPreviewRequest(BaseModel):
    # Bounds are enforced by the domain so callers get the field-level error
    total_amount: float = Field(..., gt=0)
    count: int
    start_date: date
    end_date: date


class InstallmentSchema(BaseModel):
    """Single installment in a plan"""

    index: int
    amount: float
    due_date: date


class InstallmentPreviewResponse(BaseModel):
    total_amount: float
    installments: List[InstallmentSchema]


class BenefitBalanceSchema(BaseModel):
    type: BenefitType
    value: float


class BenefitDeductRequest(BaseModel):
    owner_id: str = Field(..., min_length=1)
    category: TransactionCategory
    amount: float = Field(..., gt=0)


class BenefitDeductResponse(BaseModel):
    remaining: float
    benefits: List[BenefitBalanceSchema]


class MonthlyStatSchema(BaseModel):
    month: int
    year: int
    revenues: float
    costs: float
    profit: float
    stock_value: float


class MonthlyStatsResponse(BaseModel):
    """Response for GET /v1/stats/monthly"""

    owner_id: str
    reference: date
    stats: List[MonthlyStatSchema]


class SpendSoFarResponse(BaseModel):
    owner_id: str
    period: str
    month: int
    year: int
    total: float


class ProjectionResponse(BaseModel):
    """Response for GET /v1/projection"""

    owner_id: str
    source: str  # profile | transactions
    month: str
    income_total: float
    benefits_total: float
    subscriptions_total: float
    expenses_total: float
    recurring_costs_total: float
    projected_balance: float
    percent_committed: float
    goal_suggestion: float


class BreakdownResponse(BaseModel):
    owner_id: str
    month: int
    year: int
    salary: float
    benefits: float
    variable_income: float
    fixed_expenses: float
    variable_expenses: float
    investments: float
    subscriptions: float


class StockSummaryResponse(BaseModel):
    owner_id: str
    total_cost_value: float
    total_sale_value: float
    total_products: int
    low_stock_count: int
    idle_count: int
    oldest_product_days: int
    average_margin: float

"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Union


class Frequency(str, Enum):
    ONCE = "ONCE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    EXPENSE = "EXPENSE"
    INVESTMENT = "INVESTMENT"


class TransactionCategory(str, Enum):
    HOUSING = "HOUSING"
    TRANSPORTATION = "TRANSPORTATION"
    FOOD = "FOOD"
    ENTERTAINMENT = "ENTERTAINMENT"
    HEALTH = "HEALTH"
    UTILITY = "UTILITY"
    SALARY = "SALARY"
    EDUCATION = "EDUCATION"
    OTHER = "OTHER"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    PIX = "PIX"
    BENEFIT = "BENEFIT"
    OTHER = "OTHER"


class BenefitType(str, Enum):
    VA = "VA"  # meal/grocery voucher
    VR = "VR"  # restaurant voucher
    VT = "VT"  # transport voucher
    OUTRO = "OUTRO"


class DeductionError(str, Enum):
    """Business-rule failures of a benefit deduction"""

    INVALID_AMOUNT = "INVALID_AMOUNT"
    CATEGORY_NOT_ELIGIBLE = "CATEGORY_NOT_ELIGIBLE"
    NO_MATCHING_BENEFIT = "NO_MATCHING_BENEFIT"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"


DEFAULT_FIXED_EXPENSE_KEYWORDS: List[str] = [
    "aluguel",
    "rent",
    "financiamento",
    "condomínio",
    "condominio",
    "luz",
    "água",
    "agua",
    "internet",
    "telefone",
    "energia",
    "plano",
    "mensalidade",
    "iptu",
]

DEFAULT_BENEFIT_CATEGORY_MAP: Dict[TransactionCategory, Optional[BenefitType]] = {
    TransactionCategory.FOOD: BenefitType.VR,
    TransactionCategory.TRANSPORTATION: BenefitType.VT,
    TransactionCategory.HOUSING: BenefitType.VA,
    TransactionCategory.ENTERTAINMENT: BenefitType.OUTRO,
    TransactionCategory.HEALTH: BenefitType.OUTRO,
    TransactionCategory.UTILITY: BenefitType.OUTRO,
    TransactionCategory.EDUCATION: BenefitType.OUTRO,
    TransactionCategory.OTHER: BenefitType.OUTRO,
    TransactionCategory.SALARY: None,
}


@dataclass
class EngineTables:
    """Tunable lookup tables injected into the classifier and the benefit ledger"""

    keywords: List[str] = field(default_factory=lambda: list(DEFAULT_FIXED_EXPENSE_KEYWORDS))
    category_map: Dict[TransactionCategory, Optional[BenefitType]] = field(
        default_factory=lambda: dict(DEFAULT_BENEFIT_CATEGORY_MAP)
    )


@dataclass
class RecurringCost:
    """Fixed or one-off cost definition; created_at anchors accrual"""

    amount: float
    # Unrecognised values from storage are kept as raw strings and accrue nothing
    frequency: Union[Frequency, str]
    is_fixed: bool
    is_active: bool
    created_at: date
    name: str = ""


@dataclass
class Transaction:
    """Money movement as seen by the engine"""

    type: TransactionType
    category: TransactionCategory
    amount: float
    name: str
    date: date
    is_subscription_linked: bool = False
    is_recurring_observed: bool = False
    installment_group_id: Optional[str] = None


@dataclass
class Subscription:
    name: str
    amount: float
    active: bool = True
    next_due_date: Optional[date] = None


@dataclass
class BenefitBalance:
    type: BenefitType
    value: float


@dataclass
class StockItem:
    quantity: float
    cost_price: float
    is_active: bool
    created_at: date
    sale_price: float = 0.0
    min_quantity: float = 0.0
    updated_at: Optional[date] = None


@dataclass
class FinancialProfile:
    """Per-owner income figures and benefit balances"""

    fixed_income: float = 0.0
    variable_income_avg: float = 0.0
    benefits: List[BenefitBalance] = field(default_factory=list)
    has_stock: bool = False


@dataclass
class InstallmentPlan:
    total_amount: float
    count: int
    start_date: date
    end_date: date


@dataclass
class Installment:
    """Single payment in an installment plan"""

    index: int
    amount: float
    due_date: date


@dataclass
class Classification:
    is_salary: bool
    is_benefit: bool
    is_variable_income: bool
    is_fixed_expense: bool
    is_variable_expense: bool
    is_investment: bool


@dataclass
class DeductionResult:
    """Outcome of a benefit deduction. On failure `balances` is the untouched input."""

    ok: bool
    balances: List[BenefitBalance]
    remaining: Optional[float] = None
    error: Optional[DeductionError] = None
    shortfall: float = 0.0
    message: str = ""
    failed_index: Optional[int] = None


@dataclass
class MonthlyStat:
    month: int
    year: int
    revenues: float
    costs: float
    profit: float
    stock_value: float


@dataclass
class MonthBreakdown:
    month: int
    year: int
    salary: float = 0.0
    benefits: float = 0.0
    variable_income: float = 0.0
    fixed_expenses: float = 0.0
    variable_expenses: float = 0.0
    investments: float = 0.0
    subscriptions: float = 0.0


@dataclass
class MonthlyProjection:
    month: str  # YYYY-MM
    income_total: float
    benefits_total: float
    subscriptions_total: float
    expenses_total: float
    recurring_costs_total: float
    projected_balance: float
    percent_committed: float
    goal_suggestion: float


@dataclass
class StockSummary:
    total_cost_value: float
    total_sale_value: float
    total_products: int
    low_stock_count: int
    idle_count: int
    oldest_product_days: int
    average_margin: float


@dataclass
class TransactionRequest:
    """Input of the transaction-creation planner"""

    name: str
    amount: float
    type: TransactionType
    category: TransactionCategory
    payment_method: PaymentMethod
    date: date
    installments: Optional[int] = None
    installment_end_date: Optional[date] = None


@dataclass
class TransactionDraft:
    """Transaction ready to be persisted"""

    name: str
    amount: float
    type: TransactionType
    category: TransactionCategory
    payment_method: PaymentMethod
    date: date
    installments: Optional[int] = None
    current_installment: Optional[int] = None
    installment_group_id: Optional[str] = None


@dataclass
class TransactionPlan:
    drafts: List[TransactionDraft]
    balances: List[BenefitBalance]
    remaining: Optional[float] = None
    benefit_used: bool = False

from paimcontab.schemas.account import AccountCreate, AccountResponse
from paimcontab.schemas.company import CompanyCreate, CompanyResponse
from paimcontab.schemas.expense import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseStatsResponse,
    ExpenseUpdate,
)
from paimcontab.schemas.payment import (
    CheckoutSessionCreate,
    CheckoutSessionResponse,
    PaymentProvider,
    WebhookAck,
)
from paimcontab.schemas.plan import PlanResponse
from paimcontab.schemas.revenue import (
    RevenueCreate,
    RevenueResponse,
    RevenueStatsResponse,
    RevenueUpdate,
)
from paimcontab.schemas.subscription import SubscriptionResponse
from paimcontab.schemas.tax_obligation import (
    AutoCalculateResponse,
    DASCalculateRequest,
    DASStatsResponse,
    MarkPaidRequest,
    TaxObligationResponse,
)

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AutoCalculateResponse",
    "CheckoutSessionCreate",
    "CheckoutSessionResponse",
    "CompanyCreate",
    "CompanyResponse",
    "DASCalculateRequest",
    "DASStatsResponse",
    "ExpenseCreate",
    "ExpenseResponse",
    "ExpenseStatsResponse",
    "ExpenseUpdate",
    "MarkPaidRequest",
    "PaymentProvider",
    "PlanResponse",
    "RevenueCreate",
    "RevenueResponse",
    "RevenueStatsResponse",
    "RevenueUpdate",
    "SubscriptionResponse",
    "TaxObligationResponse",
    "WebhookAck",
]

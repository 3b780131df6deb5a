import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from paimcontab.models.expense import ExpenseStatus, PaymentMethod
from paimcontab.models.shared import MAX_AMOUNT
from paimcontab.schemas.ledger import LedgerCategoryTotal, LedgerMonthTotal, LedgerTotal


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    value: Decimal = Field(..., gt=0, lt=MAX_AMOUNT)
    date: datetime.date
    category: str = Field(..., min_length=1, max_length=100)
    supplier: str | None = Field(default=None, max_length=255)
    invoice_number: str | None = Field(default=None, max_length=100)
    payment_method: PaymentMethod = PaymentMethod.PIX
    status: ExpenseStatus = ExpenseStatus.PAID
    is_deductible: bool = True


class ExpenseUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1, max_length=255)
    value: Decimal | None = Field(default=None, gt=0, lt=MAX_AMOUNT)
    date: datetime.date | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    supplier: str | None = Field(default=None, max_length=255)
    invoice_number: str | None = Field(default=None, max_length=100)
    payment_method: PaymentMethod | None = None
    status: ExpenseStatus | None = None
    is_deductible: bool | None = None


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    description: str
    value: Decimal
    date: datetime.date
    category: str
    supplier: str | None = None
    invoice_number: str | None = None
    payment_method: PaymentMethod
    status: ExpenseStatus
    is_deductible: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime


class ExpenseTotals(BaseModel):
    overall: LedgerTotal
    paid: LedgerTotal
    pending: LedgerTotal
    deductible: LedgerTotal


class ExpenseStatsResponse(BaseModel):
    year: int
    totals: ExpenseTotals
    by_month: list[LedgerMonthTotal]
    by_category: list[LedgerCategoryTotal]

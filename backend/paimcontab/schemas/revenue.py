import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from paimcontab.models.revenue import RevenueStatus
from paimcontab.models.shared import MAX_AMOUNT
from paimcontab.schemas.ledger import LedgerCategoryTotal, LedgerMonthTotal, LedgerTotal


class RevenueCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    value: Decimal = Field(..., gt=0, lt=MAX_AMOUNT)
    date: datetime.date
    category: str = Field(..., min_length=1, max_length=100)
    client_name: str | None = Field(default=None, max_length=255)
    payment_method: str | None = Field(default=None, max_length=50)
    status: RevenueStatus = RevenueStatus.RECEIVED


class RevenueUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1, max_length=255)
    value: Decimal | None = Field(default=None, gt=0, lt=MAX_AMOUNT)
    date: datetime.date | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    client_name: str | None = Field(default=None, max_length=255)
    payment_method: str | None = Field(default=None, max_length=50)
    status: RevenueStatus | None = None


class RevenueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    description: str
    value: Decimal
    date: datetime.date
    category: str
    client_name: str | None = None
    payment_method: str | None = None
    status: RevenueStatus
    created_at: datetime.datetime
    updated_at: datetime.datetime


class RevenueTotals(BaseModel):
    overall: LedgerTotal
    received: LedgerTotal
    pending: LedgerTotal


class RevenueStatsResponse(BaseModel):
    year: int
    totals: RevenueTotals
    by_month: list[LedgerMonthTotal]
    by_category: list[LedgerCategoryTotal]

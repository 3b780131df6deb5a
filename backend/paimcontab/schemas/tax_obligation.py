"""TaxObligation (DAS) schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from paimcontab.models.shared import MAX_AMOUNT


class DASCalculateRequest(BaseModel):
    period: str = Field(..., description="Competência in YYYY-MM format")
    custom_revenue: Decimal | None = Field(
        default=None,
        lt=MAX_AMOUNT,
        description="Gross revenue to use instead of the sum of received revenues.",
    )


class MarkPaidRequest(BaseModel):
    payment_date: datetime | None = None


class TaxObligationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    period: str
    gross_revenue: Decimal
    tax_amount: Decimal
    due_date: date
    paid: bool
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class AutoCalculateResponse(BaseModel):
    message: str
    calculations: list[TaxObligationResponse]


class DASTotal(BaseModel):
    tax_amount: Decimal
    count: int


class DASOverallTotal(DASTotal):
    gross_revenue: Decimal


class DASTotals(BaseModel):
    overall: DASOverallTotal
    paid: DASTotal
    pending: DASTotal


class DASAlerts(BaseModel):
    overdue: DASTotal
    due_soon: DASTotal


class DASMonthSummary(BaseModel):
    period: str
    gross_revenue: Decimal
    tax_amount: Decimal
    paid: bool
    due_date: date


class DASStatsResponse(BaseModel):
    year: int
    totals: DASTotals
    alerts: DASAlerts
    by_month: list[DASMonthSummary]

"""Yearly summaries shared by revenue and expense statistics."""

from decimal import Decimal

from pydantic import BaseModel


class LedgerTotal(BaseModel):
    total: Decimal
    count: int


class LedgerMonthTotal(LedgerTotal):
    month: int


class LedgerCategoryTotal(LedgerTotal):
    category: str

"""Yearly revenue and expense statistics for a company."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from paimcontab.models.expense import Expense, ExpenseStatus
from paimcontab.models.revenue import Revenue, RevenueStatus
from paimcontab.repositories.expense_repository import ExpenseRepository
from paimcontab.repositories.revenue_repository import RevenueRepository
from paimcontab.schemas.expense import ExpenseStatsResponse, ExpenseTotals
from paimcontab.schemas.ledger import LedgerCategoryTotal, LedgerMonthTotal, LedgerTotal
from paimcontab.schemas.revenue import RevenueStatsResponse, RevenueTotals

LedgerEntry = Revenue | Expense


def _amount(entry: LedgerEntry) -> Decimal:
    return Decimal(str(entry.value))


def total_of(entries: Sequence[LedgerEntry]) -> LedgerTotal:
    return LedgerTotal(
        total=sum((_amount(e) for e in entries), Decimal("0")),
        count=len(entries),
    )


def totals_by_month(entries: Iterable[LedgerEntry]) -> list[LedgerMonthTotal]:
    """Months with at least one entry, in calendar order."""
    groups: dict[int, list[LedgerEntry]] = defaultdict(list)
    for entry in entries:
        groups[entry.date.month].append(entry)
    return [
        LedgerMonthTotal(month=month, **total_of(items).model_dump())
        for month, items in sorted(groups.items())
    ]


def totals_by_category(entries: Iterable[LedgerEntry]) -> list[LedgerCategoryTotal]:
    """Categories by descending total; ties ordered by name."""
    groups: dict[str, list[LedgerEntry]] = defaultdict(list)
    for entry in entries:
        groups[entry.category].append(entry)
    rows = [
        LedgerCategoryTotal(category=category, **total_of(items).model_dump())
        for category, items in groups.items()
    ]
    return sorted(rows, key=lambda r: (-r.total, r.category))


class LedgerStatsService:
    """Aggregates a company's revenues and expenses over a calendar year."""

    def __init__(self, db: Session):
        self.revenue_repo = RevenueRepository(db)
        self.expense_repo = ExpenseRepository(db)

    def revenue_stats(self, company_id: UUID, year: int) -> RevenueStatsResponse:
        revenues = self.revenue_repo.get_for_year(company_id, year)
        return RevenueStatsResponse(
            year=year,
            totals=RevenueTotals(
                overall=total_of(revenues),
                received=total_of(
                    [r for r in revenues if r.status == RevenueStatus.RECEIVED.value]
                ),
                pending=total_of([r for r in revenues if r.status == RevenueStatus.PENDING.value]),
            ),
            by_month=totals_by_month(revenues),
            by_category=totals_by_category(revenues),
        )

    def expense_stats(self, company_id: UUID, year: int) -> ExpenseStatsResponse:
        expenses = self.expense_repo.get_for_year(company_id, year)
        return ExpenseStatsResponse(
            year=year,
            totals=ExpenseTotals(
                overall=total_of(expenses),
                paid=total_of([e for e in expenses if e.status == ExpenseStatus.PAID.value]),
                pending=total_of([e for e in expenses if e.status == ExpenseStatus.PENDING.value]),
                deductible=total_of([e for e in expenses if e.is_deductible]),
            ),
            by_month=totals_by_month(expenses),
            by_category=totals_by_category(expenses),
        )

"""Service for computing, storing and settling monthly DAS obligations."""

import logging
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from paimcontab.core.config import settings
from paimcontab.core.exceptions import (
    AlreadyPaidError,
    InvalidInputError,
    NotFoundError,
    StorageConflictError,
)
from paimcontab.models.shared import MAX_AMOUNT
from paimcontab.models.tax_obligation import TaxObligation
from paimcontab.repositories.company_repository import CompanyRepository
from paimcontab.repositories.revenue_repository import RevenueRepository
from paimcontab.repositories.tax_obligation_repository import TaxObligationRepository
from paimcontab.schemas.tax_obligation import (
    DASAlerts,
    DASMonthSummary,
    DASOverallTotal,
    DASStatsResponse,
    DASTotal,
    DASTotals,
)
from paimcontab.services.das_calculator import Period, compute_due_date, compute_tax, to_money

logger = logging.getLogger(__name__)


def _as_period(period: Period | str) -> Period:
    return period if isinstance(period, Period) else Period.parse(period)


def _sum_tax(obligations: list[TaxObligation]) -> Decimal:
    return sum((Decimal(str(o.tax_amount)) for o in obligations), Decimal("0"))


class TaxObligationService:
    """Service for the DAS lifecycle of a company.

    Each public write runs in its own transaction on the given session.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = TaxObligationRepository(db)
        self.company_repo = CompanyRepository(db)
        self.revenue_repo = RevenueRepository(db)

    def _require_company(self, company_id: UUID) -> None:
        if self.company_repo.get_by_id(company_id) is None:
            raise NotFoundError("Company", company_id)

    def get_obligation(self, obligation_id: UUID) -> TaxObligation:
        obligation = self.repo.get_by_id(obligation_id)
        if obligation is None:
            raise NotFoundError("Tax obligation", obligation_id)
        return obligation

    def list_obligations(
        self,
        company_id: UUID,
        year: int | None = None,
        paid: bool | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[TaxObligation], int]:
        """Return one page of obligations and the total matching count."""
        items = self.repo.get_all(company_id, year=year, paid=paid, skip=skip, limit=limit)
        return items, self.repo.count(company_id, year=year, paid=paid)

    def upsert_obligation(
        self,
        company_id: UUID,
        period: Period | str,
        gross_revenue: Decimal,
    ) -> TaxObligation:
        """Create or recompute the obligation of ``(company_id, period)``.

        An unpaid obligation is overwritten in place with the recomputed values.
        A paid obligation is returned untouched and nothing is written.

        Raises:
            InvalidInputError: Negative or oversized revenue, or malformed period.
            NotFoundError: Unknown company.
            StorageConflictError: A concurrent request created the same key first.
        """
        period = _as_period(period)
        tax_amount = compute_tax(gross_revenue)
        revenue = to_money(gross_revenue)
        if revenue >= MAX_AMOUNT:
            raise InvalidInputError(f"Gross revenue too large: {revenue}")
        due_date = compute_due_date(period)
        self._require_company(company_id)
        key = str(period)

        try:
            existing = self.repo.get_by_company_period(company_id, key, for_update=True)
            if existing is None:
                obligation = self.repo.add(company_id, key, revenue, tax_amount, due_date)
                self.db.commit()
                self.db.refresh(obligation)
                logger.info(
                    "Created DAS %s for company %s: revenue=%s tax=%s",
                    key,
                    company_id,
                    revenue,
                    tax_amount,
                )
                return obligation

            if existing.paid:
                self.db.rollback()
                logger.info("DAS %s for company %s is paid, keeping stored values", key, company_id)
                return existing

            if not self.repo.update_unpaid(existing.id, revenue, tax_amount, due_date):  # type: ignore[arg-type]
                # Settled between our read and our write.
                self.db.rollback()
                logger.info("DAS %s for company %s was settled concurrently", key, company_id)
                return existing

            self.db.commit()
            self.db.refresh(existing)
            return existing
        except IntegrityError:
            self.db.rollback()
            raise StorageConflictError(
                f"Concurrent write on DAS {key} for company {company_id}"
            ) from None

    def calculate_for_month(
        self,
        company_id: UUID,
        period: Period | str,
        custom_revenue: Decimal | None = None,
    ) -> TaxObligation:
        """Upsert the DAS of a month from a given revenue or the received revenues."""
        period = _as_period(period)
        self._require_company(company_id)
        if custom_revenue is None:
            revenue = self.revenue_repo.total_received(
                company_id, period.first_day(), period.end_exclusive()
            )
        else:
            revenue = custom_revenue
        return self.upsert_obligation(company_id, period, revenue)

    def auto_calculate(self, company_id: UUID, year: int) -> list[TaxObligation]:
        """Upsert the DAS of every month of ``year`` that has received revenue."""
        self._require_company(company_id)
        totals = self.revenue_repo.received_totals_by_period(company_id, year)
        results = [
            self.upsert_obligation(company_id, Period.parse(key), revenue)
            for key, revenue in totals.items()
        ]
        logger.info("Auto-calculated %d DAS for company %s in %d", len(results), company_id, year)
        return results

    def mark_paid(
        self, obligation_id: UUID, payment_date: datetime | None = None
    ) -> TaxObligation:
        """Settle an obligation.

        Raises:
            NotFoundError: Unknown obligation.
            AlreadyPaidError: Obligation already settled; call ``mark_pending`` first.
        """
        obligation = self.repo.get_by_id(obligation_id, for_update=True)
        if obligation is None:
            self.db.rollback()
            raise NotFoundError("Tax obligation", obligation_id)
        if obligation.paid:
            self.db.rollback()
            raise AlreadyPaidError(obligation_id)

        paid_at = payment_date or datetime.now(UTC)
        if not self.repo.set_paid(obligation_id, paid_at):
            self.db.rollback()
            raise AlreadyPaidError(obligation_id)
        self.db.commit()
        self.db.refresh(obligation)
        logger.info("DAS %s marked as paid at %s", obligation_id, paid_at)
        return obligation

    def mark_pending(self, obligation_id: UUID) -> TaxObligation:
        """Reverse a settlement. Idempotent for obligations already pending."""
        obligation = self.repo.get_by_id(obligation_id, for_update=True)
        if obligation is None:
            self.db.rollback()
            raise NotFoundError("Tax obligation", obligation_id)
        self.repo.set_pending(obligation_id)
        self.db.commit()
        self.db.refresh(obligation)
        return obligation

    def get_stats(self, company_id: UUID, year: int, today: date | None = None) -> DASStatsResponse:
        """Yearly totals, overdue and due-soon alerts, and per-month rows."""
        today = today or datetime.now(UTC).date()
        horizon = today + timedelta(days=settings.DAS_DUE_SOON_DAYS)
        obligations = self.repo.get_for_year(company_id, year)

        paid = [o for o in obligations if o.paid]
        pending = [o for o in obligations if not o.paid]
        overdue = [o for o in pending if o.due_date < today]
        due_soon = [o for o in pending if today <= o.due_date <= horizon]

        return DASStatsResponse(
            year=year,
            totals=DASTotals(
                overall=DASOverallTotal(
                    tax_amount=_sum_tax(obligations),
                    gross_revenue=sum(
                        (Decimal(str(o.gross_revenue)) for o in obligations), Decimal("0")
                    ),
                    count=len(obligations),
                ),
                paid=DASTotal(tax_amount=_sum_tax(paid), count=len(paid)),
                pending=DASTotal(tax_amount=_sum_tax(pending), count=len(pending)),
            ),
            alerts=DASAlerts(
                overdue=DASTotal(tax_amount=_sum_tax(overdue), count=len(overdue)),
                due_soon=DASTotal(tax_amount=_sum_tax(due_soon), count=len(due_soon)),
            ),
            by_month=[
                DASMonthSummary(
                    period=str(o.period),
                    gross_revenue=Decimal(str(o.gross_revenue)),
                    tax_amount=Decimal(str(o.tax_amount)),
                    paid=bool(o.paid),
                    due_date=o.due_date,  # type: ignore[arg-type]
                )
                for o in obligations
            ],
        )

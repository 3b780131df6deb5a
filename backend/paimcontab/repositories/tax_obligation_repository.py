"""TaxObligation repository for data access."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from paimcontab.models.tax_obligation import TaxObligation


class TaxObligationRepository:
    """Repository for TaxObligation model.

    Write methods only flush; the calling service owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self, company_id: UUID, year: int | None, paid: bool | None
    ) -> Query[TaxObligation]:
        query = self.db.query(TaxObligation).filter(TaxObligation.company_id == company_id)
        if year is not None:
            query = query.filter(TaxObligation.period.like(f"{year:04d}-%"))
        if paid is not None:
            query = query.filter(TaxObligation.paid.is_(paid))
        return query

    def get_all(
        self,
        company_id: UUID,
        year: int | None = None,
        paid: bool | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[TaxObligation]:
        """Get obligations of a company, most recent period first."""
        return (
            self._filtered(company_id, year, paid)
            .order_by(TaxObligation.period.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, company_id: UUID, year: int | None = None, paid: bool | None = None) -> int:
        query = self.db.query(func.count(TaxObligation.id)).filter(
            TaxObligation.company_id == company_id
        )
        if year is not None:
            query = query.filter(TaxObligation.period.like(f"{year:04d}-%"))
        if paid is not None:
            query = query.filter(TaxObligation.paid.is_(paid))
        return query.scalar() or 0

    def get_for_year(self, company_id: UUID, year: int) -> list[TaxObligation]:
        """Get every obligation of a year in period order."""
        return (
            self._filtered(company_id, year, None)
            .order_by(TaxObligation.period.asc())
            .all()
        )

    def get_by_id(self, obligation_id: UUID, for_update: bool = False) -> TaxObligation | None:
        query = self.db.query(TaxObligation).filter(TaxObligation.id == obligation_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_by_company_period(
        self, company_id: UUID, period: str, for_update: bool = False
    ) -> TaxObligation | None:
        query = self.db.query(TaxObligation).filter(
            TaxObligation.company_id == company_id,
            TaxObligation.period == period,
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def add(
        self,
        company_id: UUID,
        period: str,
        gross_revenue: Decimal,
        tax_amount: Decimal,
        due_date: date,
    ) -> TaxObligation:
        obligation = TaxObligation(
            company_id=company_id,
            period=period,
            gross_revenue=gross_revenue,
            tax_amount=tax_amount,
            due_date=due_date,
            paid=False,
        )
        self.db.add(obligation)
        self.db.flush()
        return obligation

    def _update_where(self, obligation_id: UUID, paid: bool | None, values: dict[Any, Any]) -> bool:
        query = self.db.query(TaxObligation).filter(TaxObligation.id == obligation_id)
        if paid is not None:
            query = query.filter(TaxObligation.paid.is_(paid))
        return int(query.update(values, synchronize_session="fetch")) > 0

    def update_unpaid(
        self,
        obligation_id: UUID,
        gross_revenue: Decimal,
        tax_amount: Decimal,
        due_date: date,
    ) -> bool:
        """Overwrite the financial fields only while the obligation is unpaid.

        Returns False when the row was settled in the meantime.
        """
        return self._update_where(
            obligation_id,
            False,
            {
                TaxObligation.gross_revenue: gross_revenue,
                TaxObligation.tax_amount: tax_amount,
                TaxObligation.due_date: due_date,
            },
        )

    def set_paid(self, obligation_id: UUID, paid_at: datetime) -> bool:
        """Settle an unpaid obligation. Returns False if it was already paid."""
        return self._update_where(
            obligation_id,
            False,
            {TaxObligation.paid: True, TaxObligation.paid_at: paid_at},
        )

    def set_pending(self, obligation_id: UUID) -> bool:
        return self._update_where(
            obligation_id,
            None,
            {TaxObligation.paid: False, TaxObligation.paid_at: None},
        )

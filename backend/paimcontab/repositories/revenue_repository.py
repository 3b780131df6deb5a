from collections import defaultdict
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from paimcontab.models.revenue import Revenue, RevenueStatus
from paimcontab.schemas.revenue import RevenueCreate, RevenueUpdate

# Columns a partial update may not clear.
REQUIRED_FIELDS = frozenset({"description", "value", "date", "category", "status"})


class RevenueRepository:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self,
        company_id: UUID,
        start: date | None,
        end: date | None,
        status: RevenueStatus | None,
        category: str | None,
    ) -> Query[Revenue]:
        query = self.db.query(Revenue).filter(Revenue.company_id == company_id)
        if start is not None:
            query = query.filter(Revenue.date >= start)
        if end is not None:
            query = query.filter(Revenue.date < end)
        if status is not None:
            query = query.filter(Revenue.status == status.value)
        if category is not None:
            query = query.filter(Revenue.category == category)
        return query

    def get_by_id(self, revenue_id: UUID) -> Revenue | None:
        return self.db.query(Revenue).filter(Revenue.id == revenue_id).first()

    def get_all(
        self,
        company_id: UUID,
        start: date | None = None,
        end: date | None = None,
        status: RevenueStatus | None = None,
        category: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Revenue]:
        return (
            self._filtered(company_id, start, end, status, category)
            .order_by(Revenue.date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(
        self,
        company_id: UUID,
        start: date | None = None,
        end: date | None = None,
        status: RevenueStatus | None = None,
        category: str | None = None,
    ) -> int:
        return self._filtered(company_id, start, end, status, category).count()

    def create(self, company_id: UUID, data: RevenueCreate) -> Revenue:
        revenue = Revenue(
            company_id=company_id,
            description=data.description,
            value=data.value,
            date=data.date,
            category=data.category,
            client_name=data.client_name,
            payment_method=data.payment_method,
            status=data.status.value,
        )
        self.db.add(revenue)
        self.db.commit()
        self.db.refresh(revenue)
        return revenue

    def update(self, revenue_id: UUID, data: RevenueUpdate) -> Revenue | None:
        revenue = self.get_by_id(revenue_id)
        if not revenue:
            return None
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is None and key in REQUIRED_FIELDS:
                continue
            if isinstance(value, RevenueStatus):
                value = value.value
            setattr(revenue, key, value)
        self.db.commit()
        self.db.refresh(revenue)
        return revenue

    def delete(self, revenue_id: UUID) -> bool:
        revenue = self.get_by_id(revenue_id)
        if not revenue:
            return False
        self.db.delete(revenue)
        self.db.commit()
        return True

    def get_for_year(self, company_id: UUID, year: int) -> list[Revenue]:
        return (
            self._filtered(company_id, date(year, 1, 1), date(year + 1, 1, 1), None, None)
            .order_by(Revenue.date)
            .all()
        )

    def total_received(self, company_id: UUID, start: date, end: date) -> Decimal:
        """Sum of received revenue in [start, end)."""
        total = (
            self.db.query(func.sum(Revenue.value))
            .filter(
                Revenue.company_id == company_id,
                Revenue.status == RevenueStatus.RECEIVED.value,
                Revenue.date >= start,
                Revenue.date < end,
            )
            .scalar()
        )
        return Decimal(str(total)) if total is not None else Decimal("0")

    def received_totals_by_period(self, company_id: UUID, year: int) -> dict[str, Decimal]:
        """Received revenue of a year grouped by "YYYY-MM", in period order."""
        rows = (
            self.db.query(Revenue.date, Revenue.value)
            .filter(
                Revenue.company_id == company_id,
                Revenue.status == RevenueStatus.RECEIVED.value,
                Revenue.date >= date(year, 1, 1),
                Revenue.date < date(year + 1, 1, 1),
            )
            .all()
        )
        totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        for revenue_date, value in rows:
            totals[f"{revenue_date.year:04d}-{revenue_date.month:02d}"] += Decimal(str(value))
        return dict(sorted(totals.items()))

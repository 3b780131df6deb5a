from datetime import date
from enum import Enum
from uuid import UUID

from sqlalchemy.orm import Query, Session

from paimcontab.models.expense import Expense, ExpenseStatus
from paimcontab.schemas.expense import ExpenseCreate, ExpenseUpdate

# Columns a partial update may not clear.
REQUIRED_FIELDS = frozenset(
    {"description", "value", "date", "category", "payment_method", "status", "is_deductible"}
)


class ExpenseRepository:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self,
        company_id: UUID,
        start: date | None,
        end: date | None,
        status: ExpenseStatus | None,
        category: str | None,
        is_deductible: bool | None,
    ) -> Query[Expense]:
        query = self.db.query(Expense).filter(Expense.company_id == company_id)
        if start is not None:
            query = query.filter(Expense.date >= start)
        if end is not None:
            query = query.filter(Expense.date < end)
        if status is not None:
            query = query.filter(Expense.status == status.value)
        if category is not None:
            query = query.filter(Expense.category == category)
        if is_deductible is not None:
            query = query.filter(Expense.is_deductible == is_deductible)
        return query

    def get_by_id(self, expense_id: UUID) -> Expense | None:
        return self.db.query(Expense).filter(Expense.id == expense_id).first()

    def get_all(
        self,
        company_id: UUID,
        start: date | None = None,
        end: date | None = None,
        status: ExpenseStatus | None = None,
        category: str | None = None,
        is_deductible: bool | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Expense]:
        return (
            self._filtered(company_id, start, end, status, category, is_deductible)
            .order_by(Expense.date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(
        self,
        company_id: UUID,
        start: date | None = None,
        end: date | None = None,
        status: ExpenseStatus | None = None,
        category: str | None = None,
        is_deductible: bool | None = None,
    ) -> int:
        return self._filtered(company_id, start, end, status, category, is_deductible).count()

    def get_for_year(self, company_id: UUID, year: int) -> list[Expense]:
        return (
            self._filtered(company_id, date(year, 1, 1), date(year + 1, 1, 1), None, None, None)
            .order_by(Expense.date)
            .all()
        )

    def create(self, company_id: UUID, data: ExpenseCreate) -> Expense:
        expense = Expense(
            company_id=company_id,
            description=data.description,
            value=data.value,
            date=data.date,
            category=data.category,
            supplier=data.supplier,
            invoice_number=data.invoice_number,
            payment_method=data.payment_method.value,
            status=data.status.value,
            is_deductible=data.is_deductible,
        )
        self.db.add(expense)
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def update(self, expense_id: UUID, data: ExpenseUpdate) -> Expense | None:
        expense = self.get_by_id(expense_id)
        if not expense:
            return None
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is None and key in REQUIRED_FIELDS:
                continue
            if isinstance(value, Enum):
                value = value.value
            setattr(expense, key, value)
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def delete(self, expense_id: UUID) -> bool:
        expense = self.get_by_id(expense_id)
        if not expense:
            return False
        self.db.delete(expense)
        self.db.commit()
        return True

"""Expense (despesa) API endpoints."""

from datetime import UTC, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from paimcontab.core.database import get_db
from paimcontab.models.expense import Expense, ExpenseStatus
from paimcontab.repositories.company_repository import CompanyRepository
from paimcontab.repositories.expense_repository import ExpenseRepository
from paimcontab.routers.revenues import period_bounds
from paimcontab.schemas.expense import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseStatsResponse,
    ExpenseUpdate,
)
from paimcontab.services.ledger_stats import LedgerStatsService

router = APIRouter()


@router.post(
    "/companies/{company_id}/expenses",
    response_model=ExpenseResponse,
    status_code=201,
    summary="Create expense",
    responses={404: {"description": "Company not found"}},
)
async def create_expense(
    company_id: UUID,
    data: ExpenseCreate,
    db: Session = Depends(get_db),
) -> Expense:
    if not CompanyRepository(db).get_by_id(company_id):
        raise HTTPException(status_code=404, detail="Company not found")
    return ExpenseRepository(db).create(company_id, data)


@router.get(
    "/companies/{company_id}/expenses",
    response_model=list[ExpenseResponse],
    summary="List expenses",
)
async def list_expenses(
    company_id: UUID,
    response: Response,
    period: str | None = Query(default=None, description="YYYY-MM"),
    status: ExpenseStatus | None = None,
    category: str | None = None,
    is_deductible: bool | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[Expense]:
    """List a company's expenses, most recent first."""
    start, end = period_bounds(period)
    filters = {
        "start": start,
        "end": end,
        "status": status,
        "category": category,
        "is_deductible": is_deductible,
    }
    repo = ExpenseRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(company_id, **filters))
    return repo.get_all(company_id, skip=skip, limit=limit, **filters)


@router.get(
    "/companies/{company_id}/expenses/stats",
    response_model=ExpenseStatsResponse,
    summary="Expense statistics for a year",
)
async def get_expense_stats(
    company_id: UUID,
    year: int | None = Query(default=None, ge=1, le=9998),
    db: Session = Depends(get_db),
) -> ExpenseStatsResponse:
    return LedgerStatsService(db).expense_stats(company_id, year or datetime.now(UTC).year)


@router.get(
    "/expenses/{expense_id}",
    response_model=ExpenseResponse,
    summary="Get expense",
    responses={404: {"description": "Expense not found"}},
)
async def get_expense(expense_id: UUID, db: Session = Depends(get_db)) -> Expense:
    expense = ExpenseRepository(db).get_by_id(expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@router.put(
    "/expenses/{expense_id}",
    response_model=ExpenseResponse,
    summary="Update expense",
    responses={404: {"description": "Expense not found"}},
)
async def update_expense(
    expense_id: UUID,
    data: ExpenseUpdate,
    db: Session = Depends(get_db),
) -> Expense:
    expense = ExpenseRepository(db).update(expense_id, data)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@router.delete(
    "/expenses/{expense_id}",
    status_code=204,
    summary="Delete expense",
    responses={404: {"description": "Expense not found"}},
)
async def delete_expense(expense_id: UUID, db: Session = Depends(get_db)) -> None:
    if not ExpenseRepository(db).delete(expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")

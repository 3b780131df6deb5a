"""Revenue (receita) API endpoints."""

from datetime import UTC, date, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from paimcontab.core.database import get_db
from paimcontab.core.exceptions import InvalidInputError
from paimcontab.models.revenue import Revenue, RevenueStatus
from paimcontab.repositories.company_repository import CompanyRepository
from paimcontab.repositories.revenue_repository import RevenueRepository
from paimcontab.schemas.revenue import (
    RevenueCreate,
    RevenueResponse,
    RevenueStatsResponse,
    RevenueUpdate,
)
from paimcontab.services.das_calculator import Period
from paimcontab.services.ledger_stats import LedgerStatsService

router = APIRouter()


def period_bounds(period: str | None) -> tuple[date | None, date | None]:
    """Date range [start, end) of a "YYYY-MM" filter; 400 when malformed."""
    if period is None:
        return None, None
    try:
        month = Period.parse(period)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    return month.first_day(), month.end_exclusive()


@router.post(
    "/companies/{company_id}/revenues",
    response_model=RevenueResponse,
    status_code=201,
    summary="Create revenue",
    responses={404: {"description": "Company not found"}},
)
async def create_revenue(
    company_id: UUID,
    data: RevenueCreate,
    db: Session = Depends(get_db),
) -> Revenue:
    if not CompanyRepository(db).get_by_id(company_id):
        raise HTTPException(status_code=404, detail="Company not found")
    return RevenueRepository(db).create(company_id, data)


@router.get(
    "/companies/{company_id}/revenues",
    response_model=list[RevenueResponse],
    summary="List revenues",
)
async def list_revenues(
    company_id: UUID,
    response: Response,
    period: str | None = Query(default=None, description="YYYY-MM"),
    status: RevenueStatus | None = None,
    category: str | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[Revenue]:
    start, end = period_bounds(period)
    repo = RevenueRepository(db)
    response.headers["X-Total-Count"] = str(
        repo.count(company_id, start=start, end=end, status=status, category=category)
    )
    return repo.get_all(
        company_id,
        start=start,
        end=end,
        status=status,
        category=category,
        skip=skip,
        limit=limit,
    )


@router.get(
    "/companies/{company_id}/revenues/stats",
    response_model=RevenueStatsResponse,
    summary="Revenue statistics for a year",
)
async def get_revenue_stats(
    company_id: UUID,
    year: int | None = Query(default=None, ge=1, le=9998),
    db: Session = Depends(get_db),
) -> RevenueStatsResponse:
    """Totals by status, month and category. Canceled entries count only in the overall total."""
    return LedgerStatsService(db).revenue_stats(company_id, year or datetime.now(UTC).year)


@router.get(
    "/revenues/{revenue_id}",
    response_model=RevenueResponse,
    summary="Get revenue",
    responses={404: {"description": "Revenue not found"}},
)
async def get_revenue(revenue_id: UUID, db: Session = Depends(get_db)) -> Revenue:
    revenue = RevenueRepository(db).get_by_id(revenue_id)
    if not revenue:
        raise HTTPException(status_code=404, detail="Revenue not found")
    return revenue


@router.put(
    "/revenues/{revenue_id}",
    response_model=RevenueResponse,
    summary="Update revenue",
    responses={404: {"description": "Revenue not found"}},
)
async def update_revenue(
    revenue_id: UUID,
    data: RevenueUpdate,
    db: Session = Depends(get_db),
) -> Revenue:
    revenue = RevenueRepository(db).update(revenue_id, data)
    if not revenue:
        raise HTTPException(status_code=404, detail="Revenue not found")
    return revenue


@router.delete(
    "/revenues/{revenue_id}",
    status_code=204,
    summary="Delete revenue",
    responses={404: {"description": "Revenue not found"}},
)
async def delete_revenue(revenue_id: UUID, db: Session = Depends(get_db)) -> None:
    if not RevenueRepository(db).delete(revenue_id):
        raise HTTPException(status_code=404, detail="Revenue not found")

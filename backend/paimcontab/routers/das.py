"""DAS (monthly tax obligation) API endpoints."""

from datetime import UTC, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from paimcontab.core.database import get_db
from paimcontab.core.exceptions import (
    AlreadyPaidError,
    InvalidInputError,
    NotFoundError,
    StorageConflictError,
)
from paimcontab.models.tax_obligation import TaxObligation
from paimcontab.schemas.tax_obligation import (
    AutoCalculateResponse,
    DASCalculateRequest,
    DASStatsResponse,
    MarkPaidRequest,
    TaxObligationResponse,
)
from paimcontab.services.tax_obligation_service import TaxObligationService

router = APIRouter()


def _current_year() -> int:
    return datetime.now(UTC).year


@router.get(
    "/companies/{company_id}/das",
    response_model=list[TaxObligationResponse],
    summary="List DAS obligations",
)
async def list_das(
    company_id: UUID,
    response: Response,
    year: int | None = Query(default=None, ge=1, le=9998),
    paid: bool | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[TaxObligation]:
    """List a company's DAS obligations, most recent competência first."""
    service = TaxObligationService(db)
    items, total = service.list_obligations(
        company_id, year=year, paid=paid, skip=skip, limit=limit
    )
    response.headers["X-Total-Count"] = str(total)
    return items


@router.get(
    "/companies/{company_id}/das/stats",
    response_model=DASStatsResponse,
    summary="DAS statistics for a year",
)
async def get_das_stats(
    company_id: UUID,
    year: int | None = Query(default=None, ge=1, le=9998),
    db: Session = Depends(get_db),
) -> DASStatsResponse:
    return TaxObligationService(db).get_stats(company_id, year or _current_year())


@router.post(
    "/companies/{company_id}/das/calculate",
    response_model=TaxObligationResponse,
    summary="Calculate DAS for a month",
    responses={
        400: {"description": "Invalid period or negative revenue"},
        404: {"description": "Company not found"},
        409: {"description": "Concurrent calculation, retry"},
    },
)
async def calculate_das(
    company_id: UUID,
    data: DASCalculateRequest,
    db: Session = Depends(get_db),
) -> TaxObligation:
    """Create or recompute the DAS of a month. Paid obligations are returned unchanged."""
    service = TaxObligationService(db)
    try:
        return service.calculate_for_month(company_id, data.period, data.custom_revenue)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except StorageConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None


@router.post(
    "/companies/{company_id}/das/auto-calculate",
    response_model=AutoCalculateResponse,
    summary="Calculate DAS for every month with received revenue",
    responses={
        404: {"description": "Company not found"},
        409: {"description": "Concurrent calculation, retry"},
    },
)
async def auto_calculate_das(
    company_id: UUID,
    year: int | None = Query(default=None, ge=1, le=9998),
    db: Session = Depends(get_db),
) -> AutoCalculateResponse:
    service = TaxObligationService(db)
    try:
        results = service.auto_calculate(company_id, year or _current_year())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except StorageConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
    return AutoCalculateResponse(
        message=f"{len(results)} DAS calculations processed",
        calculations=[TaxObligationResponse.model_validate(r) for r in results],
    )


@router.get(
    "/das/{obligation_id}",
    response_model=TaxObligationResponse,
    summary="Get DAS obligation",
    responses={404: {"description": "DAS not found"}},
)
async def get_das(obligation_id: UUID, db: Session = Depends(get_db)) -> TaxObligation:
    try:
        return TaxObligationService(db).get_obligation(obligation_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="DAS not found") from None


@router.patch(
    "/das/{obligation_id}/mark-paid",
    response_model=TaxObligationResponse,
    summary="Mark DAS as paid",
    responses={
        400: {"description": "DAS already paid"},
        404: {"description": "DAS not found"},
    },
)
async def mark_das_paid(
    obligation_id: UUID,
    data: MarkPaidRequest | None = None,
    db: Session = Depends(get_db),
) -> TaxObligation:
    service = TaxObligationService(db)
    try:
        return service.mark_paid(obligation_id, data.payment_date if data else None)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="DAS not found") from None
    except AlreadyPaidError:
        raise HTTPException(status_code=400, detail="DAS is already paid") from None


@router.patch(
    "/das/{obligation_id}/mark-pending",
    response_model=TaxObligationResponse,
    summary="Mark DAS as pending",
    responses={404: {"description": "DAS not found"}},
)
async def mark_das_pending(obligation_id: UUID, db: Session = Depends(get_db)) -> TaxObligation:
    """Undo a payment. Pending obligations stay pending."""
    try:
        return TaxObligationService(db).mark_pending(obligation_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="DAS not found") from None

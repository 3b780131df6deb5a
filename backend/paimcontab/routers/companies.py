"""Company API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from paimcontab.core.database import get_db
from paimcontab.models.company import Company
from paimcontab.repositories.account_repository import AccountRepository
from paimcontab.repositories.company_repository import CompanyRepository
from paimcontab.schemas.company import CompanyCreate, CompanyResponse

router = APIRouter()


@router.post(
    "/",
    response_model=CompanyResponse,
    status_code=201,
    summary="Create company",
    responses={
        404: {"description": "Account not found"},
        409: {"description": "Company with this CNPJ already exists"},
    },
)
async def create_company(data: CompanyCreate, db: Session = Depends(get_db)) -> Company:
    if not AccountRepository(db).get_by_id(data.account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    repo = CompanyRepository(db)
    if data.cnpj and repo.cnpj_exists(data.cnpj):
        raise HTTPException(status_code=409, detail="Company with this CNPJ already exists")
    return repo.create(data)


@router.get(
    "/{company_id}",
    response_model=CompanyResponse,
    summary="Get company",
    responses={404: {"description": "Company not found"}},
)
async def get_company(company_id: UUID, db: Session = Depends(get_db)) -> Company:
    company = CompanyRepository(db).get_by_id(company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company

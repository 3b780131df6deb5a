"""Account API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from paimcontab.core.database import get_db
from paimcontab.models.account import Account
from paimcontab.repositories.account_repository import AccountRepository
from paimcontab.schemas.account import AccountCreate, AccountResponse

router = APIRouter()


@router.post(
    "/",
    response_model=AccountResponse,
    status_code=201,
    summary="Create account",
    responses={409: {"description": "Account with this email already exists"}},
)
async def create_account(data: AccountCreate, db: Session = Depends(get_db)) -> Account:
    repo = AccountRepository(db)
    if repo.email_exists(data.email):
        raise HTTPException(status_code=409, detail="Account with this email already exists")
    return repo.create(data)


@router.get(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Get account",
    responses={404: {"description": "Account not found"}},
)
async def get_account(account_id: UUID, db: Session = Depends(get_db)) -> Account:
    account = AccountRepository(db).get_by_id(account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account

"""Back-office subscription endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from paimcontab.core.database import get_db
from paimcontab.models.subscription import Subscription
from paimcontab.repositories.subscription_repository import SubscriptionRepository
from paimcontab.schemas.subscription import SubscriptionResponse

router = APIRouter()


@router.get("/", response_model=list[SubscriptionResponse], summary="List subscriptions")
async def list_subscriptions(
    response: Response,
    account_id: UUID | None = None,
    active: bool | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[Subscription]:
    repo = SubscriptionRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(account_id=account_id, active=active))
    return repo.get_all(skip=skip, limit=limit, account_id=account_id, active=active)


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    summary="Get subscription",
    responses={404: {"description": "Subscription not found"}},
)
async def get_subscription(subscription_id: UUID, db: Session = Depends(get_db)) -> Subscription:
    subscription = SubscriptionRepository(db).get_by_id(subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.post(
    "/{subscription_id}/cancel",
    response_model=SubscriptionResponse,
    summary="Cancel subscription",
    responses={404: {"description": "Subscription not found"}},
)
async def cancel_subscription(
    subscription_id: UUID, db: Session = Depends(get_db)
) -> Subscription:
    """Deactivate a subscription. The row is kept as history."""
    subscription = SubscriptionRepository(db).cancel(subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from paimcontab.models.subscription import Subscription


class SubscriptionRepository:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, account_id: UUID | None, active: bool | None) -> Query[Subscription]:
        query = self.db.query(Subscription)
        if account_id is not None:
            query = query.filter(Subscription.account_id == account_id)
        if active is not None:
            query = query.filter(Subscription.active.is_(active))
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        account_id: UUID | None = None,
        active: bool | None = None,
    ) -> list[Subscription]:
        return (
            self._filtered(account_id, active)
            .order_by(Subscription.started_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, account_id: UUID | None = None, active: bool | None = None) -> int:
        query = self.db.query(func.count(Subscription.id))
        if account_id is not None:
            query = query.filter(Subscription.account_id == account_id)
        if active is not None:
            query = query.filter(Subscription.active.is_(active))
        return query.scalar() or 0

    def get_by_id(self, subscription_id: UUID) -> Subscription | None:
        return self.db.query(Subscription).filter(Subscription.id == subscription_id).first()

    def get_by_checkout_ref(self, checkout_ref: str) -> Subscription | None:
        return (
            self.db.query(Subscription)
            .filter(Subscription.checkout_ref == checkout_ref)
            .first()
        )

    def deactivate_active_for_account(self, account_id: UUID, ended_at: datetime) -> int:
        """Deactivate the account's active rows in the current transaction. Caller commits."""
        count = (
            self.db.query(Subscription)
            .filter(Subscription.account_id == account_id, Subscription.active.is_(True))
            .update(
                {Subscription.active: False, Subscription.ended_at: ended_at},
                synchronize_session="fetch",
            )
        )
        return int(count)

    def add(
        self,
        account_id: UUID,
        plan_id: str,
        started_at: datetime,
        checkout_ref: str | None = None,
    ) -> Subscription:
        """Stage a new active subscription in the current transaction. Caller commits."""
        subscription = Subscription(
            account_id=account_id,
            plan_id=plan_id,
            active=True,
            started_at=started_at,
            checkout_ref=checkout_ref,
        )
        self.db.add(subscription)
        self.db.flush()
        return subscription

    def cancel(self, subscription_id: UUID) -> Subscription | None:
        """Deactivate a subscription, keeping the row as history."""
        subscription = self.get_by_id(subscription_id)
        if not subscription:
            return None
        if subscription.active:
            subscription.active = False  # type: ignore[assignment]
            subscription.ended_at = datetime.now(UTC)  # type: ignore[assignment]
            self.db.commit()
            self.db.refresh(subscription)
        return subscription

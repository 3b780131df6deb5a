"""Converge subscription state from payment-confirmation events.

Events are delivered at least once. The checkout reference is the idempotency
key: a checkout that was already reconciled returns its subscription without
writing. Deactivating the account's previous subscription and inserting the
new one happen in a single transaction scoped by a lock on the account row.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from paimcontab.core.exceptions import (
    InvalidInputError,
    StorageConflictError,
    UnknownAccountError,
    UnknownPlanError,
)
from paimcontab.models.account import Account
from paimcontab.models.plan import Plan
from paimcontab.models.subscription import Subscription
from paimcontab.repositories.account_repository import AccountRepository
from paimcontab.repositories.plan_repository import PlanRepository
from paimcontab.repositories.subscription_repository import SubscriptionRepository
from paimcontab.services.payment_provider import WebhookResult
from paimcontab.services.plan_catalog import get_catalog_plan

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


class ReconciliationStatus(str, Enum):
    PROCESSED = "processed"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"


@dataclass
class ReconciliationOutcome:
    """What handling one payment event did."""

    status: ReconciliationStatus
    event_type: str
    subscription: Subscription | None = None


class SubscriptionReconciler:
    """Service applying payment confirmations to subscriptions."""

    def __init__(self, db: Session):
        self.db = db
        self.account_repo = AccountRepository(db)
        self.plan_repo = PlanRepository(db)
        self.subscription_repo = SubscriptionRepository(db)

    def _resolve_account(self, account_ref: UUID | str) -> Account:
        """Find and lock the account by id, or by e-mail for string references."""
        account: Account | None = None
        if isinstance(account_ref, UUID):
            account = self.account_repo.get_by_id(account_ref, for_update=True)
        elif account_ref:
            try:
                account = self.account_repo.get_by_id(UUID(account_ref), for_update=True)
            except ValueError:
                if "@" in account_ref:
                    account = self.account_repo.get_by_email(account_ref, for_update=True)
        if account is None:
            raise UnknownAccountError(account_ref)
        return account

    def _resolve_plan(self, plan_id: str) -> Plan:
        plan = self.plan_repo.get_by_id(plan_id)
        if plan is not None:
            return plan

        entry = get_catalog_plan(plan_id)
        if entry is None:
            raise UnknownPlanError(plan_id)

        logger.warning("Plan %s missing from storage, materializing it from the catalog", plan_id)
        return self.plan_repo.add(entry.id, entry.name, entry.price, entry.description)

    def _confirm(
        self, account_ref: UUID | str, plan_id: str, checkout_ref: str
    ) -> tuple[Subscription, bool]:
        if not checkout_ref:
            raise InvalidInputError("A checkout reference is required")

        try:
            account = self._resolve_account(account_ref)
            plan = self._resolve_plan(plan_id)

            existing = self.subscription_repo.get_by_checkout_ref(checkout_ref)
            if existing is not None:
                self.db.rollback()
                logger.info(
                    "Checkout %s already reconciled as subscription %s", checkout_ref, existing.id
                )
                return existing, False

            now = datetime.now(UTC)
            replaced = self.subscription_repo.deactivate_active_for_account(account.id, now)  # type: ignore[arg-type]
            subscription = self.subscription_repo.add(
                account_id=account.id,  # type: ignore[arg-type]
                plan_id=plan.id,  # type: ignore[arg-type]
                started_at=now,
                checkout_ref=checkout_ref,
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            winner = self.subscription_repo.get_by_checkout_ref(checkout_ref)
            if winner is not None:
                logger.info("Checkout %s was reconciled by a concurrent delivery", checkout_ref)
                return winner, False
            raise StorageConflictError(
                f"Concurrent subscription change for account {account_ref}"
            ) from None
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(subscription)
        logger.info(
            "Activated subscription %s (plan %s) for account %s, deactivated %d",
            subscription.id,
            plan_id,
            subscription.account_id,
            replaced,
        )
        return subscription, True

    def confirm_payment(
        self, account_ref: UUID | str, plan_id: str, checkout_ref: str
    ) -> Subscription:
        """Activate ``plan_id`` for the account once per checkout.

        Raises:
            UnknownAccountError: The account cannot be resolved.
            UnknownPlanError: The plan is neither stored nor in the catalog.
            StorageConflictError: A concurrent change won the account's active slot.
        """
        subscription, _ = self._confirm(account_ref, plan_id, checkout_ref)
        return subscription

    def handle_event(self, result: WebhookResult) -> ReconciliationOutcome:
        """Apply a parsed gateway event. Unknown event kinds are ignored."""
        if result.event_type != CHECKOUT_COMPLETED:
            logger.info("Ignoring payment event %s", result.event_type)
            return ReconciliationOutcome(ReconciliationStatus.IGNORED, result.event_type)

        if result.status != "succeeded":
            logger.info(
                "Ignoring checkout %s with status %s", result.provider_checkout_id, result.status
            )
            return ReconciliationOutcome(ReconciliationStatus.IGNORED, result.event_type)

        metadata = result.metadata or {}
        account_ref = metadata.get("account_id")
        if not account_ref:
            raise UnknownAccountError(None)
        plan_id = metadata.get("plan_id")
        if not plan_id:
            raise UnknownPlanError(None)

        subscription, created = self._confirm(
            account_ref, plan_id, result.provider_checkout_id or ""
        )
        status = ReconciliationStatus.PROCESSED if created else ReconciliationStatus.DUPLICATE
        return ReconciliationOutcome(status, result.event_type, subscription)

"""Payment API endpoints: plan listing, checkout and gateway webhooks."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from paimcontab.core.config import settings
from paimcontab.core.database import get_db
from paimcontab.models.account import Account
from paimcontab.models.plan import Plan
from paimcontab.repositories.account_repository import AccountRepository
from paimcontab.repositories.plan_repository import PlanRepository
from paimcontab.schemas.payment import (
    CheckoutSessionCreate,
    CheckoutSessionResponse,
    PaymentProvider,
    WebhookAck,
)
from paimcontab.schemas.plan import PlanResponse
from paimcontab.services.email_service import EmailService
from paimcontab.services.payment_provider import get_payment_provider
from paimcontab.services.plan_catalog import PLAN_CATALOG, get_catalog_plan
from paimcontab.services.subscription_reconciler import (
    ReconciliationStatus,
    SubscriptionReconciler,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _find_account(db: Session, account_ref: str) -> Account | None:
    repo = AccountRepository(db)
    try:
        return repo.get_by_id(UUID(account_ref))
    except ValueError:
        return repo.get_by_email(account_ref) if "@" in account_ref else None


@router.get("/plans", response_model=list[PlanResponse], summary="List plans")
async def list_plans(db: Session = Depends(get_db)) -> list[Plan] | list[PlanResponse]:
    """List purchasable plans. Falls back to the built-in catalog before seeding."""
    plans = PlanRepository(db).get_all()
    if plans:
        return plans
    return [
        PlanResponse(id=p.id, name=p.name, price=p.price, description=p.description)
        for p in sorted(PLAN_CATALOG.values(), key=lambda p: p.price)
    ]


@router.post(
    "/checkout",
    response_model=CheckoutSessionResponse,
    summary="Create checkout session",
    responses={
        404: {"description": "Account or plan not found"},
        500: {"description": "Failed to create checkout session"},
        503: {"description": "Payment provider not configured"},
    },
)
async def create_checkout_session(
    data: CheckoutSessionCreate,
    db: Session = Depends(get_db),
) -> CheckoutSessionResponse:
    """Create a recurring checkout session for a plan.

    The subscription is only activated when the gateway confirms the payment
    through the webhook.
    """
    account = _find_account(db, data.account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")

    plan = PlanRepository(db).get_by_id(data.plan_id) or get_catalog_plan(data.plan_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Plan not found")

    provider_svc = get_payment_provider(data.provider)
    try:
        session = provider_svc.create_checkout_session(
            plan_id=str(plan.id),
            plan_name=str(plan.name),
            plan_description=plan.description,  # type: ignore[arg-type]
            price=plan.price,  # type: ignore[arg-type]
            account_id=str(account.id),
            customer_email=account.email,  # type: ignore[arg-type]
            success_url=f"{settings.FRONTEND_URL}/PaymentSuccess?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{settings.FRONTEND_URL}/PaymentCanceled",
        )
    except ImportError:
        raise HTTPException(
            status_code=503,
            detail="Payment provider not configured",
        ) from None
    except Exception as e:
        logger.exception("Checkout creation failed for account %s", account.id)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create checkout session: {e!s}",
        ) from None

    logger.info(
        "Created %s checkout %s for account %s, plan %s",
        data.provider.value,
        session.provider_checkout_id,
        account.id,
        plan.id,
    )
    return CheckoutSessionResponse(
        checkout_url=session.checkout_url,
        provider_checkout_id=session.provider_checkout_id,
        provider=data.provider.value,
    )


@router.post("/webhook/{provider}", response_model=WebhookAck, summary="Payment webhook")
async def handle_webhook(
    provider: PaymentProvider,
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    db: Session = Depends(get_db),
) -> WebhookAck:
    """Receive a gateway event and reconcile the account's subscription.

    Once the signature and payload are valid the gateway always gets a 200,
    so it stops redelivering; reconciliation failures are logged instead.
    """
    payload = await request.body()

    payment_provider = get_payment_provider(provider)

    signature = stripe_signature or request.headers.get("X-Webhook-Signature", "")
    if not payment_provider.verify_webhook_signature(payload, signature):
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        payload_json = await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid JSON payload") from None

    try:
        result = payment_provider.parse_webhook(payload_json)
    except Exception:
        logger.exception("Failed to parse %s webhook payload", provider.value)
        return WebhookAck(status="error")

    try:
        outcome = SubscriptionReconciler(db).handle_event(result)
    except Exception:
        logger.exception(
            "Failed to reconcile %s event %s (checkout %s)",
            provider.value,
            result.event_type,
            result.provider_checkout_id,
        )
        return WebhookAck(status="error", event_type=result.event_type)

    if outcome.status == ReconciliationStatus.PROCESSED and outcome.subscription is not None:
        try:
            await EmailService().notify_admins_of_subscription(db, outcome.subscription)
        except Exception:
            logger.exception(
                "Failed to send subscription email for %s", outcome.subscription.id
            )

    return WebhookAck(
        status=outcome.status.value,
        event_type=outcome.event_type,
        subscription_id=outcome.subscription.id if outcome.subscription else None,  # type: ignore[arg-type]
    )

"""Payment provider abstraction layer.

Supports Stripe (subscription checkout) and a manual HMAC-signed provider for
offline confirmations.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from paimcontab.core.config import settings
from paimcontab.schemas.payment import PaymentProvider


@dataclass
class CheckoutSession:
    """Checkout session result from provider."""

    provider_checkout_id: str
    checkout_url: str
    expires_at: datetime | None = None


@dataclass
class WebhookResult:
    """Result of parsing a webhook."""

    event_type: str
    provider_checkout_id: str | None = None
    status: str | None = None
    metadata: dict[str, Any] | None = None


def _require_object(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise ValueError(f"Webhook payload must be a JSON object, got {type(payload).__name__}")


class PaymentProviderBase(ABC):
    """Abstract base class for payment providers."""

    @property
    @abstractmethod
    def provider_name(self) -> PaymentProvider:
        """Return the provider enum value."""
        pass  # pragma: no cover

    @abstractmethod
    def create_checkout_session(
        self,
        plan_id: str,
        plan_name: str,
        plan_description: str | None,
        price: Decimal,
        account_id: str,
        customer_email: str | None,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """Create a recurring checkout session for a plan."""
        pass  # pragma: no cover

    @abstractmethod
    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        """Verify the webhook signature."""
        pass  # pragma: no cover

    @abstractmethod
    def parse_webhook(self, payload: dict[str, Any]) -> WebhookResult:
        """Parse a webhook payload and return structured result."""
        pass  # pragma: no cover


class StripeProvider(PaymentProviderBase):
    """Stripe payment provider implementation."""

    def __init__(self, api_key: str | None = None, webhook_secret: str | None = None):
        self.api_key = api_key or settings.stripe_api_key
        self.webhook_secret = webhook_secret or settings.stripe_webhook_secret
        self._stripe: Any = None

    @property
    def stripe(self) -> Any:
        """Lazy-load stripe module."""
        if self._stripe is None:
            import stripe

            stripe.api_key = self.api_key
            self._stripe = stripe
        return self._stripe

    @property
    def provider_name(self) -> PaymentProvider:
        return PaymentProvider.STRIPE

    def create_checkout_session(
        self,
        plan_id: str,
        plan_name: str,
        plan_description: str | None,
        price: Decimal,
        account_id: str,
        customer_email: str | None,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """Create a Stripe Checkout Session in subscription mode."""
        # Stripe uses the smallest currency unit
        unit_amount = int((Decimal(str(price)) * 100).to_integral_value())

        session_params: dict[str, Any] = {
            "payment_method_types": ["card"],
            "mode": "subscription",
            "line_items": [
                {
                    "price_data": {
                        "currency": settings.CHECKOUT_CURRENCY,
                        "product_data": {
                            "name": plan_name,
                            "description": plan_description or f"Plano {plan_name}",
                        },
                        "unit_amount": unit_amount,
                        "recurring": {"interval": "month"},
                    },
                    "quantity": 1,
                }
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": {
                "account_id": account_id,
                "plan_id": plan_id,
            },
        }

        if customer_email:
            session_params["customer_email"] = customer_email

        session = self.stripe.checkout.Session.create(**session_params)

        return CheckoutSession(
            provider_checkout_id=session.id,
            checkout_url=session.url,
            expires_at=datetime.fromtimestamp(session.expires_at, tz=UTC)
            if session.expires_at
            else None,
        )

    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        """Verify Stripe webhook signature."""
        if not self.webhook_secret:
            return False
        try:
            self.stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
            return True
        except (ValueError, self.stripe.SignatureVerificationError):
            return False

    def parse_webhook(self, payload: dict[str, Any]) -> WebhookResult:
        """Parse Stripe webhook payload.

        Only completed checkouts carry subscription state; other event kinds are
        returned with their type alone.
        """
        _require_object(payload)
        event_type = payload.get("type", "")
        data_object = (payload.get("data") or {}).get("object") or {}

        result = WebhookResult(
            event_type=event_type,
            metadata=data_object.get("metadata"),
        )

        if event_type == "checkout.session.completed":
            result.provider_checkout_id = data_object.get("id")
            is_paid = data_object.get("payment_status") == "paid"
            result.status = "succeeded" if is_paid else "pending"

        return result


class ManualProvider(PaymentProviderBase):
    """Manual provider for offline confirmations signed with HMAC-SHA256."""

    @property
    def provider_name(self) -> PaymentProvider:
        return PaymentProvider.MANUAL

    def create_checkout_session(
        self,
        plan_id: str,
        plan_name: str,
        plan_description: str | None,
        price: Decimal,
        account_id: str,
        customer_email: str | None,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """Manual payments have no hosted page; the reference is confirmed later by webhook."""
        stamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S%f")
        return CheckoutSession(
            provider_checkout_id=f"manual_{account_id}_{plan_id}_{stamp}",
            checkout_url="",
        )

    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        if not settings.manual_webhook_secret:
            return False
        expected = hmac.new(
            settings.manual_webhook_secret.encode(),
            payload,
            hashlib.sha256,
        ).hexdigest()
        return hmac.compare_digest(expected, signature)

    def parse_webhook(self, payload: dict[str, Any]) -> WebhookResult:
        _require_object(payload)
        return WebhookResult(
            event_type=payload.get("event_type", "checkout.session.completed"),
            provider_checkout_id=payload.get("checkout_id"),
            status=payload.get("status", "succeeded"),
            metadata=payload.get("metadata"),
        )


def get_payment_provider(provider: PaymentProvider) -> PaymentProviderBase:
    """Get a payment provider instance by type."""
    providers: dict[PaymentProvider, type[PaymentProviderBase]] = {
        PaymentProvider.STRIPE: StripeProvider,
        PaymentProvider.MANUAL: ManualProvider,
    }

    provider_class = providers.get(provider)
    if not provider_class:
        raise ValueError(f"Unsupported payment provider: {provider}")

    return provider_class()

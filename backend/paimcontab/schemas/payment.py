from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class PaymentProvider(str, Enum):
    STRIPE = "stripe"
    MANUAL = "manual"


class CheckoutSessionCreate(BaseModel):
    plan_id: str = Field(..., min_length=1, max_length=50)
    account_id: str = Field(..., min_length=1, description="Account UUID or e-mail")
    provider: PaymentProvider = PaymentProvider.STRIPE


class CheckoutSessionResponse(BaseModel):
    checkout_url: str
    provider_checkout_id: str
    provider: str


class WebhookAck(BaseModel):
    received: bool = True
    status: str
    event_type: str | None = None
    subscription_id: UUID | None = None

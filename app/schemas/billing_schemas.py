from pydantic import BaseModel, Field
from app.core.plans import BillingCycle


class CheckoutSessionRequest(BaseModel):
    """Start a subscription checkout for the admin's restaurant"""

    plan: str = Field(..., pattern="^(basic|professional|enterprise)$")
    billing_cycle: BillingCycle = BillingCycle.MONTHLY


class CheckoutSessionResponse(BaseModel):
    session_id: str
    url: str | None


class WebhookResponse(BaseModel):
    received: bool = True

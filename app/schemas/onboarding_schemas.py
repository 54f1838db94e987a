from pydantic import BaseModel, Field
from app.core.plans import BillingCycle


class SubdomainCheckRequest(BaseModel):
    subdomain: str | None = None


class SubdomainCheckResponse(BaseModel):
    subdomain: str
    available: bool
    reason: str | None = None
    message: str


class EmailCheckRequest(BaseModel):
    email: str | None = None


class EmailCheckResponse(BaseModel):
    available: bool
    reason: str | None = None
    warning: str | None = None
    message: str | None = None
    subdomain: str | None = None


class OnboardingRequest(BaseModel):
    """
    Restaurant details collected by the signup flow.

    The admin identity (id and email) comes from the bearer token, not
    from this body.
    """

    restaurant_name: str = Field(..., min_length=1, max_length=255)
    business_name: str | None = Field(None, max_length=255)
    subdomain: str = Field(..., min_length=1, max_length=63)
    phone: str = Field(..., min_length=1, max_length=50)
    address_line1: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(default="Mexico", min_length=1, max_length=100)
    logo_url: str | None = Field(None, max_length=500)
    plan: str = Field(default="basic", pattern="^(basic|professional|enterprise)$")
    billing_cycle: BillingCycle = BillingCycle.MONTHLY


class OnboardingResponse(BaseModel):
    success: bool = True
    tenant_id: int
    admin_id: str
    subdomain: str
    menu_url: str
    message: str = "Restaurant provisioned successfully"

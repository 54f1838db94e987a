from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from app.models.tenant import SubscriptionStatus, SubscriptionTier


class RestaurantSettingsResponse(BaseModel):
    """Restaurant settings as seen by its own admins"""

    id: int
    restaurant_name: str
    business_name: str | None
    subdomain: str
    custom_domain: str | None
    description: str | None
    phone: str | None
    email: str | None
    address_line1: str | None
    city: str | None
    state: str | None
    postal_code: str | None
    country: str
    timezone: str
    logo_url: str | None
    primary_color: str
    subscription_status: SubscriptionStatus
    subscription_tier: SubscriptionTier
    updated_at: datetime

    model_config = {"from_attributes": True}


class RestaurantSettingsUpdate(BaseModel):
    """Update restaurant settings (subdomain is immutable here)"""

    restaurant_name: str | None = Field(None, min_length=1, max_length=255)
    business_name: str | None = Field(None, max_length=255)
    description: str | None = None
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    address_line1: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    timezone: str | None = Field(None, max_length=64)
    logo_url: str | None = Field(None, max_length=500)
    primary_color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class RestaurantCreate(BaseModel):
    """Super-admin: create a restaurant directly"""

    restaurant_name: str = Field(..., min_length=1, max_length=255)
    business_name: str | None = Field(None, max_length=255)
    subdomain: str = Field(..., min_length=1, max_length=63)
    custom_domain: str | None = Field(None, max_length=253)
    billing_email: EmailStr | None = None
    subscription_tier: SubscriptionTier = SubscriptionTier.TRIAL
    subscription_status: SubscriptionStatus = SubscriptionStatus.TRIALING
    is_active: bool = True


class RestaurantUpdate(RestaurantSettingsUpdate):
    """Super-admin: settings plus lifecycle fields"""

    custom_domain: str | None = Field(None, max_length=253)
    is_active: bool | None = None
    subscription_status: SubscriptionStatus | None = None
    subscription_tier: SubscriptionTier | None = None


class RestaurantResponse(RestaurantSettingsResponse):
    """Restaurant details for super-admins"""

    is_active: bool
    billing_email: str | None
    onboarding_completed: bool
    total_menu_items: int
    total_categories: int
    total_admin_users: int
    created_at: datetime


class RestaurantListResponse(BaseModel):
    restaurants: list[RestaurantResponse]
    total: int


class DashboardStats(BaseModel):
    """Admin dashboard counters for the bound restaurant"""

    restaurant_name: str
    menu_url: str
    subscription_status: SubscriptionStatus
    subscription_tier: SubscriptionTier
    total_categories: int
    total_menu_items: int
    available_menu_items: int
    total_modifier_groups: int
    active_promotions: int

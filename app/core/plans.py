"""Subscription plans: prices, Stripe products and usage limits."""

from enum import Enum as PyEnum

from app.config import settings
from app.core.exceptions import PlanLimitExceededException


class BillingCycle(str, PyEnum):
    MONTHLY = "monthly"
    ANNUAL = "annual"


# Prices in the platform currency (whole units)
PLAN_PRICES = {
    "basic": {BillingCycle.MONTHLY: 169, BillingCycle.ANNUAL: 1623},
    "professional": {BillingCycle.MONTHLY: 229, BillingCycle.ANNUAL: 2199},
    "enterprise": {BillingCycle.MONTHLY: 0, BillingCycle.ANNUAL: 0},
}

PLAN_NAMES = {
    "basic": "Basic",
    "professional": "Plus",
    "enterprise": "Enterprise",
}

# None means unlimited
PLAN_LIMITS = {
    "trial": {"menu_items": 50, "categories": 10, "admin_users": 1},
    "basic": {"menu_items": 100, "categories": 20, "admin_users": 2},
    "professional": {"menu_items": 500, "categories": 50, "admin_users": 10},
    "enterprise": {"menu_items": None, "categories": None, "admin_users": None},
}

SELF_SERVE_PLANS = ("basic", "professional")
ENTERPRISE_CONTACT_MESSAGE = "The Enterprise plan requires a custom setup. Please contact sales."


def get_plan_price(plan: str, cycle: BillingCycle) -> int:
    return PLAN_PRICES[plan][cycle]


def get_product_id(plan: str, cycle: BillingCycle) -> str:
    """Stripe product id configured for the plan, or '' if none."""
    return settings.STRIPE_PRODUCTS.get(f"{plan}_{cycle.value}", "")


def get_limit(tier: str, limit_type: str) -> int | None:
    return PLAN_LIMITS.get(tier, PLAN_LIMITS["trial"])[limit_type]


def ensure_within_limit(tier: str, limit_type: str, current: int) -> None:
    """
    Raises:
        PlanLimitExceededException: If adding one more would exceed the plan
    """
    limit = get_limit(tier, limit_type)
    if limit is not None and current >= limit:
        label = limit_type.replace("_", " ")
        raise PlanLimitExceededException(
            f"Your plan allows up to {limit} {label}. Upgrade your plan to add more."
        )

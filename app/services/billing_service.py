"""Subscription checkout and payment-provider webhook handling."""

import json
import logging
from datetime import datetime, UTC

import stripe
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import (
    NotFoundException,
    UpstreamServiceException,
    ValidationException,
    WebhookSignatureException,
)
from app.core.plans import (
    BillingCycle,
    ENTERPRISE_CONTACT_MESSAGE,
    PLAN_NAMES,
    SELF_SERVE_PLANS,
    get_plan_price,
    get_product_id,
)
from app.models.role import Capability
from app.models.subscription import Subscription
from app.models.tenant import SubscriptionStatus, SubscriptionTier
from app.models.tenant_context import AdminSession
from app.repositories.subscription_repository import SubscriptionRepository
from app.repositories.tenant_repository import TenantRepository
from app.services.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE_SECONDS = 300

# Stripe statuses outside our four states
STRIPE_STATUS_MAP = {
    "trialing": SubscriptionStatus.TRIALING,
    "active": SubscriptionStatus.ACTIVE,
    "past_due": SubscriptionStatus.PAST_DUE,
    "unpaid": SubscriptionStatus.PAST_DUE,
    "incomplete": SubscriptionStatus.PAST_DUE,
    "paused": SubscriptionStatus.PAST_DUE,
    "canceled": SubscriptionStatus.CANCELED,
    "incomplete_expired": SubscriptionStatus.CANCELED,
}


def map_stripe_status(status: str | None) -> SubscriptionStatus:
    return STRIPE_STATUS_MAP.get(status or "", SubscriptionStatus.PAST_DUE)


def _from_timestamp(value: int | None) -> datetime | None:
    return datetime.fromtimestamp(value, UTC) if value else None


def construct_event(payload: bytes, sig_header: str | None, secret: str) -> dict:
    """
    Verify the Stripe-Signature header and parse the event.

    Raises:
        WebhookSignatureException: If the header is missing or does not match
        UpstreamServiceException: If no webhook secret is configured
    """
    if not secret:
        logger.error("STRIPE_WEBHOOK_SECRET is not configured")
        raise UpstreamServiceException("Webhook secret not configured")
    if not sig_header:
        raise WebhookSignatureException("Missing stripe-signature header")

    try:
        body = payload.decode("utf-8")
    except UnicodeDecodeError:
        raise WebhookSignatureException("Invalid webhook payload")

    try:
        stripe.WebhookSignature.verify_header(
            body, sig_header, secret, tolerance=WEBHOOK_TOLERANCE_SECONDS
        )
    except stripe.SignatureVerificationError as e:
        logger.warning("Webhook signature verification failed: %s", e)
        raise WebhookSignatureException("Invalid webhook signature")

    try:
        event = json.loads(body)
    except json.JSONDecodeError:
        raise WebhookSignatureException("Invalid webhook payload")
    if not isinstance(event, dict) or "type" not in event:
        raise WebhookSignatureException("Invalid webhook payload")
    return event


def _invoice_subscription_id(invoice: dict) -> str | None:
    subscription_id = invoice.get("subscription")
    if subscription_id:
        return subscription_id
    # Newer API versions nest it under the invoice parent
    details = (invoice.get("parent") or {}).get("subscription_details") or {}
    return details.get("subscription")


class BillingService:
    """Service for Stripe subscription billing"""

    def __init__(self, db: Session, gateway: PaymentGateway | None = None):
        self.db = db
        self.gateway = gateway
        self.tenant_repo = TenantRepository(db)
        self.subscription_repo = SubscriptionRepository(db)

    def _set_status(self, subscription: Subscription, status: SubscriptionStatus) -> None:
        """Mirror the subscription status onto the tenant"""
        subscription.status = status
        tenant = self.tenant_repo.get_by_id(subscription.tenant_id)
        if tenant:
            tenant.subscription_status = status

    def create_checkout_session(
        self, session: AdminSession, plan: str, billing_cycle: BillingCycle
    ) -> dict:
        """
        Start a subscription checkout for the bound restaurant.

        Reuses the Stripe customer already known for the billing email and
        refreshes its tenant_id metadata; otherwise creates one.

        Raises:
            ForbiddenException: If the role cannot manage billing
            ValidationException: If the plan is not self-serve
            UpstreamServiceException: If Stripe fails
        """
        session.require(Capability.MANAGE_BILLING)
        tenant_id = session.require_tenant()
        if plan not in SELF_SERVE_PLANS:
            raise ValidationException(ENTERPRISE_CONTACT_MESSAGE)

        tenant = self.tenant_repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundException("Restaurant not found")
        email = tenant.billing_email or session.principal.email
        metadata = {"tenant_id": str(tenant.id)}

        subscription = self.subscription_repo.get_by_tenant(tenant.id)
        customer_id = subscription.stripe_customer_id if subscription else None
        if not customer_id:
            customer_id = self.gateway.find_customer_id_by_email(email)
        if customer_id:
            self.gateway.update_customer_metadata(customer_id, metadata)
        else:
            customer_id = self.gateway.create_customer(email, tenant.restaurant_name, metadata)

        price_data = {
            "currency": settings.STRIPE_CURRENCY,
            "unit_amount": get_plan_price(plan, billing_cycle) * 100,
            "recurring": {"interval": "month" if billing_cycle == BillingCycle.MONTHLY else "year"},
        }
        product_id = get_product_id(plan, billing_cycle)
        if product_id:
            price_data["product"] = product_id
        else:
            price_data["product_data"] = {"name": f"{PLAN_NAMES[plan]} plan"}

        checkout = self.gateway.create_checkout_session(
            customer_id=customer_id,
            price_data=price_data,
            trial_period_days=settings.TRIAL_PERIOD_DAYS,
            success_url=f"{settings.FRONTEND_URL}/onboarding/complete?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{settings.FRONTEND_URL}/onboarding/plan",
            metadata={**metadata, "plan": plan, "billing_cycle": billing_cycle.value},
        )

        subscription = self.subscription_repo.get_or_create_for_tenant(tenant.id)
        subscription.stripe_customer_id = customer_id
        subscription.plan = plan
        subscription.billing_cycle = billing_cycle.value
        if subscription.stripe_subscription_id is None:
            self._set_status(subscription, SubscriptionStatus.TRIALING)
        self.subscription_repo.save(subscription)

        logger.info("Checkout session %s created for tenant %s", checkout["id"], tenant.id)
        return {"session_id": checkout["id"], "url": checkout.get("url")}

    def handle_event(self, event: dict) -> None:
        """
        Apply a verified webhook event. Replaying an event converges to the
        same stored state.
        """
        event_type = event.get("type")
        obj = (event.get("data") or {}).get("object") or {}

        if event_type == "checkout.session.completed":
            self._on_checkout_completed(obj)
        elif event_type in ("customer.subscription.created", "customer.subscription.updated"):
            self._on_subscription_changed(obj)
        elif event_type == "customer.subscription.deleted":
            self._update_by_subscription_id(obj.get("id"), SubscriptionStatus.CANCELED)
        elif event_type == "invoice.payment_succeeded":
            self._update_by_subscription_id(_invoice_subscription_id(obj), SubscriptionStatus.ACTIVE)
        elif event_type == "invoice.payment_failed":
            self._update_by_subscription_id(_invoice_subscription_id(obj), SubscriptionStatus.PAST_DUE)
        else:
            logger.info("Unhandled webhook event type: %s", event_type)
            return

        self.db.commit()
        logger.info("Processed webhook event %s (%s)", event.get("id"), event_type)

    def _tenant_id_from_metadata(self, obj: dict) -> int | None:
        raw = (obj.get("metadata") or {}).get("tenant_id")
        try:
            tenant_id = int(raw)
        except (TypeError, ValueError):
            return None
        return tenant_id if self.tenant_repo.get_by_id(tenant_id) else None

    def _on_checkout_completed(self, checkout: dict) -> None:
        tenant_id = self._tenant_id_from_metadata(checkout)
        if tenant_id is None:
            logger.warning("Checkout session %s has no known tenant_id", checkout.get("id"))
            return

        subscription = self.subscription_repo.get_or_create_for_tenant(tenant_id)
        stripe_subscription_id = checkout.get("subscription")
        if checkout.get("customer"):
            subscription.stripe_customer_id = checkout["customer"]
        if stripe_subscription_id and subscription.stripe_subscription_id != stripe_subscription_id:
            subscription.stripe_subscription_id = stripe_subscription_id
            self._set_status(subscription, SubscriptionStatus.TRIALING)

    def _on_subscription_changed(self, data: dict) -> None:
        subscription = None
        tenant_id = self._tenant_id_from_metadata(data)
        if tenant_id is not None:
            subscription = self.subscription_repo.get_or_create_for_tenant(tenant_id)
        elif data.get("id"):
            subscription = self.subscription_repo.get_by_stripe_subscription_id(data["id"])
        if subscription is None:
            logger.warning("Subscription %s does not match any tenant", data.get("id"))
            return

        metadata = data.get("metadata") or {}
        subscription.stripe_subscription_id = data.get("id")
        subscription.stripe_customer_id = data.get("customer") or subscription.stripe_customer_id
        subscription.plan = metadata.get("plan") or subscription.plan or "basic"
        subscription.billing_cycle = metadata.get("billing_cycle") or subscription.billing_cycle
        subscription.current_period_start = _from_timestamp(data.get("current_period_start"))
        subscription.current_period_end = _from_timestamp(data.get("current_period_end"))
        subscription.cancel_at_period_end = bool(data.get("cancel_at_period_end"))
        subscription.trial_ends_at = _from_timestamp(data.get("trial_end"))
        self._set_status(subscription, map_stripe_status(data.get("status")))

        tenant = self.tenant_repo.get_by_id(subscription.tenant_id)
        if tenant and subscription.plan in SELF_SERVE_PLANS:
            tenant.subscription_tier = SubscriptionTier(subscription.plan)

    def _update_by_subscription_id(
        self, stripe_subscription_id: str | None, status: SubscriptionStatus
    ) -> None:
        if not stripe_subscription_id:
            return
        subscription = self.subscription_repo.get_by_stripe_subscription_id(stripe_subscription_id)
        if not subscription:
            logger.warning("No subscription found for %s", stripe_subscription_id)
            return
        self._set_status(subscription, status)

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.dependencies import get_admin_session, get_payment_gateway
from app.models.tenant_context import AdminSession
from app.services.billing_service import BillingService, construct_event
from app.services.payment_gateway import PaymentGateway
from app.schemas.billing_schemas import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    WebhookResponse,
)

router = APIRouter()


@router.post("/checkout-session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    data: CheckoutSessionRequest,
    session: AdminSession = Depends(get_admin_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    db: Session = Depends(get_db),
):
    """Start a Stripe subscription checkout for the current restaurant"""
    service = BillingService(db, gateway)
    return service.create_checkout_session(session, data.plan, data.billing_cycle)


@router.post("/webhook", response_model=WebhookResponse)
async def stripe_webhook(request: Request, db: Session = Depends(get_db)):
    """
    Stripe webhook endpoint.

    The raw body is verified against the Stripe-Signature header before
    anything is processed.
    """
    payload = await request.body()
    event = construct_event(
        payload, request.headers.get("stripe-signature"), settings.STRIPE_WEBHOOK_SECRET
    )
    service = BillingService(db)
    service.handle_event(event)
    return WebhookResponse()

"""Narrow interface over the Stripe API used by billing."""

import logging
from abc import ABC, abstractmethod

import stripe

from app.core.exceptions import UpstreamServiceException

logger = logging.getLogger(__name__)


class PaymentGateway(ABC):
    """Operations billing needs from the payment provider"""

    @abstractmethod
    def find_customer_id_by_email(self, email: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def create_customer(self, email: str, name: str, metadata: dict) -> str:
        raise NotImplementedError

    @abstractmethod
    def update_customer_metadata(self, customer_id: str, metadata: dict) -> None:
        raise NotImplementedError

    @abstractmethod
    def create_checkout_session(
        self,
        customer_id: str,
        price_data: dict,
        trial_period_days: int,
        success_url: str,
        cancel_url: str,
        metadata: dict,
    ) -> dict:
        """Returns {"id": ..., "url": ...}"""
        raise NotImplementedError


class StripeGateway(PaymentGateway):
    """
    PaymentGateway backed by the stripe SDK.

    Each call passes api_key explicitly; any StripeError is logged and
    re-raised as UpstreamServiceException.
    """

    def __init__(self, api_key: str):
        self.api_key = api_key

    def _check_configured(self) -> None:
        if not self.api_key:
            raise UpstreamServiceException("Payment provider is not configured")

    def find_customer_id_by_email(self, email: str) -> str | None:
        self._check_configured()
        try:
            customers = stripe.Customer.list(email=email, limit=1, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error("Stripe customer lookup failed: %s", e, exc_info=True)
            raise UpstreamServiceException("Payment provider error")
        return customers.data[0].id if customers.data else None

    def create_customer(self, email: str, name: str, metadata: dict) -> str:
        self._check_configured()
        try:
            customer = stripe.Customer.create(
                email=email, name=name, metadata=metadata, api_key=self.api_key
            )
        except stripe.StripeError as e:
            logger.error("Stripe customer creation failed: %s", e, exc_info=True)
            raise UpstreamServiceException("Payment provider error")
        return customer.id

    def update_customer_metadata(self, customer_id: str, metadata: dict) -> None:
        self._check_configured()
        try:
            stripe.Customer.modify(customer_id, metadata=metadata, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error("Stripe customer update failed: %s", e, exc_info=True)
            raise UpstreamServiceException("Payment provider error")

    def create_checkout_session(
        self,
        customer_id: str,
        price_data: dict,
        trial_period_days: int,
        success_url: str,
        cancel_url: str,
        metadata: dict,
    ) -> dict:
        self._check_configured()
        try:
            session = stripe.checkout.Session.create(
                customer=customer_id,
                mode="subscription",
                payment_method_types=["card"],
                line_items=[{"price_data": price_data, "quantity": 1}],
                subscription_data={"trial_period_days": trial_period_days, "metadata": metadata},
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe checkout session creation failed: %s", e, exc_info=True)
            raise UpstreamServiceException("Payment provider error")
        return {"id": session.id, "url": session.url}

from sqlalchemy.orm import Session
from app.models.subscription import Subscription


class SubscriptionRepository:
    """Repository for Subscription model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_tenant(self, tenant_id: int) -> Subscription | None:
        return self.db.query(Subscription).filter(Subscription.tenant_id == tenant_id).first()

    def get_by_stripe_subscription_id(self, stripe_subscription_id: str) -> Subscription | None:
        return (
            self.db.query(Subscription)
            .filter(Subscription.stripe_subscription_id == stripe_subscription_id)
            .first()
        )

    def get_by_stripe_customer_id(self, stripe_customer_id: str) -> Subscription | None:
        return (
            self.db.query(Subscription)
            .filter(Subscription.stripe_customer_id == stripe_customer_id)
            .first()
        )

    def get_or_create_for_tenant(self, tenant_id: int) -> Subscription:
        """
        Return the tenant's subscription row, adding a new one to the session
        if none exists. Does not commit.
        """
        subscription = self.get_by_tenant(tenant_id)
        if not subscription:
            subscription = Subscription(tenant_id=tenant_id)
            self.db.add(subscription)
        return subscription

    def save(self, subscription: Subscription) -> Subscription:
        self.db.add(subscription)
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

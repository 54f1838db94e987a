"""Tenant (restaurant) model for multi-tenant isolation."""

from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import String, Integer, Boolean, DateTime, Text, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.admin_user import AdminUser
    from app.models.subscription import Subscription


class SubscriptionStatus(str, PyEnum):
    """Subscription lifecycle states mirrored from the payment provider"""

    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


# Only these statuses make a restaurant publicly servable
SERVABLE_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING)


class SubscriptionTier(str, PyEnum):
    TRIAL = "trial"
    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class Tenant(Base, TimestampMixin):
    """
    One restaurant account and its isolated data partition.

    Routed by a unique subdomain under the platform domain, or by an
    optional custom domain. Soft-deleted tenants (deleted_at set) are
    excluded from every normal query; the partial unique indexes below only
    cover non-deleted rows so a released subdomain can be claimed again.

    Usage counters back plan-limit enforcement and are maintained by the
    services that create and delete menu data.
    """

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    restaurant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subdomain: Mapped[str] = mapped_column(String(63), nullable=False, index=True)
    custom_domain: Mapped[str | None] = mapped_column(String(253), nullable=True, index=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    subscription_status: Mapped[SubscriptionStatus] = mapped_column(
        Enum(SubscriptionStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=SubscriptionStatus.TRIALING,
    )
    subscription_tier: Mapped[SubscriptionTier] = mapped_column(
        Enum(SubscriptionTier, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=SubscriptionTier.TRIAL,
    )
    billing_email: Mapped[str | None] = mapped_column(String(254), nullable=True, index=True)

    # Storefront details
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    address_line1: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="Mexico")
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="America/Mexico_City")
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    primary_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#B0C4DE")
    onboarding_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Plan usage
    total_menu_items: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_categories: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_admin_users: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships (hard delete cascades to all tenant-owned rows)
    admin_users: Mapped[list["AdminUser"]] = relationship(
        "AdminUser", back_populates="tenant", cascade="all, delete-orphan"
    )
    subscription: Mapped["Subscription | None"] = relationship(
        "Subscription", back_populates="tenant", cascade="all, delete-orphan", uselist=False
    )

    __table_args__ = (
        Index(
            "uq_tenants_subdomain_live",
            "subdomain",
            unique=True,
            postgresql_where=deleted_at.is_(None),
            sqlite_where=deleted_at.is_(None),
        ),
        Index(
            "uq_tenants_custom_domain_live",
            "custom_domain",
            unique=True,
            postgresql_where=deleted_at.is_(None),
            sqlite_where=deleted_at.is_(None),
        ),
    )

    @property
    def is_servable(self) -> bool:
        """Whether the public menu may be served for this tenant."""
        return (
            self.is_active
            and self.deleted_at is None
            and self.subscription_status in SERVABLE_STATUSES
        )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, subdomain='{self.subdomain}')>"

"""Self-serve signup: availability checks and restaurant provisioning."""

import logging
from datetime import datetime, timedelta, UTC

from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import ValidationException
from app.core.plans import SELF_SERVE_PLANS, ENTERPRISE_CONTACT_MESSAGE
from app.core.validators import normalize_subdomain, normalize_email, is_reserved_subdomain
from app.models.admin_user import AdminUser
from app.models.menu_category import MenuCategory
from app.models.role import Role
from app.models.subscription import Subscription
from app.models.tenant import Tenant, SubscriptionStatus, SubscriptionTier
from app.repositories.admin_user_repository import AdminUserRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.tenant_repository import TenantRepository
from app.schemas.onboarding_schemas import OnboardingRequest

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (
    ("Beverages", "Coffee"),
    ("Food", "UtensilsCrossed"),
    ("Desserts", "IceCream"),
    ("Specials", "Star"),
)


def menu_url_for(subdomain: str) -> str:
    return f"https://{subdomain}.{settings.PLATFORM_DOMAIN}"


class OnboardingService:
    """Service for restaurant signup"""

    def __init__(self, db: Session):
        self.db = db
        self.tenant_repo = TenantRepository(db)
        self.admin_repo = AdminUserRepository(db)

    def check_subdomain(self, raw_subdomain: str | None) -> dict:
        """
        Check whether a subdomain can be claimed (case-insensitive).

        Raises:
            ValidationException: If the subdomain is malformed
        """
        subdomain = normalize_subdomain(raw_subdomain)

        if is_reserved_subdomain(subdomain):
            return {
                "subdomain": subdomain,
                "available": False,
                "reason": "reserved",
                "message": "This subdomain is reserved for system use",
            }

        if self.tenant_repo.subdomain_exists(subdomain):
            return {
                "subdomain": subdomain,
                "available": False,
                "reason": "taken",
                "message": "This subdomain is already taken",
            }

        return {"subdomain": subdomain, "available": True, "message": "Subdomain is available"}

    def check_email(self, raw_email: str | None) -> dict:
        """
        Check whether an email can start a new signup.

        Raises:
            ValidationException: If the email is malformed
        """
        email = normalize_email(raw_email)

        admin_user = self.admin_repo.get_by_email(email)
        tenant = self.tenant_repo.get_by_billing_email(email)

        if admin_user and tenant:
            return {
                "available": False,
                "reason": "registered",
                "message": "This email already has a restaurant. Please sign in instead.",
                "subdomain": tenant.subdomain,
            }

        if admin_user:
            return {
                "available": True,
                "warning": "incomplete",
                "message": "You started a signup before. Continue to finish setting up your restaurant.",
            }

        return {"available": True}

    def provision(
        self, principal_id: str, raw_email: str | None, data: OnboardingRequest
    ) -> tuple[Tenant, AdminUser]:
        """
        Create a restaurant with its first admin, subscription record and
        default categories.

        Args:
            principal_id: Identity-provider subject of the new admin
            raw_email: Email claim of the new admin
            data: Restaurant details

        Raises:
            ValidationException: If the subdomain or email is unusable, or the
                identity already owns a restaurant
        """
        email = normalize_email(raw_email)
        if data.plan not in SELF_SERVE_PLANS:
            raise ValidationException(ENTERPRISE_CONTACT_MESSAGE)
        availability = self.check_subdomain(data.subdomain)
        if not availability["available"]:
            raise ValidationException(availability["message"])
        subdomain = availability["subdomain"]

        existing_admin = self.admin_repo.get_by_id(principal_id)
        if existing_admin and existing_admin.tenant_id is not None:
            raise ValidationException("This account already has a restaurant")
        email_owner = self.admin_repo.get_by_email(email)
        if email_owner and email_owner.id != principal_id:
            raise ValidationException("This email is already registered")

        logger.info("Provisioning restaurant %r for %s", subdomain, principal_id)

        tenant = Tenant(
            restaurant_name=data.restaurant_name,
            business_name=data.business_name or data.restaurant_name,
            subdomain=subdomain,
            billing_email=email,
            email=email,
            phone=data.phone,
            address_line1=data.address_line1,
            city=data.city,
            state=data.state,
            postal_code=data.postal_code,
            country=data.country,
            logo_url=data.logo_url,
            is_active=True,
            subscription_status=SubscriptionStatus.TRIALING,
            subscription_tier=SubscriptionTier(data.plan),
            onboarding_completed=True,
            total_admin_users=1,
        )
        self.db.add(tenant)
        self.db.flush()

        if existing_admin:
            existing_admin.tenant_id = tenant.id
            existing_admin.email = email
            existing_admin.role = Role.ADMIN
            admin_user = existing_admin
        else:
            admin_user = AdminUser(id=principal_id, email=email, role=Role.ADMIN, tenant_id=tenant.id)
            self.db.add(admin_user)

        self.db.add(
            Subscription(
                tenant_id=tenant.id,
                plan=data.plan,
                billing_cycle=data.billing_cycle.value,
                status=SubscriptionStatus.TRIALING,
                trial_ends_at=datetime.now(UTC) + timedelta(days=settings.TRIAL_PERIOD_DAYS),
            )
        )

        category_repo = CategoryRepository(self.db, tenant.id)
        for position, (name, icon) in enumerate(DEFAULT_CATEGORIES):
            category_repo.add(MenuCategory(name=name, icon=icon, position=position))
        tenant.total_categories = len(DEFAULT_CATEGORIES)

        self.db.commit()
        self.db.refresh(tenant)
        self.db.refresh(admin_user)
        logger.info("Provisioned tenant %s (%s)", tenant.id, subdomain)
        return tenant, admin_user

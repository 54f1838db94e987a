import logging

from sqlalchemy.orm import Session
from app.models.tenant import Tenant
from app.models.role import Capability
from app.models.tenant_context import AdminSession
from app.repositories.tenant_repository import TenantRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.menu_item_repository import MenuItemRepository
from app.repositories.modifier_repository import ModifierGroupRepository
from app.repositories.promotion_repository import PromotionRepository
from app.schemas.tenant_schemas import RestaurantSettingsUpdate, RestaurantCreate, RestaurantUpdate
from app.core.exceptions import NotFoundException, ValidationException
from app.core.validators import (
    normalize_custom_domain,
    normalize_email,
    normalize_subdomain,
    is_reserved_subdomain,
)
from app.services.onboarding_service import menu_url_for
from app.services.menu_qr import menu_qr_png

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = (
    "restaurant_name",
    "business_name",
    "description",
    "phone",
    "email",
    "address_line1",
    "city",
    "state",
    "postal_code",
    "country",
    "timezone",
    "logo_url",
    "primary_color",
)


class TenantService:
    """Service layer for restaurant settings and super-admin restaurant management"""

    def __init__(self, db: Session):
        self.db = db
        self.tenant_repo = TenantRepository(db)

    def _get_tenant(self, tenant_id: int) -> Tenant:
        tenant = self.tenant_repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundException("Restaurant not found")
        return tenant

    def _apply_settings(self, tenant: Tenant, data: RestaurantSettingsUpdate) -> None:
        """Copy provided settings onto the tenant"""
        values = data.model_dump(exclude_unset=True)
        for field in SETTINGS_FIELDS:
            if field in values and values[field] is not None:
                setattr(tenant, field, values[field])

    def _set_custom_domain(self, tenant: Tenant, raw_domain: str | None) -> None:
        """
        Assign or clear the custom domain (super-admins only).

        Raises:
            ValidationException: If the domain is malformed, on the platform
                domain, or already in use
        """
        if not raw_domain:
            tenant.custom_domain = None
            return

        domain = normalize_custom_domain(raw_domain)
        if self.tenant_repo.custom_domain_exists(domain, exclude_id=tenant.id):
            raise ValidationException("This custom domain is already in use")
        tenant.custom_domain = domain

    # Restaurant admins

    def get_settings(self, session: AdminSession) -> Tenant:
        """Get settings of the bound restaurant"""
        return self._get_tenant(session.require_tenant())

    def update_settings(self, session: AdminSession, data: RestaurantSettingsUpdate) -> Tenant:
        """
        Update settings of the bound restaurant.

        Raises:
            ForbiddenException: If the role cannot manage settings
        """
        session.require(Capability.MANAGE_SETTINGS)
        tenant = self._get_tenant(session.require_tenant())
        self._apply_settings(tenant, data)
        return self.tenant_repo.update(tenant)

    def get_dashboard(self, session: AdminSession) -> dict:
        """Counts shown on the admin dashboard of the bound restaurant"""
        tenant_id = session.require_tenant()
        tenant = self._get_tenant(tenant_id)
        items = MenuItemRepository(self.db, tenant_id)

        return {
            "restaurant_name": tenant.restaurant_name,
            "menu_url": menu_url_for(tenant.subdomain),
            "subscription_status": tenant.subscription_status,
            "subscription_tier": tenant.subscription_tier,
            "total_categories": CategoryRepository(self.db, tenant_id).count(),
            "total_menu_items": items.count(),
            "available_menu_items": items.count(available_only=True),
            "total_modifier_groups": ModifierGroupRepository(self.db, tenant_id).count(),
            "active_promotions": PromotionRepository(self.db, tenant_id).count_active(),
        }

    def get_menu_qr(self, session: AdminSession) -> tuple[str, bytes]:
        """Subdomain and PNG QR code of the bound restaurant's public menu"""
        tenant = self._get_tenant(session.require_tenant())
        return tenant.subdomain, menu_qr_png(menu_url_for(tenant.subdomain))

    # Super-admins (callers verify super-admin status first)

    def list_restaurants(self) -> list[Tenant]:
        return self.tenant_repo.get_all()

    def get_restaurant(self, tenant_id: int) -> Tenant:
        return self._get_tenant(tenant_id)

    def create_restaurant(self, data: RestaurantCreate) -> Tenant:
        """
        Create a restaurant without the signup flow.

        Raises:
            ValidationException: If the subdomain is malformed, reserved or taken
        """
        subdomain = normalize_subdomain(data.subdomain)
        if is_reserved_subdomain(subdomain):
            raise ValidationException("This subdomain is reserved for system use")
        if self.tenant_repo.subdomain_exists(subdomain):
            raise ValidationException("This subdomain is already taken")

        custom_domain = None
        if data.custom_domain:
            custom_domain = normalize_custom_domain(data.custom_domain)
            if self.tenant_repo.custom_domain_exists(custom_domain):
                raise ValidationException("This custom domain is already in use")

        tenant = Tenant(
            restaurant_name=data.restaurant_name,
            business_name=data.business_name or data.restaurant_name,
            subdomain=subdomain,
            custom_domain=custom_domain,
            billing_email=normalize_email(data.billing_email) if data.billing_email else None,
            subscription_tier=data.subscription_tier,
            subscription_status=data.subscription_status,
            is_active=data.is_active,
        )
        tenant = self.tenant_repo.create(tenant)
        logger.info("Super admin created tenant %s (%s)", tenant.id, subdomain)
        return tenant

    def update_restaurant(self, tenant_id: int, data: RestaurantUpdate) -> Tenant:
        tenant = self._get_tenant(tenant_id)
        self._apply_settings(tenant, data)
        if "custom_domain" in data.model_fields_set:
            self._set_custom_domain(tenant, data.custom_domain)

        if data.is_active is not None:
            tenant.is_active = data.is_active
        if data.subscription_status is not None:
            tenant.subscription_status = data.subscription_status
        if data.subscription_tier is not None:
            tenant.subscription_tier = data.subscription_tier

        return self.tenant_repo.update(tenant)

    def soft_delete_restaurant(self, tenant_id: int) -> None:
        """Hide restaurant from every normal query; data is retained"""
        tenant = self._get_tenant(tenant_id)
        self.tenant_repo.soft_delete(tenant)
        logger.info("Tenant %s soft-deleted", tenant_id)

    def hard_delete_restaurant(self, tenant_id: int) -> None:
        """Permanently delete restaurant and all of its data"""
        tenant = self.tenant_repo.get_including_deleted(tenant_id)
        if not tenant:
            raise NotFoundException("Restaurant not found")
        self.tenant_repo.hard_delete(tenant)
        logger.warning("Tenant %s permanently deleted", tenant_id)

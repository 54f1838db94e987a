"""Repository for Tenant model operations."""

from datetime import datetime, UTC

from sqlalchemy import delete
from sqlalchemy.orm import Session, Query

from app.database import apply_tenant_scope
from app.models.tenant import Tenant, SERVABLE_STATUSES
from app.models.menu_item import MenuItem, menu_item_modifier_groups
from app.models.menu_category import MenuCategory
from app.models.modifier_group import ModifierGroup, ModifierOption
from app.models.promotion import PromotionalImage

USAGE_FIELDS = ("total_menu_items", "total_categories", "total_admin_users")


class TenantRepository:
    """Repository for Tenant model operations"""

    def __init__(self, db: Session):
        self.db = db

    def _live(self) -> Query:
        """Non-deleted tenants (every normal query starts here)."""
        return self.db.query(Tenant).filter(Tenant.deleted_at.is_(None))

    def _servable(self) -> Query:
        return self._live().filter(
            Tenant.is_active.is_(True),
            Tenant.subscription_status.in_(SERVABLE_STATUSES),
        )

    def get_by_id(self, tenant_id: int) -> Tenant | None:
        """
        Get non-deleted tenant by ID.

        Args:
            tenant_id: Tenant ID

        Returns:
            Tenant object or None if not found or soft-deleted
        """
        return self._live().filter(Tenant.id == tenant_id).first()

    def get_including_deleted(self, tenant_id: int) -> Tenant | None:
        """Get tenant by ID even if soft-deleted (permanent deletion only)."""
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def get_servable_by_id(self, tenant_id: int) -> Tenant | None:
        return self._servable().filter(Tenant.id == tenant_id).first()

    def get_servable_by_subdomain(self, subdomain: str) -> Tenant | None:
        """
        Get a publicly servable tenant by subdomain (case-insensitive).

        Returns None for inactive, unpaid or soft-deleted tenants.
        """
        return self._servable().filter(Tenant.subdomain == subdomain.lower()).first()

    def get_servable_by_custom_domain(self, domain: str) -> Tenant | None:
        """Get a publicly servable tenant by exact custom domain."""
        return self._servable().filter(Tenant.custom_domain == domain.lower()).first()

    def get_by_billing_email(self, email: str) -> Tenant | None:
        return self._live().filter(Tenant.billing_email == email.lower()).first()

    def get_all(self) -> list[Tenant]:
        """
        Get all non-deleted tenants, newest first.

        Returns:
            List of Tenant objects
        """
        return self._live().order_by(Tenant.created_at.desc(), Tenant.id.desc()).all()

    def subdomain_exists(self, subdomain: str, exclude_id: int | None = None) -> bool:
        query = self._live().filter(Tenant.subdomain == subdomain.lower())
        if exclude_id is not None:
            query = query.filter(Tenant.id != exclude_id)
        return self.db.query(query.exists()).scalar()

    def custom_domain_exists(self, domain: str, exclude_id: int | None = None) -> bool:
        query = self._live().filter(Tenant.custom_domain == domain.lower())
        if exclude_id is not None:
            query = query.filter(Tenant.id != exclude_id)
        return self.db.query(query.exists()).scalar()

    def create(self, tenant: Tenant) -> Tenant:
        """
        Create a new tenant.

        Args:
            tenant: Tenant object to create

        Returns:
            Created Tenant object with ID populated
        """
        self.db.add(tenant)
        self.db.commit()
        self.db.refresh(tenant)
        return tenant

    def update(self, tenant: Tenant) -> Tenant:
        """
        Update an existing tenant.

        Args:
            tenant: Tenant object with updated fields

        Returns:
            Updated Tenant object
        """
        self.db.commit()
        self.db.refresh(tenant)
        return tenant

    def adjust_usage(self, tenant: Tenant, field: str, delta: int) -> None:
        """
        Move a usage counter by delta, never below zero.

        Does not commit; the caller's unit of work does.
        """
        if field not in USAGE_FIELDS:
            raise ValueError(f"Unknown usage field: {field}")
        setattr(tenant, field, max(0, getattr(tenant, field) + delta))

    def soft_delete(self, tenant: Tenant) -> None:
        """Mark tenant deleted; it disappears from every normal query."""
        tenant.deleted_at = datetime.now(UTC)
        self.db.commit()

    def hard_delete(self, tenant: Tenant) -> None:
        """
        Permanently delete a tenant.

        WARNING: This removes all menu data, promotions, admin users and the
        subscription associated with this tenant.
        """
        tenant_id = tenant.id
        apply_tenant_scope(self.db, tenant_id)
        item_ids = self.db.query(MenuItem.id).filter(MenuItem.tenant_id == tenant_id)
        self.db.execute(
            delete(menu_item_modifier_groups).where(
                menu_item_modifier_groups.c.menu_item_id.in_(item_ids.scalar_subquery())
            )
        )
        for model in (PromotionalImage, ModifierOption, ModifierGroup, MenuItem, MenuCategory):
            self.db.execute(delete(model).where(model.tenant_id == tenant_id))
        self.db.delete(tenant)
        self.db.commit()

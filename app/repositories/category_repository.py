from sqlalchemy.orm import selectinload

from app.models.menu_category import MenuCategory
from app.models.menu_item import MenuItem
from app.repositories.scoped_repository import TenantScopedRepository


class CategoryRepository(TenantScopedRepository[MenuCategory]):
    """Repository for MenuCategory operations with multi-tenant support"""

    model = MenuCategory

    def list_active_with_items(self) -> list[MenuCategory]:
        """Active categories with their items eagerly loaded (public menu)"""
        return (
            self.query()
            .filter(MenuCategory.is_active.is_(True))
            .options(selectinload(MenuCategory.items).selectinload(MenuItem.modifier_groups))
            .order_by(MenuCategory.position, MenuCategory.id)
            .all()
        )

    def count(self) -> int:
        return self.query().count()

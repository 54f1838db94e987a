from app.models.menu_category import MenuCategory
from app.models.menu_item import MenuItem
from app.repositories.scoped_repository import TenantScopedRepository


class MenuItemRepository(TenantScopedRepository[MenuItem]):
    """Repository for MenuItem operations with multi-tenant support"""

    model = MenuItem

    def list_by_category(self, category_id: int | None = None) -> list[MenuItem]:
        """Items of the tenant ordered by category then position"""
        query = self.query()
        if category_id is not None:
            query = query.filter(MenuItem.category_id == category_id)
        return query.order_by(MenuItem.category_id, MenuItem.position, MenuItem.id).all()

    def next_position_in_category(self, category_id: int) -> int:
        last = (
            self.query()
            .filter(MenuItem.category_id == category_id)
            .order_by(MenuItem.position.desc())
            .first()
        )
        return last.position + 1 if last else 0

    def get_available(self, item_id: int) -> MenuItem | None:
        """Item that can be ordered: available and in an active category"""
        return (
            self.query()
            .join(MenuCategory, MenuCategory.id == MenuItem.category_id)
            .filter(
                MenuItem.id == item_id,
                MenuItem.is_available.is_(True),
                MenuCategory.tenant_id == self.tenant_id,
                MenuCategory.is_active.is_(True),
            )
            .first()
        )

    def reorder_in_category(self, category_id: int, ordered_ids: list[int]) -> None:
        self.reorder(ordered_ids, self.query().filter(MenuItem.category_id == category_id))

    def count(self, available_only: bool = False) -> int:
        query = self.query()
        if available_only:
            query = query.filter(MenuItem.is_available.is_(True))
        return query.count()

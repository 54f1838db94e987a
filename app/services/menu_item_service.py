from sqlalchemy.orm import Session
from app.models.menu_item import MenuItem
from app.models.modifier_group import ModifierGroup
from app.models.tenant_context import AdminSession
from app.repositories.category_repository import CategoryRepository
from app.repositories.menu_item_repository import MenuItemRepository
from app.repositories.modifier_repository import ModifierGroupRepository
from app.repositories.tenant_repository import TenantRepository
from app.schemas.menu_item_schemas import MenuItemCreate, MenuItemUpdate, Variant
from app.core.exceptions import NotFoundException
from app.core.plans import ensure_within_limit


def _variants_to_json(variants: list[Variant]) -> list[dict]:
    return [{"name": variant.name, "price": float(variant.price)} for variant in variants]


class MenuItemService:
    """Service for menu item business logic"""

    def __init__(self, db: Session, session: AdminSession):
        self.db = db
        self.tenant_id = session.require_tenant()
        self.repo = MenuItemRepository(db, self.tenant_id)
        self.category_repo = CategoryRepository(db, self.tenant_id)
        self.modifier_repo = ModifierGroupRepository(db, self.tenant_id)
        self.tenant_repo = TenantRepository(db)

    def _check_category(self, category_id: int) -> None:
        if not self.category_repo.get_by_id(category_id):
            raise NotFoundException("Category not found")

    def _resolve_modifier_groups(self, group_ids: list[int]) -> list[ModifierGroup]:
        """
        Load modifier groups of the bound restaurant.

        Raises:
            NotFoundException: If any id is unknown or belongs to another restaurant
        """
        unique_ids = list(dict.fromkeys(group_ids))
        groups = self.modifier_repo.get_many(unique_ids)
        if len(groups) != len(unique_ids):
            raise NotFoundException("Modifier group not found")
        by_id = {group.id: group for group in groups}
        return [by_id[group_id] for group_id in unique_ids]

    def list_menu_items(self, category_id: int | None = None) -> list[MenuItem]:
        return self.repo.list_by_category(category_id)

    def get_menu_item(self, item_id: int) -> MenuItem:
        """
        Get menu item within the bound restaurant.

        Raises:
            NotFoundException: If item not found or belongs to another restaurant
        """
        item = self.repo.get_by_id(item_id)
        if not item:
            raise NotFoundException("Menu item not found")
        return item

    def create_menu_item(self, data: MenuItemCreate) -> MenuItem:
        """
        Create item at the end of its category.

        Raises:
            NotFoundException: If the category or a modifier group is not the restaurant's
            PlanLimitExceededException: If the plan's menu item limit is reached
        """
        tenant = self.tenant_repo.get_by_id(self.tenant_id)
        if not tenant:
            raise NotFoundException("Restaurant not found")
        self._check_category(data.category_id)
        modifier_groups = self._resolve_modifier_groups(data.modifier_group_ids)
        ensure_within_limit(tenant.subscription_tier.value, "menu_items", self.repo.count())

        item = MenuItem(
            category_id=data.category_id,
            name=data.name,
            description=data.description,
            price=data.price,
            image_url=data.image_url,
            tags=data.tags,
            portion=data.portion,
            variants=_variants_to_json(data.variants),
            is_available=data.is_available,
            position=self.repo.next_position_in_category(data.category_id),
        )
        item.modifier_groups = modifier_groups
        self.repo.add(item)
        self.tenant_repo.adjust_usage(tenant, "total_menu_items", 1)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_menu_item(self, item_id: int, data: MenuItemUpdate) -> MenuItem:
        """Update item; moving it to another category appends it there"""
        item = self.get_menu_item(item_id)

        if data.category_id is not None and data.category_id != item.category_id:
            self._check_category(data.category_id)
            item.position = self.repo.next_position_in_category(data.category_id)
            item.category_id = data.category_id
        if data.name is not None:
            item.name = data.name
        if data.description is not None:
            item.description = data.description
        if data.price is not None:
            item.price = data.price
        if data.image_url is not None:
            item.image_url = data.image_url
        if data.tags is not None:
            item.tags = data.tags
        if data.portion is not None:
            item.portion = data.portion
        if data.variants is not None:
            item.variants = _variants_to_json(data.variants)
        if data.is_available is not None:
            item.is_available = data.is_available

        return self.repo.update(item)

    def delete_menu_item(self, item_id: int) -> None:
        item = self.get_menu_item(item_id)
        tenant = self.tenant_repo.get_by_id(self.tenant_id)
        if tenant:
            self.tenant_repo.adjust_usage(tenant, "total_menu_items", -1)
        self.repo.delete(item)

    def toggle_availability(self, item_id: int) -> MenuItem:
        item = self.get_menu_item(item_id)
        item.is_available = not item.is_available
        return self.repo.update(item)

    def reorder_menu_items(self, category_id: int, ordered_ids: list[int]) -> list[MenuItem]:
        self._check_category(category_id)
        self.repo.reorder_in_category(category_id, ordered_ids)
        return self.repo.list_by_category(category_id)

    def set_modifier_groups(self, item_id: int, group_ids: list[int]) -> MenuItem:
        """Replace the modifier groups attached to an item"""
        item = self.get_menu_item(item_id)
        item.modifier_groups = self._resolve_modifier_groups(group_ids)
        return self.repo.update(item)

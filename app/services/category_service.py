from sqlalchemy.orm import Session
from app.models.menu_category import MenuCategory
from app.models.tenant_context import AdminSession
from app.repositories.category_repository import CategoryRepository
from app.repositories.tenant_repository import TenantRepository
from app.schemas.category_schemas import CategoryCreate, CategoryUpdate
from app.core.exceptions import NotFoundException
from app.core.plans import ensure_within_limit


class CategoryService:
    """Service for menu category business logic"""

    def __init__(self, db: Session, session: AdminSession):
        self.db = db
        self.tenant_id = session.require_tenant()
        self.repo = CategoryRepository(db, self.tenant_id)
        self.tenant_repo = TenantRepository(db)

    def list_categories(self) -> list[MenuCategory]:
        return self.repo.list_ordered()

    def get_category(self, category_id: int) -> MenuCategory:
        """
        Get category within the bound restaurant.

        Raises:
            NotFoundException: If category not found or belongs to another restaurant
        """
        category = self.repo.get_by_id(category_id)
        if not category:
            raise NotFoundException("Category not found")
        return category

    def create_category(self, data: CategoryCreate) -> MenuCategory:
        """
        Create category at the end of the display order.

        Raises:
            PlanLimitExceededException: If the plan's category limit is reached
        """
        tenant = self.tenant_repo.get_by_id(self.tenant_id)
        if not tenant:
            raise NotFoundException("Restaurant not found")
        ensure_within_limit(tenant.subscription_tier.value, "categories", self.repo.count())

        category = MenuCategory(
            name=data.name,
            icon=data.icon,
            is_active=data.is_active,
            position=self.repo.next_position(),
        )
        self.repo.add(category)
        self.tenant_repo.adjust_usage(tenant, "total_categories", 1)
        self.db.commit()
        self.db.refresh(category)
        return category

    def update_category(self, category_id: int, data: CategoryUpdate) -> MenuCategory:
        category = self.get_category(category_id)

        if data.name is not None:
            category.name = data.name
        if data.icon is not None:
            category.icon = data.icon
        if data.is_active is not None:
            category.is_active = data.is_active

        return self.repo.update(category)

    def delete_category(self, category_id: int) -> None:
        """Delete category and all of its menu items (cascade)"""
        category = self.get_category(category_id)
        removed_items = len(category.items)

        tenant = self.tenant_repo.get_by_id(self.tenant_id)
        if tenant:
            self.tenant_repo.adjust_usage(tenant, "total_categories", -1)
            self.tenant_repo.adjust_usage(tenant, "total_menu_items", -removed_items)
        self.repo.delete(category)

    def reorder_categories(self, ordered_ids: list[int]) -> list[MenuCategory]:
        self.repo.reorder(ordered_ids)
        return self.repo.list_ordered()

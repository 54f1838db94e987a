# Import every model so relationships resolve and Base.metadata is complete
from app.models.base import Base
from app.models.tenant import Tenant
from app.models.admin_user import AdminUser
from app.models.subscription import Subscription
from app.models.menu_category import MenuCategory
from app.models.menu_item import MenuItem
from app.models.modifier_group import ModifierGroup, ModifierOption
from app.models.promotion import PromotionalImage

__all__ = [
    "Base",
    "Tenant",
    "AdminUser",
    "Subscription",
    "MenuCategory",
    "MenuItem",
    "ModifierGroup",
    "ModifierOption",
    "PromotionalImage",
]

from sqlalchemy import String, Integer, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin, TenantOwnedMixin

if TYPE_CHECKING:
    from app.models.menu_item import MenuItem


class MenuCategory(Base, TimestampMixin, TenantOwnedMixin):
    """Menu section (e.g. Beverages) owned by one tenant"""

    __tablename__ = "menu_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    icon: Mapped[str] = mapped_column(String(100), nullable=False, default="UtensilsCrossed")
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    items: Mapped[list["MenuItem"]] = relationship(
        "MenuItem",
        back_populates="category",
        cascade="all, delete-orphan",  # Delete items if category deleted
        order_by="MenuItem.position",
    )

    __table_args__ = (Index("ix_menu_categories_tenant_position", "tenant_id", "position"),)

from decimal import Decimal

from sqlalchemy import (
    String, Integer, Numeric, Boolean, ForeignKey, Text, JSON, Index, Table, Column,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin, TenantOwnedMixin

if TYPE_CHECKING:
    from app.models.menu_category import MenuCategory
    from app.models.modifier_group import ModifierGroup


menu_item_modifier_groups = Table(
    "menu_item_modifier_groups",
    Base.metadata,
    Column(
        "menu_item_id",
        Integer,
        ForeignKey("menu_items.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "modifier_group_id",
        Integer,
        ForeignKey("modifier_groups.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class MenuItem(Base, TimestampMixin, TenantOwnedMixin):
    """
    Orderable product in a category.

    variants is a JSON list of size variants, e.g.
    [{"name": "medium", "price": 55.0}, {"name": "grande", "price": 65.0}];
    a selected variant's price replaces the base price.
    """

    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("menu_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    portion: Mapped[str | None] = mapped_column(String(100), nullable=True)
    variants: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    category: Mapped["MenuCategory"] = relationship("MenuCategory", back_populates="items")
    modifier_groups: Mapped[list["ModifierGroup"]] = relationship(
        "ModifierGroup",
        secondary=menu_item_modifier_groups,
        order_by="ModifierGroup.position",
    )

    __table_args__ = (
        Index("ix_menu_items_tenant_category_position", "tenant_id", "category_id", "position"),
    )

    def variant_price(self, name: str) -> Decimal | None:
        """Price of the named size variant, or None if the item has no such variant."""
        for variant in self.variants or []:
            if variant.get("name") == name:
                return Decimal(str(variant["price"]))
        return None

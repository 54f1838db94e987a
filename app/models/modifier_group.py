from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import String, Integer, Numeric, Boolean, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, TenantOwnedMixin


class ModifierType(str, PyEnum):
    """single = pick one, multiple = pick several, boolean = yes/no"""

    SINGLE = "single"
    MULTIPLE = "multiple"
    BOOLEAN = "boolean"


class ModifierGroup(Base, TimestampMixin, TenantOwnedMixin):
    """Reusable option set (e.g. milk type) assignable to menu items"""

    __tablename__ = "modifier_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[ModifierType] = mapped_column(
        Enum(ModifierType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ModifierType.SINGLE,
    )
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    min_selections: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_selections: Mapped[int | None] = mapped_column(Integer, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    options: Mapped[list["ModifierOption"]] = relationship(
        "ModifierOption",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="ModifierOption.position",
    )


class ModifierOption(Base, TimestampMixin, TenantOwnedMixin):
    """One choice inside a modifier group; price_modifier may be negative"""

    __tablename__ = "modifier_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("modifier_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    price_modifier: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2), nullable=False, default=Decimal("0.00")
    )
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    group: Mapped["ModifierGroup"] = relationship("ModifierGroup", back_populates="options")

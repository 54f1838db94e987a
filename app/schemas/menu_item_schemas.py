from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator


class Variant(BaseModel):
    """Size variant; its price replaces the item's base price"""

    name: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., ge=0, decimal_places=2)


def _unique_variant_names(variants: list[Variant] | None) -> list[Variant] | None:
    if variants is None:
        return variants
    names = [variant.name for variant in variants]
    if len(names) != len(set(names)):
        raise ValueError("Variant names must be unique")
    return variants


class MenuItemCreate(BaseModel):
    """Schema for creating a menu item"""

    category_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(..., ge=0, decimal_places=2)
    image_url: str | None = Field(None, max_length=500)
    tags: list[str] = Field(default_factory=list)
    portion: str | None = Field(None, max_length=100)
    variants: list[Variant] = Field(default_factory=list)
    is_available: bool = True
    modifier_group_ids: list[int] = Field(default_factory=list)

    @field_validator("variants")
    @classmethod
    def check_variants(cls, v):
        return _unique_variant_names(v)


class MenuItemUpdate(BaseModel):
    """Schema for updating a menu item"""

    category_id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0, decimal_places=2)
    image_url: str | None = Field(None, max_length=500)
    tags: list[str] | None = None
    portion: str | None = Field(None, max_length=100)
    variants: list[Variant] | None = None
    is_available: bool | None = None

    @field_validator("variants")
    @classmethod
    def check_variants(cls, v):
        return _unique_variant_names(v)


class ModifierGroupRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class VariantResponse(BaseModel):
    name: str
    price: float


class MenuItemResponse(BaseModel):
    """Schema for menu item response"""

    id: int
    category_id: int
    name: str
    description: str | None
    price: float
    image_url: str | None
    tags: list[str]
    portion: str | None
    variants: list[VariantResponse]
    position: int
    is_available: bool
    modifier_groups: list[ModifierGroupRef]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MenuItemListResponse(BaseModel):
    """Schema for list of menu items"""

    menu_items: list[MenuItemResponse]
    total: int


class MenuItemReorderRequest(BaseModel):
    """Item ids of one category in their new display order"""

    category_id: int
    ordered_ids: list[int] = Field(..., min_length=1)


class ModifierGroupAssignment(BaseModel):
    """Replaces the modifier groups attached to a menu item"""

    modifier_group_ids: list[int]

from datetime import datetime
from pydantic import BaseModel
from app.models.modifier_group import ModifierType
from app.schemas.menu_item_schemas import VariantResponse


class PublicRestaurant(BaseModel):
    """Storefront fields safe to show anonymous visitors"""

    restaurant_name: str
    subdomain: str
    description: str | None
    phone: str | None
    email: str | None
    address_line1: str | None
    city: str | None
    state: str | None
    country: str
    logo_url: str | None
    primary_color: str

    model_config = {"from_attributes": True}


class PublicModifierOption(BaseModel):
    id: int
    label: str
    price_modifier: float
    is_default: bool

    model_config = {"from_attributes": True}


class PublicModifierGroup(BaseModel):
    id: int
    name: str
    type: ModifierType
    required: bool
    min_selections: int
    max_selections: int | None
    options: list[PublicModifierOption]

    model_config = {"from_attributes": True}


class PublicMenuItem(BaseModel):
    id: int
    name: str
    description: str | None
    price: float
    image_url: str | None
    tags: list[str]
    portion: str | None
    variants: list[VariantResponse]
    modifier_groups: list[PublicModifierGroup]


class PublicCategory(BaseModel):
    id: int
    name: str
    icon: str
    items: list[PublicMenuItem]


class MenuResponse(BaseModel):
    restaurant: PublicRestaurant
    detection_method: str
    categories: list[PublicCategory]


class PublicPromotion(BaseModel):
    id: int
    image_url: str
    title: str | None
    description: str | None
    link_url: str | None
    link_menu_item_id: int | None
    end_date: datetime | None

    model_config = {"from_attributes": True}


class PublicPromotionList(BaseModel):
    promotions: list[PublicPromotion]

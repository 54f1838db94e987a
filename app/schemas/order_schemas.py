from pydantic import BaseModel, Field


class ModifierSelection(BaseModel):
    group_id: int
    option_ids: list[int] = Field(default_factory=list)


class OrderLineInput(BaseModel):
    """
    One cart line as sent by the menu page.

    Prices are never taken from the client; they are recomputed from the
    restaurant's menu.
    """

    menu_item_id: int
    quantity: int = Field(default=1, ge=1, le=99)
    size: str | None = Field(None, max_length=50)
    milk: str | None = Field(None, max_length=50)
    sweetener: str | None = Field(None, max_length=50)
    flavor: str | None = Field(None, max_length=50)
    extras: list[str] = Field(default_factory=list)
    modifiers: list[ModifierSelection] = Field(default_factory=list)


class OrderRequest(BaseModel):
    table_number: str = Field(..., min_length=1, max_length=20)
    items: list[OrderLineInput] = Field(..., min_length=1)


class OrderLineResponse(BaseModel):
    menu_item_id: int
    menu_item_name: str
    quantity: int
    unit_price: float
    total_price: float


class OrderResponse(BaseModel):
    success: bool = True
    table_number: str
    lines: list[OrderLineResponse]
    total_items: int
    total_price: float

from datetime import datetime
from pydantic import BaseModel, Field, model_validator


class PromotionCreate(BaseModel):
    """Schema for creating a promotional image"""

    image_url: str = Field(..., min_length=1, max_length=500)
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    link_url: str | None = Field(None, max_length=500)
    link_menu_item_id: int | None = None
    is_active: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None

    @model_validator(mode="after")
    def check_date_window(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class PromotionUpdate(BaseModel):
    """Schema for updating a promotional image"""

    image_url: str | None = Field(None, min_length=1, max_length=500)
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    link_url: str | None = Field(None, max_length=500)
    link_menu_item_id: int | None = None
    is_active: bool | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class PromotionResponse(BaseModel):
    """Schema for promotion response"""

    id: int
    image_url: str
    title: str | None
    description: str | None
    link_url: str | None
    link_menu_item_id: int | None
    position: int
    is_active: bool
    start_date: datetime | None
    end_date: datetime | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PromotionListResponse(BaseModel):
    promotions: list[PromotionResponse]
    total: int

from datetime import datetime
from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    """Schema for creating a menu category"""

    name: str = Field(..., min_length=1, max_length=255)
    icon: str = Field(default="UtensilsCrossed", min_length=1, max_length=100)
    is_active: bool = True


class CategoryUpdate(BaseModel):
    """Schema for updating a menu category"""

    name: str | None = Field(None, min_length=1, max_length=255)
    icon: str | None = Field(None, min_length=1, max_length=100)
    is_active: bool | None = None


class CategoryResponse(BaseModel):
    """Schema for category response"""

    id: int
    name: str
    icon: str
    position: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CategoryListResponse(BaseModel):
    """Schema for list of categories"""

    categories: list[CategoryResponse]
    total: int


class ReorderRequest(BaseModel):
    """Ids in their new display order"""

    ordered_ids: list[int] = Field(..., min_length=1)

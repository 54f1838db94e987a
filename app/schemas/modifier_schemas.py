from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, model_validator
from app.models.modifier_group import ModifierType


class ModifierOptionInput(BaseModel):
    """One option of a modifier group, in display order"""

    label: str = Field(..., min_length=1, max_length=255)
    price_modifier: Decimal = Field(default=Decimal("0.00"), decimal_places=2)
    is_default: bool = False


class ModifierGroupCreate(BaseModel):
    """
    Schema for creating a modifier group with its options.

    Selection bounds must be consistent: min <= max, and single-choice
    groups allow at most one selection.
    """

    name: str = Field(..., min_length=1, max_length=255)
    type: ModifierType = ModifierType.SINGLE
    required: bool = False
    min_selections: int = Field(default=0, ge=0)
    max_selections: int | None = Field(None, ge=1)
    is_active: bool = True
    options: list[ModifierOptionInput] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_selection_bounds(self):
        if self.max_selections is not None and self.min_selections > self.max_selections:
            raise ValueError("min_selections cannot exceed max_selections")
        if self.type != ModifierType.MULTIPLE and (self.max_selections or 1) > 1:
            raise ValueError("Only 'multiple' groups may allow more than one selection")
        return self


class ModifierGroupUpdate(BaseModel):
    """
    Schema for updating a modifier group.

    When options is given it replaces the whole option list.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    type: ModifierType | None = None
    required: bool | None = None
    min_selections: int | None = Field(None, ge=0)
    max_selections: int | None = Field(None, ge=1)
    is_active: bool | None = None
    options: list[ModifierOptionInput] | None = Field(None, min_length=1)


class ModifierOptionResponse(BaseModel):
    id: int
    label: str
    price_modifier: float
    is_default: bool
    position: int

    class Config:
        from_attributes = True


class ModifierGroupResponse(BaseModel):
    """Schema for modifier group response"""

    id: int
    name: str
    type: ModifierType
    required: bool
    min_selections: int
    max_selections: int | None
    position: int
    is_active: bool
    options: list[ModifierOptionResponse]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ModifierGroupListResponse(BaseModel):
    modifier_groups: list[ModifierGroupResponse]
    total: int

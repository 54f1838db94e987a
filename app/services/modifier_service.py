from sqlalchemy import delete
from sqlalchemy.orm import Session
from app.models.menu_item import menu_item_modifier_groups
from app.models.modifier_group import ModifierGroup, ModifierOption, ModifierType
from app.models.tenant_context import AdminSession
from app.repositories.modifier_repository import ModifierGroupRepository
from app.schemas.modifier_schemas import (
    ModifierGroupCreate,
    ModifierGroupUpdate,
    ModifierOptionInput,
)
from app.core.exceptions import NotFoundException, ValidationException


class ModifierService:
    """Service for modifier groups and their options"""

    def __init__(self, db: Session, session: AdminSession):
        self.db = db
        self.tenant_id = session.require_tenant()
        self.repo = ModifierGroupRepository(db, self.tenant_id)

    def _build_options(self, options: list[ModifierOptionInput]) -> list[ModifierOption]:
        # Options carry the group's tenant so they are isolated on their own
        return [
            ModifierOption(
                tenant_id=self.tenant_id,
                label=option.label,
                price_modifier=option.price_modifier,
                is_default=option.is_default,
                position=position,
            )
            for position, option in enumerate(options)
        ]

    def list_modifier_groups(self) -> list[ModifierGroup]:
        return self.repo.list_with_options()

    def get_modifier_group(self, group_id: int) -> ModifierGroup:
        """
        Raises:
            NotFoundException: If group not found or belongs to another restaurant
        """
        group = self.repo.get_by_id(group_id)
        if not group:
            raise NotFoundException("Modifier group not found")
        return group

    def create_modifier_group(self, data: ModifierGroupCreate) -> ModifierGroup:
        group = ModifierGroup(
            name=data.name,
            type=data.type,
            required=data.required,
            min_selections=data.min_selections,
            max_selections=data.max_selections,
            is_active=data.is_active,
            position=self.repo.next_position(),
        )
        group.options = self._build_options(data.options)
        return self.repo.create(group)

    def update_modifier_group(self, group_id: int, data: ModifierGroupUpdate) -> ModifierGroup:
        """
        Update group fields; a given option list replaces the existing options.

        Raises:
            ValidationException: If the resulting selection bounds are inconsistent
        """
        group = self.get_modifier_group(group_id)

        if data.name is not None:
            group.name = data.name
        if data.type is not None:
            group.type = data.type
        if data.required is not None:
            group.required = data.required
        if data.min_selections is not None:
            group.min_selections = data.min_selections
        if data.max_selections is not None:
            group.max_selections = data.max_selections
        if data.is_active is not None:
            group.is_active = data.is_active

        if group.max_selections is not None and group.min_selections > group.max_selections:
            raise ValidationException("min_selections cannot exceed max_selections")
        if group.type != ModifierType.MULTIPLE and (group.max_selections or 1) > 1:
            raise ValidationException("Only 'multiple' groups may allow more than one selection")

        if data.options is not None:
            group.options = self._build_options(data.options)

        return self.repo.update(group)

    def delete_modifier_group(self, group_id: int) -> None:
        """Delete group, its options and its menu item assignments"""
        group = self.get_modifier_group(group_id)
        self.db.execute(
            delete(menu_item_modifier_groups).where(
                menu_item_modifier_groups.c.modifier_group_id == group.id
            )
        )
        self.repo.delete(group)

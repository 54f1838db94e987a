from sqlalchemy.orm import selectinload

from app.models.modifier_group import ModifierGroup
from app.repositories.scoped_repository import TenantScopedRepository


class ModifierGroupRepository(TenantScopedRepository[ModifierGroup]):
    """Repository for ModifierGroup (and its options) with multi-tenant support"""

    model = ModifierGroup

    def list_with_options(self) -> list[ModifierGroup]:
        return (
            self.query()
            .options(selectinload(ModifierGroup.options))
            .order_by(ModifierGroup.position, ModifierGroup.id)
            .all()
        )

    def count(self) -> int:
        return self.query().count()

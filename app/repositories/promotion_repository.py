from datetime import datetime

from sqlalchemy import or_

from app.models.promotion import PromotionalImage
from app.repositories.scoped_repository import TenantScopedRepository


class PromotionRepository(TenantScopedRepository[PromotionalImage]):
    """Repository for PromotionalImage operations with multi-tenant support"""

    model = PromotionalImage

    def list_visible(self, now: datetime) -> list[PromotionalImage]:
        """Active promotions whose date window contains now"""
        return (
            self.query()
            .filter(
                PromotionalImage.is_active.is_(True),
                or_(PromotionalImage.start_date.is_(None), PromotionalImage.start_date <= now),
                or_(PromotionalImage.end_date.is_(None), PromotionalImage.end_date >= now),
            )
            .order_by(PromotionalImage.position, PromotionalImage.id)
            .all()
        )

    def count_active(self) -> int:
        return self.query().filter(PromotionalImage.is_active.is_(True)).count()

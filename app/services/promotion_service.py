from datetime import datetime, UTC

from sqlalchemy.orm import Session
from app.models.promotion import PromotionalImage
from app.models.tenant_context import AdminSession
from app.repositories.menu_item_repository import MenuItemRepository
from app.repositories.promotion_repository import PromotionRepository
from app.schemas.promotion_schemas import PromotionCreate, PromotionUpdate
from app.core.exceptions import NotFoundException, ValidationException


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class PromotionService:
    """Service for promotional images"""

    def __init__(self, db: Session, session: AdminSession):
        self.db = db
        self.tenant_id = session.require_tenant()
        self.repo = PromotionRepository(db, self.tenant_id)
        self.menu_item_repo = MenuItemRepository(db, self.tenant_id)

    def _check_linked_item(self, menu_item_id: int | None) -> None:
        if menu_item_id is not None and not self.menu_item_repo.get_by_id(menu_item_id):
            raise NotFoundException("Menu item not found")

    def list_promotions(self) -> list[PromotionalImage]:
        return self.repo.list_ordered()

    def get_promotion(self, promotion_id: int) -> PromotionalImage:
        promotion = self.repo.get_by_id(promotion_id)
        if not promotion:
            raise NotFoundException("Promotion not found")
        return promotion

    def create_promotion(self, data: PromotionCreate) -> PromotionalImage:
        self._check_linked_item(data.link_menu_item_id)
        promotion = PromotionalImage(
            image_url=data.image_url,
            title=data.title,
            description=data.description,
            link_url=data.link_url,
            link_menu_item_id=data.link_menu_item_id,
            is_active=data.is_active,
            start_date=data.start_date,
            end_date=data.end_date,
            position=self.repo.next_position(),
        )
        return self.repo.create(promotion)

    def update_promotion(self, promotion_id: int, data: PromotionUpdate) -> PromotionalImage:
        promotion = self.get_promotion(promotion_id)

        if data.link_menu_item_id is not None:
            self._check_linked_item(data.link_menu_item_id)
            promotion.link_menu_item_id = data.link_menu_item_id
        if data.image_url is not None:
            promotion.image_url = data.image_url
        if data.title is not None:
            promotion.title = data.title
        if data.description is not None:
            promotion.description = data.description
        if data.link_url is not None:
            promotion.link_url = data.link_url
        if data.is_active is not None:
            promotion.is_active = data.is_active
        if data.start_date is not None:
            promotion.start_date = data.start_date
        if data.end_date is not None:
            promotion.end_date = data.end_date

        if (
            promotion.start_date
            and promotion.end_date
            and _as_utc(promotion.end_date) < _as_utc(promotion.start_date)
        ):
            raise ValidationException("end_date must be after start_date")

        return self.repo.update(promotion)

    def delete_promotion(self, promotion_id: int) -> None:
        promotion = self.get_promotion(promotion_id)
        self.repo.delete(promotion)

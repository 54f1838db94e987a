from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_admin_session, require_capability
from app.models.role import Capability
from app.models.tenant_context import AdminSession
from app.services.promotion_service import PromotionService
from app.schemas.promotion_schemas import (
    PromotionCreate,
    PromotionUpdate,
    PromotionResponse,
    PromotionListResponse,
)

router = APIRouter()

can_manage_promotions = require_capability(Capability.MANAGE_PROMOTIONS)


@router.get("/", response_model=PromotionListResponse)
async def list_promotions(
    session: AdminSession = Depends(get_admin_session), db: Session = Depends(get_db)
):
    """All promotions, including inactive and scheduled ones"""
    service = PromotionService(db, session)
    promotions = service.list_promotions()
    return PromotionListResponse(promotions=promotions, total=len(promotions))


@router.post("/", response_model=PromotionResponse, status_code=status.HTTP_201_CREATED)
async def create_promotion(
    data: PromotionCreate,
    session: AdminSession = Depends(can_manage_promotions),
    db: Session = Depends(get_db),
):
    service = PromotionService(db, session)
    return service.create_promotion(data)


@router.get("/{promotion_id}", response_model=PromotionResponse)
async def get_promotion(
    promotion_id: int,
    session: AdminSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    service = PromotionService(db, session)
    return service.get_promotion(promotion_id)


@router.patch("/{promotion_id}", response_model=PromotionResponse)
async def update_promotion(
    promotion_id: int,
    data: PromotionUpdate,
    session: AdminSession = Depends(can_manage_promotions),
    db: Session = Depends(get_db),
):
    service = PromotionService(db, session)
    return service.update_promotion(promotion_id, data)


@router.delete("/{promotion_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_promotion(
    promotion_id: int,
    session: AdminSession = Depends(can_manage_promotions),
    db: Session = Depends(get_db),
):
    service = PromotionService(db, session)
    service.delete_promotion(promotion_id)
    return None

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_admin_session, require_capability
from app.models.role import Capability
from app.models.tenant_context import AdminSession
from app.services.modifier_service import ModifierService
from app.schemas.modifier_schemas import (
    ModifierGroupCreate,
    ModifierGroupUpdate,
    ModifierGroupResponse,
    ModifierGroupListResponse,
)

router = APIRouter()

can_manage_modifiers = require_capability(Capability.MANAGE_MODIFIERS)


@router.get("/", response_model=ModifierGroupListResponse)
async def list_modifier_groups(
    session: AdminSession = Depends(get_admin_session), db: Session = Depends(get_db)
):
    service = ModifierService(db, session)
    groups = service.list_modifier_groups()
    return ModifierGroupListResponse(modifier_groups=groups, total=len(groups))


@router.post("/", response_model=ModifierGroupResponse, status_code=status.HTTP_201_CREATED)
async def create_modifier_group(
    data: ModifierGroupCreate,
    session: AdminSession = Depends(can_manage_modifiers),
    db: Session = Depends(get_db),
):
    """Create a modifier group together with its options"""
    service = ModifierService(db, session)
    return service.create_modifier_group(data)


@router.get("/{group_id}", response_model=ModifierGroupResponse)
async def get_modifier_group(
    group_id: int,
    session: AdminSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    service = ModifierService(db, session)
    return service.get_modifier_group(group_id)


@router.patch("/{group_id}", response_model=ModifierGroupResponse)
async def update_modifier_group(
    group_id: int,
    data: ModifierGroupUpdate,
    session: AdminSession = Depends(can_manage_modifiers),
    db: Session = Depends(get_db),
):
    service = ModifierService(db, session)
    return service.update_modifier_group(group_id, data)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_modifier_group(
    group_id: int,
    session: AdminSession = Depends(can_manage_modifiers),
    db: Session = Depends(get_db),
):
    """Delete group; it is detached from every menu item"""
    service = ModifierService(db, session)
    service.delete_modifier_group(group_id)
    return None

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_admin_session, require_capability
from app.models.role import Capability
from app.models.tenant_context import AdminSession
from app.services.menu_item_service import MenuItemService
from app.schemas.menu_item_schemas import (
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemResponse,
    MenuItemListResponse,
    MenuItemReorderRequest,
    ModifierGroupAssignment,
)

router = APIRouter()

can_manage_menu = require_capability(Capability.MANAGE_MENU)


@router.get("/", response_model=MenuItemListResponse)
async def list_menu_items(
    category_id: int | None = Query(None, description="Only items of this category"),
    session: AdminSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    """Get menu items of the current restaurant"""
    service = MenuItemService(db, session)
    items = service.list_menu_items(category_id)
    return MenuItemListResponse(menu_items=items, total=len(items))


@router.post("/", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    data: MenuItemCreate,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    """Create a menu item at the end of its category"""
    service = MenuItemService(db, session)
    return service.create_menu_item(data)


@router.put("/reorder", response_model=MenuItemListResponse)
async def reorder_menu_items(
    data: MenuItemReorderRequest,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    """Set the display order of one category's items"""
    service = MenuItemService(db, session)
    items = service.reorder_menu_items(data.category_id, data.ordered_ids)
    return MenuItemListResponse(menu_items=items, total=len(items))


@router.get("/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(
    item_id: int,
    session: AdminSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    service = MenuItemService(db, session)
    return service.get_menu_item(item_id)


@router.patch("/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: int,
    data: MenuItemUpdate,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    service = MenuItemService(db, session)
    return service.update_menu_item(item_id, data)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_menu_item(
    item_id: int,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    service = MenuItemService(db, session)
    service.delete_menu_item(item_id)
    return None


@router.post("/{item_id}/toggle-availability", response_model=MenuItemResponse)
async def toggle_availability(
    item_id: int,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    """Flip is_available (e.g. sold out for the day)"""
    service = MenuItemService(db, session)
    return service.toggle_availability(item_id)


@router.put("/{item_id}/modifier-groups", response_model=MenuItemResponse)
async def set_modifier_groups(
    item_id: int,
    data: ModifierGroupAssignment,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    """Replace the modifier groups offered with this item"""
    service = MenuItemService(db, session)
    return service.set_modifier_groups(item_id, data.modifier_group_ids)

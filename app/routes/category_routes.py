from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_admin_session, require_capability
from app.models.role import Capability
from app.models.tenant_context import AdminSession
from app.services.category_service import CategoryService
from app.schemas.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryListResponse,
    ReorderRequest,
)

router = APIRouter()

can_manage_menu = require_capability(Capability.MANAGE_MENU)


@router.get("/", response_model=CategoryListResponse)
async def list_categories(
    session: AdminSession = Depends(get_admin_session), db: Session = Depends(get_db)
):
    """Get all categories of the current restaurant in display order"""
    service = CategoryService(db, session)
    categories = service.list_categories()
    return CategoryListResponse(categories=categories, total=len(categories))


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    """Create a category at the end of the menu"""
    service = CategoryService(db, session)
    return service.create_category(data)


@router.put("/reorder", response_model=CategoryListResponse)
async def reorder_categories(
    data: ReorderRequest,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    """Set the display order; ids of other restaurants are ignored"""
    service = CategoryService(db, session)
    categories = service.reorder_categories(data.ordered_ids)
    return CategoryListResponse(categories=categories, total=len(categories))


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: int,
    session: AdminSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    service = CategoryService(db, session)
    return service.get_category(category_id)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    service = CategoryService(db, session)
    return service.update_category(category_id, data)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    session: AdminSession = Depends(can_manage_menu),
    db: Session = Depends(get_db),
):
    """Delete category and all of its menu items"""
    service = CategoryService(db, session)
    service.delete_category(category_id)
    return None

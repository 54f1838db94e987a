from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_super_admin
from app.models.tenant_context import AdminSession
from app.services.tenant_service import TenantService
from app.schemas.tenant_schemas import (
    RestaurantCreate,
    RestaurantUpdate,
    RestaurantResponse,
    RestaurantListResponse,
)

router = APIRouter()


@router.get("", response_model=RestaurantListResponse)
async def list_restaurants(
    session: AdminSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """
    List all restaurants (super-admin only).

    Soft-deleted restaurants are not listed.
    """
    service = TenantService(db)
    restaurants = service.list_restaurants()
    return RestaurantListResponse(restaurants=restaurants, total=len(restaurants))


@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    data: RestaurantCreate,
    session: AdminSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    service = TenantService(db)
    return service.create_restaurant(data)


@router.get("/{tenant_id}", response_model=RestaurantResponse)
async def get_restaurant(
    tenant_id: int,
    session: AdminSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    service = TenantService(db)
    return service.get_restaurant(tenant_id)


@router.patch("/{tenant_id}", response_model=RestaurantResponse)
async def update_restaurant(
    tenant_id: int,
    data: RestaurantUpdate,
    session: AdminSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """Update settings and lifecycle fields (active flag, status, tier)"""
    service = TenantService(db)
    return service.update_restaurant(tenant_id, data)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_restaurant(
    tenant_id: int,
    session: AdminSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """Soft delete: the restaurant stops resolving but its data is kept"""
    service = TenantService(db)
    service.soft_delete_restaurant(tenant_id)
    return None


@router.delete("/{tenant_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
async def delete_restaurant_permanently(
    tenant_id: int,
    session: AdminSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """
    Permanently delete a restaurant.

    WARNING: removes all menu data, promotions, admins and the subscription.
    """
    service = TenantService(db)
    service.hard_delete_restaurant(tenant_id)
    return None

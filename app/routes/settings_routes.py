from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_admin_session
from app.models.tenant_context import AdminSession
from app.services.tenant_service import TenantService
from app.schemas.tenant_schemas import (
    RestaurantSettingsResponse,
    RestaurantSettingsUpdate,
    DashboardStats,
)

router = APIRouter()


@router.get("/settings", response_model=RestaurantSettingsResponse)
async def get_settings(
    session: AdminSession = Depends(get_admin_session), db: Session = Depends(get_db)
):
    """Settings of the current restaurant"""
    service = TenantService(db)
    return service.get_settings(session)


@router.patch("/settings", response_model=RestaurantSettingsResponse)
async def update_settings(
    data: RestaurantSettingsUpdate,
    session: AdminSession = Depends(get_admin_session),
    db: Session = Depends(get_db),
):
    """
    Update settings of the current restaurant.

    Requires the manage-settings capability (admin or manager).
    """
    service = TenantService(db)
    return service.update_settings(session, data)


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(
    session: AdminSession = Depends(get_admin_session), db: Session = Depends(get_db)
):
    service = TenantService(db)
    return service.get_dashboard(session)


@router.get("/menu-qr", response_class=Response)
async def download_menu_qr(
    session: AdminSession = Depends(get_admin_session), db: Session = Depends(get_db)
):
    """PNG QR code linking to the restaurant's public menu, for printing on tables"""
    service = TenantService(db)
    subdomain, png = service.get_menu_qr(session)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{subdomain}-menu-qr.png"'},
    )

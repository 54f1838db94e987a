from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_public_tenant, get_order_notifier
from app.services.menu_service import MenuService
from app.services.order_notifier import OrderNotifier
from app.services.tenant_resolver import ResolvedTenant
from app.schemas.menu_schemas import MenuResponse, PublicCategory, PublicPromotionList
from app.schemas.order_schemas import OrderRequest, OrderResponse

router = APIRouter()


@router.get("", response_model=MenuResponse)
async def get_menu(
    resolved: ResolvedTenant = Depends(get_public_tenant), db: Session = Depends(get_db)
):
    """
    Public menu of the restaurant addressed by the request host.

    Unknown, inactive, unpaid or deleted restaurants answer 404.
    """
    service = MenuService(db, resolved.tenant)
    return MenuResponse(
        restaurant=resolved.tenant,
        detection_method=resolved.method.value,
        categories=service.get_menu(),
    )


@router.get("/categories/{category_id}", response_model=PublicCategory)
async def get_menu_category(
    category_id: int,
    resolved: ResolvedTenant = Depends(get_public_tenant),
    db: Session = Depends(get_db),
):
    service = MenuService(db, resolved.tenant)
    return service.get_category(category_id)


@router.get("/promotions", response_model=PublicPromotionList)
async def get_promotions(
    resolved: ResolvedTenant = Depends(get_public_tenant), db: Session = Depends(get_db)
):
    """Active promotions inside their date window"""
    service = MenuService(db, resolved.tenant)
    return PublicPromotionList(promotions=service.list_promotions())


@router.post("/orders", response_model=OrderResponse)
async def submit_order(
    order: OrderRequest,
    resolved: ResolvedTenant = Depends(get_public_tenant),
    notifier: OrderNotifier = Depends(get_order_notifier),
    db: Session = Depends(get_db),
):
    """
    Send a table order to the restaurant.

    Prices are recomputed from the menu; identical selections are merged.
    Relay failures answer 502 so the guest knows the order was not sent.
    """
    service = MenuService(db, resolved.tenant)
    cart = service.submit_order(order, notifier)
    return OrderResponse(
        table_number=order.table_number,
        lines=[
            {
                "menu_item_id": line.menu_item_id,
                "menu_item_name": line.menu_item_name,
                "quantity": line.quantity,
                "unit_price": float(line.unit_price),
                "total_price": float(line.total_price),
            }
            for line in cart.items
        ],
        total_items=cart.total_items,
        total_price=float(cart.total_price),
    )

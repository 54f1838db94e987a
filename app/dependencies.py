from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import settings
from app.core.security import decode_access_token
from app.core.exceptions import UnauthorizedException
from app.database import get_db
from app.models.role import Capability
from app.models.tenant_context import AdminSession
from app.services.session_service import SessionService
from app.services.tenant_resolver import TenantResolver, ResolvedTenant
from app.services.payment_gateway import PaymentGateway, StripeGateway
from app.services.order_notifier import OrderNotifier, TelegramOrderNotifier

security = HTTPBearer()


async def get_token_claims(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    FastAPI dependency to validate the identity provider's JWT.

    Raises:
        HTTPException 401: If token invalid or expired
    """
    try:
        return decode_access_token(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_admin_session(
    request: Request,
    claims: dict = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> AdminSession:
    """
    FastAPI dependency building the explicit AdminSession.

    Flow:
    1. Validate JWT (get_token_claims)
    2. Load the admin_users row for the 'sub' claim
    3. Derive the effective role
    4. Bind the tenant: own tenant for normal admins, the context cookie's
       tenant for super-admins (Unbound without one)

    Raises:
        HTTPException 401: If token invalid
        ForbiddenException: If the identity is not an administrator
    """
    service = SessionService(db)
    principal = service.get_principal(claims["sub"])
    context_token = request.cookies.get(settings.TENANT_CONTEXT_COOKIE)
    return service.build_session(principal, context_token)


def require_capability(capability: Capability):
    """Dependency factory: the session's role must hold capability."""

    async def dependency(session: AdminSession = Depends(get_admin_session)) -> AdminSession:
        session.require(capability)
        return session

    return dependency


async def require_super_admin(
    session: AdminSession = Depends(get_admin_session),
) -> AdminSession:
    """Verify super-admin status before any cross-tenant operation touches data."""
    session.require_super_admin()
    return session


async def get_public_tenant(
    request: Request,
    restaurant: str | None = Query(
        None, description="Development only: subdomain override (ignored in production)"
    ),
    db: Session = Depends(get_db),
) -> ResolvedTenant:
    """
    FastAPI dependency resolving the restaurant for anonymous requests.

    Raises:
        TenantNotResolvableException: Rendered as 404 "Restaurant not found"
    """
    resolver = TenantResolver(
        db,
        is_production=settings.is_production,
        default_tenant_id=settings.DEFAULT_TENANT_ID,
    )
    return resolver.resolve(request.headers.get("host"), override=restaurant)


def get_payment_gateway() -> PaymentGateway:
    return StripeGateway(settings.STRIPE_SECRET_KEY)


def get_order_notifier() -> OrderNotifier:
    return TelegramOrderNotifier(
        bot_token=settings.TELEGRAM_BOT_TOKEN,
        chat_id=settings.TELEGRAM_CHAT_ID,
        api_url=settings.TELEGRAM_API_URL,
    )

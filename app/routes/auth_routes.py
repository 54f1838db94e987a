from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.config import settings
from app.core.security import create_tenant_context_token
from app.database import get_db
from app.dependencies import get_admin_session, get_token_claims, require_super_admin
from app.models.role import ROLE_CAPABILITIES
from app.models.tenant_context import AdminSession, Bound
from app.services.session_service import SessionService
from app.schemas.session_schemas import SessionResponse, ContextSwitchRequest, LogoutResponse

router = APIRouter()


def _session_response(session: AdminSession) -> SessionResponse:
    context = session.context
    return SessionResponse(
        principal_id=session.principal.id,
        email=session.principal.email,
        role=session.role,
        is_super_admin=session.is_super_admin,
        tenant_id=context.tenant_id if isinstance(context, Bound) else None,
        context_override=isinstance(context, Bound) and context.override,
        capabilities=sorted(capability.value for capability in ROLE_CAPABILITIES[session.role]),
        last_login=session.principal.last_login,
    )


def _clear_context_cookie(response: Response) -> None:
    response.delete_cookie(settings.TENANT_CONTEXT_COOKIE, httponly=True, samesite="lax")


@router.post("/login", response_model=SessionResponse)
async def login(
    response: Response,
    claims: dict = Depends(get_token_claims),
    db: Session = Depends(get_db),
):
    """
    Complete admin sign-in for an identity-provider token.

    Records last_login. Super-admins start without a selected restaurant.
    """
    service = SessionService(db)
    admin_user = service.sign_in(claims["sub"])
    _clear_context_cookie(response)
    return _session_response(service.build_session(admin_user))


@router.get("/session", response_model=SessionResponse)
async def get_session(session: AdminSession = Depends(get_admin_session)):
    """Current role, capabilities and restaurant context"""
    return _session_response(session)


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response, claims: dict = Depends(get_token_claims)):
    """Sign out: drops any super-admin restaurant override"""
    _clear_context_cookie(response)
    return LogoutResponse()


@router.post("/context", response_model=SessionResponse)
async def switch_context(
    data: ContextSwitchRequest,
    response: Response,
    session: AdminSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """
    Super-admin: act on a specific restaurant.

    The selection is kept in an HTTP-only cookie bound to the caller.
    """
    service = SessionService(db)
    tenant_id = service.switch_context(session, data.tenant_id)
    response.set_cookie(
        settings.TENANT_CONTEXT_COOKIE,
        create_tenant_context_token(session.principal.id, tenant_id),
        max_age=settings.TENANT_CONTEXT_TTL_MINUTES * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    session.context = Bound(tenant_id, override=True)
    return _session_response(session)


@router.delete("/context", response_model=SessionResponse)
async def clear_context(
    response: Response,
    session: AdminSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """Super-admin: return to the unbound, cross-restaurant view"""
    _clear_context_cookie(response)
    return _session_response(SessionService(db).build_session(session.principal))

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_token_claims
from app.services.onboarding_service import OnboardingService, menu_url_for
from app.schemas.onboarding_schemas import (
    SubdomainCheckRequest,
    SubdomainCheckResponse,
    EmailCheckRequest,
    EmailCheckResponse,
    OnboardingRequest,
    OnboardingResponse,
)

router = APIRouter()


@router.post("/check-subdomain", response_model=SubdomainCheckResponse)
async def check_subdomain(data: SubdomainCheckRequest, db: Session = Depends(get_db)):
    """Check subdomain availability before the signup flow asks for payment"""
    service = OnboardingService(db)
    return service.check_subdomain(data.subdomain)


@router.post(
    "/check-email", response_model=EmailCheckResponse, response_model_exclude_none=True
)
async def check_email(data: EmailCheckRequest, db: Session = Depends(get_db)):
    service = OnboardingService(db)
    return service.check_email(data.email)


@router.post("/complete", response_model=OnboardingResponse, status_code=status.HTTP_201_CREATED)
async def complete_onboarding(
    data: OnboardingRequest,
    claims: dict = Depends(get_token_claims),
    db: Session = Depends(get_db),
):
    """
    Provision the restaurant for the signed-up identity.

    Creates the tenant, its first admin (the token's subject), a trial
    subscription record and the default categories.
    """
    service = OnboardingService(db)
    tenant, admin_user = service.provision(claims["sub"], claims.get("email"), data)
    return OnboardingResponse(
        tenant_id=tenant.id,
        admin_id=admin_user.id,
        subdomain=tenant.subdomain,
        menu_url=menu_url_for(tenant.subdomain),
    )

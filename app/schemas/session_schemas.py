from datetime import datetime
from pydantic import BaseModel, Field
from app.models.role import Role


class SessionResponse(BaseModel):
    """Current admin session: who, which role, which restaurant"""

    principal_id: str
    email: str
    role: Role
    is_super_admin: bool
    tenant_id: int | None
    context_override: bool
    capabilities: list[str]
    last_login: datetime | None


class ContextSwitchRequest(BaseModel):
    """Super-admin: restaurant to act on"""

    tenant_id: int = Field(..., ge=1)


class LogoutResponse(BaseModel):
    message: str = "Signed out"

"""Tenant context and admin session for request authorization."""

from dataclasses import dataclass

from app.core.exceptions import ForbiddenException
from app.models.admin_user import AdminUser
from app.models.role import Role, Capability, has_capability


@dataclass(frozen=True)
class Bound:
    """
    A tenant has been selected for this request.

    override is True when a super-admin switched into the tenant explicitly.
    """

    tenant_id: int
    override: bool = False


@dataclass(frozen=True)
class Unbound:
    """No tenant selected (super-admin before a context switch)."""

    pass


TenantContext = Bound | Unbound


@dataclass
class AdminSession:
    """
    Explicit session object passed to every admin request handler.

    Built by the get_admin_session dependency from the verified JWT, the
    admin_users row and (for super-admins) the tenant-context cookie.

    Attributes:
        principal: The authenticated AdminUser
        role: Effective role (SUPER_ADMIN when flagged)
        context: Bound(tenant_id) or Unbound
    """

    principal: AdminUser
    role: Role
    context: TenantContext

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    def can(self, capability: Capability) -> bool:
        """Check the role's capability table."""
        return has_capability(self.role, capability)

    def require(self, capability: Capability) -> None:
        """
        Raises:
            ForbiddenException: If the role lacks the capability
        """
        if not self.can(capability):
            raise ForbiddenException(
                f"Role '{self.role.value}' is not allowed to {capability.value.replace('_', ' ')}"
            )

    def require_tenant(self) -> int:
        """
        Return the bound tenant id, failing closed when none is selected.

        Raises:
            ForbiddenException: If the context is Unbound
        """
        match self.context:
            case Bound(tenant_id=tenant_id):
                return tenant_id
            case Unbound():
                raise ForbiddenException(
                    "No restaurant selected. Super admins must switch into a restaurant first"
                )

    def require_super_admin(self) -> None:
        if not self.is_super_admin:
            raise ForbiddenException("Unauthorized: Super admin access required")

    def __repr__(self) -> str:
        return f"<AdminSession(principal_id={self.principal.id}, role={self.role.value}, context={self.context})>"

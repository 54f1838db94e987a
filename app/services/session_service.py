import logging

from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenException, NotFoundException, UnauthorizedException
from app.core.security import read_tenant_context_token
from app.models.admin_user import AdminUser
from app.models.role import Role
from app.models.tenant_context import AdminSession, Bound, Unbound, TenantContext
from app.repositories.admin_user_repository import AdminUserRepository
from app.repositories.tenant_repository import TenantRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Maps authenticated principals to roles and tenant contexts"""

    def __init__(self, db: Session):
        self.db = db
        self.admin_repo = AdminUserRepository(db)
        self.tenant_repo = TenantRepository(db)

    def get_principal(self, principal_id: str) -> AdminUser:
        """
        Look up the admin record for a verified JWT subject.

        Raises:
            ForbiddenException: If the identity is not an administrator
        """
        admin_user = self.admin_repo.get_by_id(principal_id)
        if not admin_user:
            raise ForbiddenException("User is not an administrator")
        return admin_user

    def build_session(self, admin_user: AdminUser, context_token: str | None = None) -> AdminSession:
        """
        Build the AdminSession for a request.

        Normal admins are always bound to their own tenant. Super-admins are
        Unbound unless they carry a valid context token naming a live tenant.

        Raises:
            ForbiddenException: If a non-super-admin has no tenant (invariant breach)
        """
        role = admin_user.effective_role
        context: TenantContext

        if role == Role.SUPER_ADMIN:
            context = Unbound()
            if context_token:
                tenant_id = read_tenant_context_token(context_token, admin_user.id)
                if tenant_id is not None and self.tenant_repo.get_by_id(tenant_id):
                    context = Bound(tenant_id, override=True)
        else:
            if admin_user.tenant_id is None:
                logger.error("Admin %s has no tenant assigned", admin_user.id)
                raise ForbiddenException("Administrator is not assigned to a restaurant")
            if self.tenant_repo.get_by_id(admin_user.tenant_id) is None:
                context = Unbound()
            else:
                context = Bound(admin_user.tenant_id)

        return AdminSession(principal=admin_user, role=role, context=context)

    def sign_in(self, principal_id: str) -> AdminUser:
        """
        Complete sign-in for a verified identity and record last_login.

        Raises:
            UnauthorizedException: If the identity is not an administrator
        """
        admin_user = self.admin_repo.get_by_id(principal_id)
        if not admin_user:
            raise UnauthorizedException("Unauthorized: this account has no admin access")
        logger.info("Admin %s signed in", principal_id)
        return self.admin_repo.touch_last_login(admin_user)

    def switch_context(self, session: AdminSession, tenant_id: int) -> int:
        """
        Verify a super-admin context switch and return the target tenant id.

        Raises:
            ForbiddenException: If the caller is not a super-admin
            NotFoundException: If the tenant does not exist
        """
        session.require_super_admin()
        tenant = self.tenant_repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundException("Restaurant not found")
        logger.info("Super admin %s switched into tenant %s", session.principal.id, tenant_id)
        return tenant.id

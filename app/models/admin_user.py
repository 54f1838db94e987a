from datetime import datetime

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin
from app.models.role import Role

if TYPE_CHECKING:
    from app.models.tenant import Tenant


class AdminUser(Base, TimestampMixin):
    """
    Administrator known to the identity provider.

    id is the 'sub' claim of the identity provider's JWT - no credentials
    are stored here. tenant_id may only be NULL for super-admins.
    """

    __tablename__ = "admin_users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str] = mapped_column(String(254), unique=True, nullable=False, index=True)
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=Role.ADMIN,
    )
    is_super_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tenant_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    tenant: Mapped["Tenant | None"] = relationship("Tenant", back_populates="admin_users")

    @property
    def effective_role(self) -> Role:
        """SUPER_ADMIN when flagged, otherwise the stored role."""
        if self.is_super_admin or self.role == Role.SUPER_ADMIN:
            return Role.SUPER_ADMIN
        return self.role

    def __repr__(self) -> str:
        return f"<AdminUser(id='{self.id}', role={self.effective_role.value}, tenant_id={self.tenant_id})>"

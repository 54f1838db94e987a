from datetime import datetime, UTC

from sqlalchemy.orm import Session
from app.models.admin_user import AdminUser


class AdminUserRepository:
    """Repository for AdminUser model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, principal_id: str) -> AdminUser | None:
        """Get admin by identity-provider subject"""
        return self.db.query(AdminUser).filter(AdminUser.id == principal_id).first()

    def get_by_email(self, email: str) -> AdminUser | None:
        return self.db.query(AdminUser).filter(AdminUser.email == email.lower()).first()

    def create(self, admin_user: AdminUser) -> AdminUser:
        """
        Create admin user.

        Raises:
            IntegrityError: If the id or email already exists
        """
        self.db.add(admin_user)
        self.db.commit()
        self.db.refresh(admin_user)
        return admin_user

    def touch_last_login(self, admin_user: AdminUser) -> AdminUser:
        """Record a successful sign-in"""
        admin_user.last_login = datetime.now(UTC)
        self.db.commit()
        self.db.refresh(admin_user)
        return admin_user

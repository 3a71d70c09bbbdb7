"""Administrator accounts and roles: 'admin_users' and 'admin_roles' tables."""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from mailportal.core.clock import utcnow
from mailportal.infrastructure.database import Base, generate_uuid


class AdminRole(Base):
    __tablename__ = "admin_roles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, nullable=False)
    permissions = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<AdminRole {self.name}>"


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(String(36), ForeignKey("admin_roles.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_by = Column(String(36), ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)

    role = relationship("AdminRole")

    @property
    def role_name(self) -> str:
        return self.role.name if self.role else "admin"

    @property
    def permissions(self) -> dict:
        return self.role.permissions if self.role else {}

    def __repr__(self):
        return f"<AdminUser {self.email}>"

"""User template: default quota and permissions for new accounts."""

from sqlalchemy import Column, String, Boolean, BigInteger, Text, DateTime, ForeignKey, JSON

from mailportal.core.clock import utcnow
from mailportal.infrastructure.database import Base, generate_uuid


class UserTemplate(Base):
    __tablename__ = "user_templates"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    quota_bytes = Column(BigInteger, nullable=False)
    permissions = Column(JSON, nullable=False, default=dict)
    is_system_template = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36), ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<UserTemplate {self.name}>"

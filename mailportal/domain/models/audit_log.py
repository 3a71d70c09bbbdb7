"""Audit log: append-only record of administrative actions."""

from sqlalchemy import Column, Integer, String, DateTime, JSON

from mailportal.core.clock import utcnow
from mailportal.infrastructure.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action_type = Column(String(100), nullable=False, index=True)
    admin_email = Column(String(255), nullable=False, index=True)
    target_user_email = Column(String(255), nullable=True, index=True)
    details = Column(JSON, nullable=True)  # free text or structured payload
    ip_address = Column(String(64), nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<AuditLog {self.action_type} by {self.admin_email}>"

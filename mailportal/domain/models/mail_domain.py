"""Mail domain: maps to the 'mail_domains' table."""

from sqlalchemy import Column, String, Boolean, Text, DateTime

from mailportal.core.clock import utcnow
from mailportal.infrastructure.database import Base, generate_uuid


class MailDomain(Base):
    __tablename__ = "mail_domains"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    domain = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<MailDomain {self.domain}{' (primary)' if self.is_primary else ''}>"

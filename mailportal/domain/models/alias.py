"""Email alias / distribution list: maps to the 'email_aliases' table."""

from sqlalchemy import Column, String, Boolean, Text, DateTime, JSON

from mailportal.core.clock import utcnow
from mailportal.infrastructure.database import Base, generate_uuid


class EmailAlias(Base):
    __tablename__ = "email_aliases"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    alias_address = Column(String(255), unique=True, nullable=False, index=True)
    target_addresses = Column(JSON, nullable=False, default=list)
    is_distribution_list = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<EmailAlias {self.alias_address} -> {len(self.target_addresses or [])} targets>"

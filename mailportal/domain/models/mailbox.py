"""Mailbox metadata: quota and usage per user, keyed by email."""

from sqlalchemy import Column, String, BigInteger, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from mailportal.core.clock import utcnow
from mailportal.infrastructure.database import Base, generate_uuid


class MailboxMetadata(Base):
    __tablename__ = "mailbox_metadata"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    quota_bytes = Column(BigInteger, nullable=False)
    usage_bytes = Column(BigInteger, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="mailbox")

    @property
    def quota_used_percentage(self) -> float:
        if not self.quota_bytes or self.quota_bytes <= 0:
            return 0
        return (self.usage_bytes or 0) / self.quota_bytes * 100

    def __repr__(self):
        return f"<MailboxMetadata {self.email} {self.usage_bytes}/{self.quota_bytes}>"

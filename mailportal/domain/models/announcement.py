"""Announcement: maps to the 'announcements' table."""

from sqlalchemy import Column, String, Boolean, Text, DateTime

from mailportal.core.clock import as_utc, utcnow
from mailportal.domain.enums import AnnouncementPriority
from mailportal.infrastructure.database import Base, generate_uuid


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(300), nullable=False)
    message = Column(Text, nullable=False)
    target_group = Column(String(100), nullable=False, default="all")
    priority = Column(String(20), nullable=False, default=AnnouncementPriority.NORMAL.value)
    published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def is_visible(self, now) -> bool:
        expires_at = as_utc(self.expires_at)
        return bool(self.published) and (expires_at is None or expires_at > now)

    def __repr__(self):
        return f"<Announcement {self.title!r} {self.priority}>"

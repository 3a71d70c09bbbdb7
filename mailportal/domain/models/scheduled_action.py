"""Scheduled action: deferred bulk lifecycle operation."""

from sqlalchemy import Column, String, Text, DateTime, JSON

from mailportal.core.clock import utcnow
from mailportal.domain.enums import ScheduledActionStatus
from mailportal.infrastructure.database import Base, generate_uuid


class ScheduledAction(Base):
    __tablename__ = "scheduled_actions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    action_type = Column(String(50), nullable=False)
    target_type = Column(String(50), nullable=False)
    target_ids = Column(JSON, nullable=False, default=list)
    action_data = Column(JSON, nullable=True)
    scheduled_for = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ScheduledActionStatus.PENDING.value, index=True)
    created_by = Column(String(255), nullable=True)
    executed_at = Column(DateTime(timezone=True), nullable=True)
    result = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    @property
    def status_enum(self) -> ScheduledActionStatus:
        return ScheduledActionStatus(self.status)

    def __repr__(self):
        return f"<ScheduledAction {self.action_type} {self.status} @ {self.scheduled_for}>"

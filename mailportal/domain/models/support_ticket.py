"""Support ticket: maps to the 'support_tickets' table."""

from sqlalchemy import Column, String, Text, DateTime

from mailportal.core.clock import utcnow
from mailportal.domain.enums import TicketStatus
from mailportal.infrastructure.database import Base, generate_uuid


class SupportTicket(Base):
    __tablename__ = "support_tickets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    ticket_type = Column(String(100), nullable=False)
    user_email = Column(String(255), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=TicketStatus.PENDING.value, index=True)
    priority = Column(String(20), nullable=False, default="normal")
    description = Column(Text, nullable=False)
    resolution_notes = Column(Text, nullable=True)
    assigned_to = Column(String(255), nullable=True)
    resolved_by = Column(String(255), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<SupportTicket {self.ticket_type} {self.user_email} {self.status}>"

"""Sending-limit ledger: tiers, per-user counters and violations."""

from sqlalchemy import Column, Integer, String, Boolean, Text, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from mailportal.core.clock import utcnow
from mailportal.infrastructure.database import Base, generate_uuid


class SendingTier(Base):
    __tablename__ = "sending_tiers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, nullable=False)
    display_name = Column(String(200), nullable=False)
    daily_limit = Column(Integer, nullable=False)
    hourly_limit = Column(Integer, nullable=False)
    price_monthly = Column(Float, nullable=False, default=0)
    features = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<SendingTier {self.name} {self.daily_limit}/{self.hourly_limit}>"


class EmailSendingLimit(Base):
    __tablename__ = "email_sending_limits"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    tier_id = Column(String(36), ForeignKey("sending_tiers.id", ondelete="SET NULL"), nullable=True)
    tier_name = Column(String(100), nullable=False, index=True)
    daily_limit = Column(Integer, nullable=False)
    hourly_limit = Column(Integer, nullable=False)
    emails_sent_today = Column(Integer, nullable=False, default=0)
    emails_sent_this_hour = Column(Integer, nullable=False, default=0)
    last_reset_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_reset_hour = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_sending_enabled = Column(Boolean, nullable=False, default=True)
    custom_limit_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="sending_limit")

    @property
    def is_at_daily_limit(self) -> bool:
        return self.emails_sent_today >= self.daily_limit

    def __repr__(self):
        return f"<EmailSendingLimit {self.user_id} {self.tier_name}>"


class SendingLimitViolation(Base):
    __tablename__ = "sending_limit_violations"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    # No FK: violations outlive the user they were recorded against
    user_id = Column(String(36), nullable=False, index=True)
    violation_type = Column(String(50), nullable=False)
    attempted_count = Column(Integer, nullable=False)
    limit_at_time = Column(Integer, nullable=False)
    violation_details = Column(JSON, nullable=True)
    action_taken = Column(String(100), nullable=True)
    admin_notes = Column(Text, nullable=True)
    is_resolved = Column(Boolean, nullable=False, default=False)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    resolved_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<SendingLimitViolation {self.user_id} {self.violation_type}>"

"""Login activity: append-only record of end-user sign-in attempts."""

from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime

from mailportal.core.clock import utcnow
from mailportal.infrastructure.database import Base


class LoginActivity(Base):
    __tablename__ = "login_activity"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_email = Column(String(255), nullable=False, index=True)
    success = Column(Boolean, nullable=False)
    failure_reason = Column(Text, nullable=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<LoginActivity {self.user_email} - {'ok' if self.success else 'failed'}>"

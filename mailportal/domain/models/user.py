"""End-user account: maps to the 'users' table."""

from sqlalchemy import Column, String, Boolean, Integer, Date, DateTime
from sqlalchemy.orm import relationship

from mailportal.core.clock import as_utc, utcnow
from mailportal.infrastructure.database import Base, generate_uuid


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(30), nullable=True)
    recovery_email = Column(String(255), nullable=True)
    recovery_phone = Column(String(30), nullable=True)
    password_hash = Column(String(255), nullable=True)

    is_suspended = Column(Boolean, nullable=False, default=False)
    failed_login_attempts = Column(Integer, nullable=False, default=0)
    locked_until = Column(DateTime(timezone=True), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    mailbox = relationship(
        "MailboxMetadata", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    sending_limit = relationship(
        "EmailSendingLimit", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    group_memberships = relationship(
        "UserGroupMember", back_populates="user", cascade="all, delete-orphan"
    )

    def is_locked(self, now=None) -> bool:
        """A lock timestamp in the past means the account is not locked."""
        locked_until = as_utc(self.locked_until)
        return bool(locked_until and locked_until > (now or utcnow()))

    def __repr__(self):
        return f"<User {self.email}>"

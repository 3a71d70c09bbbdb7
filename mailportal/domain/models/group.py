"""User groups and their membership rows."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from mailportal.core.clock import utcnow
from mailportal.infrastructure.database import Base, generate_uuid


class UserGroup(Base):
    __tablename__ = "user_groups"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(30), nullable=False, default="blue")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    members = relationship("UserGroupMember", back_populates="group", cascade="all, delete-orphan")

    @property
    def member_count(self) -> int:
        return len(self.members)

    def __repr__(self):
        return f"<UserGroup {self.name}>"


class UserGroupMember(Base):
    __tablename__ = "user_group_members"
    __table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_group_member"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    group_id = Column(String(36), ForeignKey("user_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    added_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    group = relationship("UserGroup", back_populates="members")
    user = relationship("User", back_populates="group_memberships")

    @property
    def email(self) -> str:
        return self.user.email if self.user else None

    def __repr__(self):
        return f"<UserGroupMember {self.group_id}:{self.user_id}>"

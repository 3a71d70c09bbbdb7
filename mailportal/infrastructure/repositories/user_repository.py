"""
SQLAlchemy Implementation of User Repository.
"""

from typing import List, Optional

from mailportal.config import get_settings
from mailportal.domain.models.user import User
from mailportal.domain.models.mailbox import MailboxMetadata
from mailportal.domain.repositories.user_repository import UserRepository
from mailportal.infrastructure.repositories.base_repository import SQLAlchemyRepository

settings = get_settings()


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[User]:
        return self.find_one(email=email)

    def list_by_emails(self, emails: List[str]) -> List[User]:
        if not emails:
            return []
        return self.db.query(User).filter(User.email.in_(emails)).all()

    def get_or_create_mailbox(self, user: User) -> MailboxMetadata:
        mailbox = self.db.query(MailboxMetadata).filter(MailboxMetadata.email == user.email).first()
        if mailbox:
            return mailbox

        mailbox = MailboxMetadata(
            email=user.email,
            user_id=user.id,
            quota_bytes=settings.DEFAULT_QUOTA_BYTES,
            usage_bytes=0,
        )
        self.db.add(mailbox)
        self.db.commit()
        self.db.refresh(mailbox)
        return mailbox

    def set_quota(self, user: User, quota_bytes: int) -> MailboxMetadata:
        mailbox = self.db.query(MailboxMetadata).filter(MailboxMetadata.email == user.email).first()
        if mailbox:
            mailbox.quota_bytes = quota_bytes
        else:
            mailbox = MailboxMetadata(
                email=user.email, user_id=user.id, quota_bytes=quota_bytes, usage_bytes=0
            )
            self.db.add(mailbox)
        self.db.commit()
        self.db.refresh(mailbox)
        return mailbox

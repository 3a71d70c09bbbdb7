"""
User Repository Interface.
"""

from typing import List, Optional, Protocol

from mailportal.domain.models.user import User
from mailportal.domain.models.mailbox import MailboxMetadata
from mailportal.domain.repositories.base import BaseRepository


class UserRepository(BaseRepository[User], Protocol):
    """Interface for end-user and mailbox data access."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def list_by_emails(self, emails: List[str]) -> List[User]:
        ...

    def get_or_create_mailbox(self, user: User) -> MailboxMetadata:
        """Return the user's mailbox row, creating it with the default quota."""
        ...

    def set_quota(self, user: User, quota_bytes: int) -> MailboxMetadata:
        ...

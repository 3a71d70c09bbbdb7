"""
Sending-Limit Repository Interface.
"""

from datetime import datetime
from typing import List, Optional, Protocol

from mailportal.domain.models.sending_limit import EmailSendingLimit, SendingLimitViolation
from mailportal.domain.repositories.base import BaseRepository


class SendingLimitRepository(BaseRepository[EmailSendingLimit], Protocol):
    """Interface for the per-user sending ledger and its violations."""

    def get_by_user_id(self, user_id: str) -> Optional[EmailSendingLimit]:
        ...

    def list_violations(self, limit: int) -> List[SendingLimitViolation]:
        ...

    def get_violation(self, violation_id: str) -> Optional[SendingLimitViolation]:
        ...

    def count_violations_since(self, since: datetime) -> int:
        ...

    def reset_hourly_counters(self, hour_start: datetime) -> int:
        ...

    def reset_daily_counters(self, day_start: datetime) -> int:
        ...

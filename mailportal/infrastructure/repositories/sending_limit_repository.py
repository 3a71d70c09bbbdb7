"""
SQLAlchemy Implementation of Sending-Limit Repository.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func

from mailportal.domain.models.sending_limit import EmailSendingLimit, SendingLimitViolation
from mailportal.domain.repositories.sending_limit_repository import SendingLimitRepository
from mailportal.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemySendingLimitRepository(SQLAlchemyRepository[EmailSendingLimit], SendingLimitRepository):
    """Sending-limit repository implementation using SQLAlchemy."""

    def get_by_user_id(self, user_id: str) -> Optional[EmailSendingLimit]:
        return self.find_one(user_id=user_id)

    def list_violations(self, limit: int) -> List[SendingLimitViolation]:
        return (
            self.db.query(SendingLimitViolation)
            .order_by(SendingLimitViolation.created_at.desc())
            .limit(limit)
            .all()
        )

    def get_violation(self, violation_id: str) -> Optional[SendingLimitViolation]:
        return (
            self.db.query(SendingLimitViolation)
            .filter(SendingLimitViolation.id == violation_id)
            .first()
        )

    def count_violations_since(self, since: datetime) -> int:
        return (
            self.db.query(func.count(SendingLimitViolation.id))
            .filter(SendingLimitViolation.created_at >= since)
            .scalar()
            or 0
        )

    def reset_hourly_counters(self, hour_start: datetime) -> int:
        count = (
            self.db.query(EmailSendingLimit)
            .filter(EmailSendingLimit.last_reset_hour < hour_start)
            .update(
                {
                    EmailSendingLimit.emails_sent_this_hour: 0,
                    EmailSendingLimit.last_reset_hour: hour_start,
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        return count

    def reset_daily_counters(self, day_start: datetime) -> int:
        count = (
            self.db.query(EmailSendingLimit)
            .filter(EmailSendingLimit.last_reset_date < day_start)
            .update(
                {
                    EmailSendingLimit.emails_sent_today: 0,
                    EmailSendingLimit.last_reset_date: day_start,
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        return count

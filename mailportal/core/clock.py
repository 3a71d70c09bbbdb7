"""Time helpers: everything is stored in UTC, "today" is computed in settings.TIMEZONE."""

from datetime import datetime, timezone
from typing import Optional

import pytz

from mailportal.config import get_settings

settings = get_settings()
tz = pytz.timezone(settings.TIMEZONE)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from backends without tz support (SQLite)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_midnight_utc(now: Optional[datetime] = None) -> datetime:
    """Start of the current local day, expressed in UTC."""
    local_now = (as_utc(now) or utcnow()).astimezone(tz)
    midnight = tz.localize(datetime(local_now.year, local_now.month, local_now.day))
    return midnight.astimezone(timezone.utc)


def hour_start_utc(now: Optional[datetime] = None) -> datetime:
    """Start of the current local hour, expressed in UTC."""
    local_now = (as_utc(now) or utcnow()).astimezone(tz)
    hour = tz.localize(datetime(local_now.year, local_now.month, local_now.day, local_now.hour))
    return hour.astimezone(timezone.utc)

"""Stats service: dashboard overview, storage report and login activity."""

from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from mailportal.application.services.quota_service import bytes_to_mb
from mailportal.core.clock import as_utc, utcnow
from mailportal.domain.models.mail_domain import MailDomain
from mailportal.domain.models.user import User

NEAR_QUOTA_PERCENT = 75
OVER_QUOTA_PERCENT = 90
RECENT_LOGINS_LIMIT = 50
ISSUES_LIMIT = 100


def _count(db: Session, *criteria) -> int:
    return db.query(func.count(User.id)).filter(*criteria).scalar() or 0


def _user_storage(users: List[User]) -> List[dict]:
    rows = []
    for user in users:
        quota_mb = bytes_to_mb(user.mailbox.quota_bytes) if user.mailbox else 0
        used_mb = bytes_to_mb(user.mailbox.usage_bytes) if user.mailbox else 0
        rows.append(
            {
                "id": user.id,
                "email": user.email,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "quota_mb": quota_mb,
                "storage_used_mb": used_mb,
                "usage_percentage": int(used_mb / quota_mb * 100 + 0.5) if quota_mb > 0 else 0,
                "is_suspended": user.is_suspended,
            }
        )
    return rows


def get_storage_report(db: Session) -> dict:
    users = db.query(User).options(joinedload(User.mailbox)).order_by(User.email.asc()).all()
    rows = _user_storage(users)

    total_allocated = sum(row["quota_mb"] for row in rows)
    total_used = sum(row["storage_used_mb"] for row in rows)
    over_quota = sum(
        1 for row in rows if row["quota_mb"] > 0 and row["storage_used_mb"] >= row["quota_mb"] * OVER_QUOTA_PERCENT / 100
    )
    near_quota = sum(
        1
        for row in rows
        if row["quota_mb"] > 0
        and NEAR_QUOTA_PERCENT <= row["storage_used_mb"] / row["quota_mb"] * 100 < OVER_QUOTA_PERCENT
    )

    rows.sort(key=lambda row: row["storage_used_mb"], reverse=True)
    return {
        "stats": {
            "total_allocated": total_allocated,
            "total_used": total_used,
            "users_over_quota": over_quota,
            "users_near_quota": near_quota,
            "total_users": len(rows),
            "average_usage_percentage": int(total_used / total_allocated * 100 + 0.5) if total_allocated else 0,
        },
        "users": rows,
    }


def get_dashboard_stats(db: Session, now: Optional[datetime] = None) -> dict:
    now = as_utc(now) or utcnow()
    storage = get_storage_report(db)["stats"]

    return {
        "total_users": _count(db),
        "active_users": _count(db, User.is_suspended.is_(False)),
        "suspended_users": _count(db, User.is_suspended.is_(True)),
        "total_domains": db.query(func.count(MailDomain.id)).filter(MailDomain.is_active.is_(True)).scalar() or 0,
        "storage": {
            "total_allocated": storage["total_allocated"],
            "total_used": storage["total_used"],
            "average_usage_percent": storage["average_usage_percentage"],
            "users_over_90_percent": storage["users_over_quota"],
        },
        "activity": {
            "active_last_7_days": _count(db, User.last_login >= now - timedelta(days=7)),
            "active_last_30_days": _count(db, User.last_login >= now - timedelta(days=30)),
            "never_logged_in": _count(db, User.last_login.is_(None)),
        },
    }


def _activity_row(user: User, now: datetime, cutoff_90: Optional[datetime] = None) -> dict:
    is_locked = user.is_locked(now)
    last_login = as_utc(user.last_login)
    row = {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "last_login": last_login,
        "created_at": as_utc(user.created_at),
        "is_suspended": user.is_suspended,
        "is_locked": is_locked,
        "issue_type": None,
    }
    if cutoff_90 is not None:
        if is_locked:
            row["issue_type"] = "locked"
        elif last_login is None:
            row["issue_type"] = "never_logged_in"
        elif last_login < cutoff_90:
            row["issue_type"] = "inactive"
        else:
            row["issue_type"] = "unknown"
    return row


def get_activity_report(db: Session, now: Optional[datetime] = None) -> dict:
    now = as_utc(now) or utcnow()
    cutoff_90 = now - timedelta(days=90)

    stats = {
        "total_users": _count(db),
        "active_last_7_days": _count(db, User.last_login >= now - timedelta(days=7)),
        "active_last_30_days": _count(db, User.last_login >= now - timedelta(days=30)),
        "never_logged_in": _count(db, User.last_login.is_(None)),
        "inactive_last_90_days": _count(
            db,
            or_(
                User.last_login < cutoff_90,
                (User.last_login.is_(None)) & (User.created_at < cutoff_90),
            ),
        ),
        "suspended_users": _count(db, User.is_suspended.is_(True)),
        "locked_users": _count(db, User.locked_until > now),
    }

    recent = (
        db.query(User)
        .filter(User.last_login.isnot(None))
        .order_by(User.last_login.desc())
        .limit(RECENT_LOGINS_LIMIT)
        .all()
    )
    with_issues = (
        db.query(User)
        .filter(or_(User.last_login.is_(None), User.last_login < cutoff_90, User.locked_until > now))
        .order_by(User.created_at.desc())
        .limit(ISSUES_LIMIT)
        .all()
    )
    return {
        "stats": stats,
        "recent_logins": [_activity_row(user, now) for user in recent],
        "users_with_issues": [_activity_row(user, now, cutoff_90) for user in with_issues],
    }

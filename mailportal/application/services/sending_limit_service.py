"""Sending-limit service: per-user ledger, tiers, violations and counter rollover."""

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from mailportal.application.services.audit_service import record_audit
from mailportal.config import get_settings
from mailportal.core.clock import hour_start_utc, local_midnight_utc, utcnow
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.models.sending_limit import (
    EmailSendingLimit,
    SendingLimitViolation,
    SendingTier,
)
from mailportal.domain.models.user import User
from mailportal.domain.repositories.sending_limit_repository import SendingLimitRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.sending_limit import (
    SendingLimitCreate,
    SendingLimitUpdate,
    SendingTierCreate,
    ViolationCreate,
)

settings = get_settings()
logger = structlog.get_logger(__name__)


def _user_email(repo: SendingLimitRepository, user_id: str) -> Optional[str]:
    user = repo.db.query(User).filter(User.id == user_id).first()
    return user.email if user else None


def list_limits(repo: SendingLimitRepository) -> List[EmailSendingLimit]:
    return repo.list(order_by=EmailSendingLimit.tier_name.asc())


def get_limit(repo: SendingLimitRepository, limit_id: str) -> EmailSendingLimit:
    limit = repo.get_by_id(limit_id)
    if not limit:
        raise EntityNotFoundException("Sending limit not found")
    return limit


def create_limit(
    repo: SendingLimitRepository,
    body: SendingLimitCreate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> EmailSendingLimit:
    if not body.user_id or not body.tier_name:
        raise ValidationException("User ID and tier name are required")

    email = _user_email(repo, body.user_id)
    if email is None:
        raise EntityNotFoundException("User not found")
    if repo.get_by_user_id(body.user_id):
        raise ValidationException("User already has a sending limit")

    daily_limit = body.daily_limit
    hourly_limit = body.hourly_limit
    if body.tier_id:
        tier = repo.db.query(SendingTier).filter(SendingTier.id == body.tier_id).first()
        if not tier:
            raise EntityNotFoundException("Sending tier not found")
        daily_limit = daily_limit or tier.daily_limit
        hourly_limit = hourly_limit or tier.hourly_limit

    now = utcnow()
    limit = repo.create(
        {
            "user_id": body.user_id,
            "tier_id": body.tier_id,
            "tier_name": body.tier_name,
            "daily_limit": daily_limit or settings.DEFAULT_DAILY_LIMIT,
            "hourly_limit": hourly_limit or settings.DEFAULT_HOURLY_LIMIT,
            "emails_sent_today": 0,
            "emails_sent_this_hour": 0,
            "last_reset_date": now,
            "last_reset_hour": now,
            "is_sending_enabled": True,
            "custom_limit_reason": body.custom_limit_reason,
        }
    )
    logger.info("Sending limit created", user_id=body.user_id, tier=body.tier_name, admin=actor.email)
    record_audit(
        repo.db,
        "sending_limit_created",
        actor.email,
        email,
        {"tier_name": limit.tier_name, "daily_limit": limit.daily_limit, "hourly_limit": limit.hourly_limit},
        ip_address,
    )
    return limit


def update_limit(
    repo: SendingLimitRepository,
    limit_id: str,
    body: SendingLimitUpdate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> EmailSendingLimit:
    limit = get_limit(repo, limit_id)
    changes = body.model_dump(exclude_unset=True)
    for field in ("tier_name", "daily_limit", "hourly_limit", "is_sending_enabled"):
        if field in changes and changes[field] is None:
            raise ValidationException(f"{field} cannot be null")
    if changes.get("tier_id") is not None:
        if not repo.db.query(SendingTier).filter(SendingTier.id == changes["tier_id"]).first():
            raise EntityNotFoundException("Sending tier not found")

    limit = repo.update(limit, changes)
    logger.info("Sending limit updated", limit_id=limit_id, fields=sorted(changes), admin=actor.email)
    record_audit(
        repo.db,
        "sending_limit_updated",
        actor.email,
        _user_email(repo, limit.user_id),
        changes,
        ip_address,
    )
    return limit


def delete_limit(
    repo: SendingLimitRepository, limit_id: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> None:
    limit = get_limit(repo, limit_id)
    email = _user_email(repo, limit.user_id)
    repo.delete(limit)
    logger.info("Sending limit deleted", limit_id=limit_id, admin=actor.email)
    record_audit(repo.db, "sending_limit_deleted", actor.email, email, "Sending limit removed", ip_address)


def unblock_limit(
    repo: SendingLimitRepository, limit_id: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> EmailSendingLimit:
    limit = get_limit(repo, limit_id)
    limit = repo.update(
        limit,
        {
            "is_sending_enabled": True,
            "custom_limit_reason": None,
            "emails_sent_today": 0,
            "emails_sent_this_hour": 0,
        },
    )
    email = _user_email(repo, limit.user_id)
    logger.info("Sending unblocked", limit_id=limit_id, email=email, admin=actor.email)
    record_audit(
        repo.db,
        "sending_limit_unblocked",
        actor.email,
        email,
        "Sending re-enabled and counters reset",
        ip_address,
    )
    return limit


def get_stats(repo: SendingLimitRepository, now: Optional[datetime] = None) -> Dict[str, int]:
    limits = repo.list()
    total_sent_today = sum(limit.emails_sent_today for limit in limits)
    count = len(limits)
    return {
        "total_sent_today": total_sent_today,
        "users_at_limit": sum(1 for limit in limits if limit.is_at_daily_limit),
        "blocked_users": sum(1 for limit in limits if not limit.is_sending_enabled),
        "violations_today": repo.count_violations_since(local_midnight_utc(now)),
        "avg_sending_per_user": int(total_sent_today / count + 0.5) if count else 0,
        "total_users_with_limits": count,
    }


def list_violations(repo: SendingLimitRepository) -> List[SendingLimitViolation]:
    return repo.list_violations(limit=settings.AUDIT_LOG_LIMIT)


def record_violation(
    repo: SendingLimitRepository,
    body: ViolationCreate,
    actor: Optional[SessionIdentity] = None,
    ip_address: Optional[str] = None,
) -> SendingLimitViolation:
    violation = SendingLimitViolation(**body.model_dump())
    repo.db.add(violation)
    repo.db.commit()
    repo.db.refresh(violation)
    logger.warning(
        "Sending limit violation",
        user_id=body.user_id,
        violation_type=body.violation_type,
        attempted=body.attempted_count,
        limit=body.limit_at_time,
    )
    if actor:
        record_audit(
            repo.db,
            "violation_recorded",
            actor.email,
            _user_email(repo, body.user_id),
            {"violation_type": body.violation_type, "attempted_count": body.attempted_count},
            ip_address,
        )
    return violation


def resolve_violation(
    repo: SendingLimitRepository,
    violation_id: str,
    actor: SessionIdentity,
    admin_notes: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> SendingLimitViolation:
    violation = repo.get_violation(violation_id)
    if not violation:
        raise EntityNotFoundException("Violation not found")
    if violation.is_resolved:
        raise ValidationException("Violation is already resolved")

    violation.is_resolved = True
    violation.resolved_at = utcnow()
    violation.resolved_by = actor.email
    if admin_notes is not None:
        violation.admin_notes = admin_notes
    repo.db.commit()
    repo.db.refresh(violation)

    record_audit(
        repo.db,
        "violation_resolved",
        actor.email,
        _user_email(repo, violation.user_id),
        {"violation_id": violation.id, "violation_type": violation.violation_type},
        ip_address,
    )
    return violation


def list_tiers(repo: SendingLimitRepository) -> List[SendingTier]:
    return (
        repo.db.query(SendingTier)
        .order_by(SendingTier.sort_order.asc(), SendingTier.name.asc())
        .all()
    )


def create_tier(
    repo: SendingLimitRepository,
    body: SendingTierCreate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> SendingTier:
    if repo.db.query(SendingTier).filter(SendingTier.name == body.name).first():
        raise ValidationException("A tier with this name already exists")

    data: Dict[str, Any] = body.model_dump()
    data["display_name"] = body.display_name or body.name
    tier = SendingTier(**data)
    repo.db.add(tier)
    repo.db.commit()
    repo.db.refresh(tier)
    logger.info("Sending tier created", tier=tier.name, admin=actor.email)
    record_audit(repo.db, "sending_tier_created", actor.email, None, {"tier": tier.name}, ip_address)
    return tier


def rollover_counters(repo: SendingLimitRepository, now: Optional[datetime] = None) -> Dict[str, int]:
    """Zero hourly counters from an earlier local hour and daily counters from an earlier local day.

    Leaves ``is_sending_enabled`` untouched; only ``unblock`` re-enables sending.
    """
    hourly = repo.reset_hourly_counters(hour_start_utc(now))
    daily = repo.reset_daily_counters(local_midnight_utc(now))
    return {"hourly_reset": hourly, "daily_reset": daily}

"""Quota service: mailbox usage and per-user storage quotas."""

from typing import Optional

import structlog

from mailportal.application.services.audit_service import record_audit
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.repositories.user_repository import UserRepository
from mailportal.domain.schemas.auth import SessionIdentity

logger = structlog.get_logger(__name__)

BYTES_PER_MB = 1024 * 1024


def bytes_to_mb(value: Optional[int]) -> int:
    """Display conversion, rounding half up."""
    return int((value or 0) / BYTES_PER_MB + 0.5)


def mb_to_bytes(value: int) -> int:
    return int(value) * BYTES_PER_MB


def get_usage(repo: UserRepository, email: str) -> dict:
    user = repo.get_by_email(email)
    if not user:
        raise EntityNotFoundException("User not found")

    mailbox = repo.get_or_create_mailbox(user)
    return {
        "email": mailbox.email,
        "quota_bytes": mailbox.quota_bytes,
        "usage_bytes": mailbox.usage_bytes,
        "quota_used_percentage": mailbox.quota_used_percentage,
    }


def set_quota(
    repo: UserRepository,
    email: str,
    quota_mb: Optional[int],
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> dict:
    if quota_mb is None or quota_mb < 0:
        raise ValidationException("Invalid quota value")

    user = repo.get_by_email(email)
    if not user:
        raise EntityNotFoundException("User not found")

    mailbox = repo.set_quota(user, mb_to_bytes(quota_mb))
    logger.info("Quota updated", email=email, quota_mb=quota_mb, admin=actor.email)

    record_audit(
        repo.db,
        "quota_updated",
        actor.email,
        email,
        f"Quota updated to {quota_mb} MB",
        ip_address,
    )
    return {
        "success": True,
        "email": email,
        "quota_mb": bytes_to_mb(mailbox.quota_bytes),
        "storage_used_mb": bytes_to_mb(mailbox.usage_bytes),
    }

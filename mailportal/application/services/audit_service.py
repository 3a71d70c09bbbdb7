"""Audit service: append-only record of administrative actions."""

from typing import Any, List, Optional

import structlog
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from mailportal.config import get_settings
from mailportal.domain.models.audit_log import AuditLog

settings = get_settings()
logger = structlog.get_logger(__name__)


def record_audit(
    db: Session,
    action_type: str,
    admin_email: str,
    target_email: Optional[str] = None,
    details: Any = None,
    ip_address: Optional[str] = None,
) -> AuditLog:
    """Insert and commit one audit row. Runs after the audited mutation has committed."""
    entry = AuditLog(
        action_type=action_type,
        admin_email=admin_email,
        target_user_email=target_email,
        details=details,
        ip_address=ip_address,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Audit recorded", action_type=action_type, admin=admin_email, target=target_email)
    return entry


def list_audit_logs(db: Session, search: Optional[str] = None, limit: Optional[int] = None) -> List[AuditLog]:
    query = db.query(AuditLog)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(
            or_(
                func.lower(AuditLog.admin_email).like(pattern),
                func.lower(AuditLog.action_type).like(pattern),
                func.lower(AuditLog.target_user_email).like(pattern),
            )
        )
    return (
        query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        .limit(limit or settings.AUDIT_LOG_LIMIT)
        .all()
    )

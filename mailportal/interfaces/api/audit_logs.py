"""Audit log API routes: read-only."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mailportal.application.services.audit_service import list_audit_logs
from mailportal.domain.schemas.audit_log import AuditLogRead
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.infrastructure.database import get_db
from mailportal.interfaces.api.deps import require_admin

router = APIRouter(prefix="/admin/audit-logs", tags=["Audit"])


@router.get("")
def get_audit_logs(
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    return [AuditLogRead.model_validate(entry) for entry in list_audit_logs(db, search=search)]

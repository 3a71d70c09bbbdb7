"""Pydantic schemas for audit log entries."""

from pydantic import BaseModel
from datetime import datetime
from typing import Any, Optional


class AuditLogRead(BaseModel):
    id: int
    action_type: str
    admin_email: str
    target_user_email: Optional[str] = None
    details: Optional[Any] = None
    ip_address: Optional[str] = None
    timestamp: datetime

    model_config = {"from_attributes": True}

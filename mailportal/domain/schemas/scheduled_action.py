"""Pydantic schemas for scheduled actions."""

from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict, List, Optional

from mailportal.domain.enums import BulkAction, ScheduledActionStatus


class ScheduledActionRead(BaseModel):
    id: str
    action_type: str
    target_type: str
    target_ids: List[str]
    action_data: Optional[Dict[str, Any]] = None
    scheduled_for: datetime
    status: ScheduledActionStatus
    created_by: Optional[str] = None
    executed_at: Optional[datetime] = None
    result: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ScheduledActionCreate(BaseModel):
    action_type: BulkAction
    target_type: str = "users"
    target_ids: List[str]
    action_data: Optional[Dict[str, Any]] = None
    scheduled_for: datetime


class ScheduledActionUpdate(BaseModel):
    action_type: Optional[BulkAction] = None
    target_ids: Optional[List[str]] = None
    action_data: Optional[Dict[str, Any]] = None
    scheduled_for: Optional[datetime] = None

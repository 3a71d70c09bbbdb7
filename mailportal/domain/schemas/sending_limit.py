"""Pydantic schemas for sending tiers, ledger rows and violations."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Dict, List, Optional


class SendingTierRead(BaseModel):
    id: str
    name: str
    display_name: str
    daily_limit: int
    hourly_limit: int
    price_monthly: float
    features: List[str] = []
    is_active: bool
    sort_order: int

    model_config = {"from_attributes": True}


class SendingTierCreate(BaseModel):
    name: str
    display_name: Optional[str] = None
    daily_limit: int = Field(ge=0)
    hourly_limit: int = Field(ge=0)
    price_monthly: float = 0
    features: List[str] = []
    is_active: bool = True
    sort_order: int = 0


class SendingLimitRead(BaseModel):
    id: str
    user_id: str
    tier_id: Optional[str] = None
    tier_name: str
    daily_limit: int
    hourly_limit: int
    emails_sent_today: int
    emails_sent_this_hour: int
    last_reset_date: Optional[datetime] = None
    last_reset_hour: Optional[datetime] = None
    is_sending_enabled: bool
    custom_limit_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SendingLimitCreate(BaseModel):
    user_id: str
    tier_name: str
    tier_id: Optional[str] = None
    daily_limit: Optional[int] = Field(default=None, ge=0)
    hourly_limit: Optional[int] = Field(default=None, ge=0)
    custom_limit_reason: Optional[str] = None


class SendingLimitUpdate(BaseModel):
    tier_id: Optional[str] = None
    tier_name: Optional[str] = None
    daily_limit: Optional[int] = Field(default=None, ge=0)
    hourly_limit: Optional[int] = Field(default=None, ge=0)
    is_sending_enabled: Optional[bool] = None
    custom_limit_reason: Optional[str] = None


class SendingStats(BaseModel):
    total_sent_today: int
    users_at_limit: int
    blocked_users: int
    violations_today: int
    avg_sending_per_user: int
    total_users_with_limits: int


class ViolationRead(BaseModel):
    id: str
    user_id: str
    violation_type: str
    attempted_count: int
    limit_at_time: int
    violation_details: Optional[Any] = None
    action_taken: Optional[str] = None
    admin_notes: Optional[str] = None
    is_resolved: bool
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ViolationCreate(BaseModel):
    user_id: str
    violation_type: str
    attempted_count: int
    limit_at_time: int
    violation_details: Optional[Dict[str, Any]] = None
    action_taken: Optional[str] = None


class ViolationResolve(BaseModel):
    admin_notes: Optional[str] = None

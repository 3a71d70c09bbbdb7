"""Pydantic schemas for end-user accounts, quotas and bulk actions."""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from mailportal.domain.enums import BulkAction


class UserRead(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    recovery_email: Optional[str] = None
    recovery_phone: Optional[str] = None
    is_suspended: bool
    failed_login_attempts: int
    locked_until: Optional[datetime] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserDetail(UserRead):
    is_locked: bool
    quota_mb: int
    storage_used_mb: int


class UserCreate(BaseModel):
    email: str
    first_name: str
    last_name: str
    password: Optional[str] = None
    recovery_email: Optional[str] = None
    recovery_phone: Optional[str] = None
    quota_mb: Optional[int] = Field(default=None, ge=0)


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    recovery_email: Optional[str] = None
    recovery_phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    quota_mb: Optional[int] = Field(default=None, ge=0)


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    recovery_email: Optional[str] = None
    recovery_phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None


class SuspendRequest(BaseModel):
    reason: Optional[str] = None


class PasswordReset(BaseModel):
    new_password: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str


class QuotaUpdate(BaseModel):
    quota_mb: int


class QuotaResult(BaseModel):
    success: bool = True
    email: str
    quota_mb: int
    storage_used_mb: int


class MailboxUsage(BaseModel):
    email: str
    quota_bytes: int
    usage_bytes: int
    quota_used_percentage: float


class BulkActionRequest(BaseModel):
    action: BulkAction
    emails: List[str] = []
    data: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None


class BulkActionResult(BaseModel):
    success: bool = True
    action: str
    affected_count: int

"""Pydantic schemas for the admin dashboard: overview, storage and activity."""

from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional


class ActivitySummary(BaseModel):
    active_last_7_days: int
    active_last_30_days: int
    never_logged_in: int


class StorageSummary(BaseModel):
    total_allocated: int
    total_used: int
    average_usage_percent: int
    users_over_90_percent: int


class DashboardStats(BaseModel):
    total_users: int
    active_users: int
    suspended_users: int
    total_domains: int
    storage: StorageSummary
    activity: ActivitySummary


class StorageTotals(BaseModel):
    total_allocated: int
    total_used: int
    users_over_quota: int
    users_near_quota: int
    total_users: int
    average_usage_percentage: int


class UserStorage(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    quota_mb: int
    storage_used_mb: int
    usage_percentage: int
    is_suspended: bool


class StorageReport(BaseModel):
    stats: StorageTotals
    users: List[UserStorage]


class ActivityTotals(BaseModel):
    total_users: int
    active_last_7_days: int
    active_last_30_days: int
    never_logged_in: int
    inactive_last_90_days: int
    suspended_users: int
    locked_users: int


class UserActivity(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    is_suspended: bool
    is_locked: bool
    issue_type: Optional[str] = None


class ActivityReport(BaseModel):
    stats: ActivityTotals
    recent_logins: List[UserActivity]
    users_with_issues: List[UserActivity]

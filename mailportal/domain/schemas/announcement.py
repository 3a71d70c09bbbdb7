"""Pydantic schemas for announcements."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from mailportal.domain.enums import AnnouncementPriority


class AnnouncementRead(BaseModel):
    id: str
    title: str
    message: str
    target_group: str
    priority: AnnouncementPriority
    published: bool
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AnnouncementCreate(BaseModel):
    title: str
    message: str
    target_group: str = "all"
    priority: AnnouncementPriority = AnnouncementPriority.NORMAL
    expires_at: Optional[datetime] = None


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = None
    message: Optional[str] = None
    target_group: Optional[str] = None
    priority: Optional[AnnouncementPriority] = None
    expires_at: Optional[datetime] = None

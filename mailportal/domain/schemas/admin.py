"""Pydantic schemas for administrator accounts."""

from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict, Optional


class AdminRead(BaseModel):
    id: str
    email: str
    name: str
    role_id: Optional[str] = None
    role_name: str
    permissions: Dict[str, Any] = {}
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None

    model_config = {"from_attributes": True}


class AdminCreate(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role_id: Optional[str] = None
    is_active: bool = True


class AdminUpdate(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None
    role_id: Optional[str] = None
    is_active: Optional[bool] = None

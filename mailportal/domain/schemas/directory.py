"""Pydantic schemas for domains, aliases, groups and user templates."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Dict, List, Optional


class DomainRead(BaseModel):
    id: str
    domain: str
    description: Optional[str] = None
    is_primary: bool
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DomainCreate(BaseModel):
    domain: str = Field(min_length=1)
    description: Optional[str] = None
    is_active: bool = True


class DomainUpdate(BaseModel):
    description: Optional[str] = None
    is_primary: Optional[bool] = None
    is_active: Optional[bool] = None


class AliasRead(BaseModel):
    id: str
    alias_address: str
    target_addresses: List[str]
    is_distribution_list: bool
    description: Optional[str] = None
    active: bool
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AliasCreate(BaseModel):
    alias_address: str = Field(min_length=1)
    target_addresses: List[str] = []
    is_distribution_list: bool = False
    description: Optional[str] = None
    active: bool = True


class AliasUpdate(BaseModel):
    target_addresses: Optional[List[str]] = None
    is_distribution_list: Optional[bool] = None
    description: Optional[str] = None
    active: Optional[bool] = None


class GroupMemberRead(BaseModel):
    id: str
    user_id: str
    email: Optional[str] = None
    added_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GroupRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: str
    member_count: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GroupDetail(GroupRead):
    members: List[GroupMemberRead] = []


class GroupCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    color: str = "blue"


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class GroupMembersChange(BaseModel):
    user_id: Optional[str] = None
    user_ids: List[str] = []

    def ids(self) -> List[str]:
        ids = list(self.user_ids)
        if self.user_id:
            ids.append(self.user_id)
        return list(dict.fromkeys(ids))


class TemplateRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    quota_bytes: int
    permissions: Dict[str, Any] = {}
    is_system_template: bool
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TemplateCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    quota_bytes: Optional[int] = Field(default=None, ge=0)
    quota_mb: Optional[int] = Field(default=None, ge=0)
    permissions: Dict[str, Any] = {}
    is_system_template: bool = False


class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    quota_bytes: Optional[int] = Field(default=None, ge=0)
    quota_mb: Optional[int] = Field(default=None, ge=0)
    permissions: Optional[Dict[str, Any]] = None
    is_system_template: Optional[bool] = None

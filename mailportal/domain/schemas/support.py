"""Pydantic schemas for support tickets."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from mailportal.domain.enums import TicketStatus


class TicketRead(BaseModel):
    id: str
    ticket_type: str
    user_email: str
    status: TicketStatus
    priority: str
    description: str
    resolution_notes: Optional[str] = None
    assigned_to: Optional[str] = None
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TicketCreate(BaseModel):
    ticket_type: Optional[str] = None
    description: Optional[str] = None
    priority: str = "normal"
    user_email: Optional[str] = None


class TicketUpdate(BaseModel):
    status: Optional[TicketStatus] = None
    priority: Optional[str] = None
    assigned_to: Optional[str] = None
    resolution_notes: Optional[str] = None


class TicketRejection(BaseModel):
    rejection_reason: Optional[str] = None


class TicketResolution(BaseModel):
    resolution_notes: Optional[str] = None

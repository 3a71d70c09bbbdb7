"""Support ticket API routes: admin side."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from mailportal.application.services import support_service
from mailportal.domain.enums import TicketStatus
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.support import (
    TicketCreate,
    TicketRead,
    TicketRejection,
    TicketResolution,
    TicketUpdate,
)
from mailportal.infrastructure.database import get_db
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import require_admin

router = APIRouter(prefix="/admin/support/tickets", tags=["Support"])


@router.get("")
def list_tickets(
    status_filter: Optional[TicketStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    return [TicketRead.model_validate(t) for t in support_service.list_tickets(db, status_filter)]


@router.post("", response_model=TicketRead, status_code=status.HTTP_201_CREATED)
def create_ticket(
    body: TicketCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    return TicketRead.model_validate(support_service.admin_create_ticket(db, body, admin, client_ip(request)))


@router.get("/{ticket_id}", response_model=TicketRead)
def get_ticket(
    ticket_id: str,
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    return TicketRead.model_validate(support_service.get_ticket(db, ticket_id))


@router.put("/{ticket_id}", response_model=TicketRead)
def update_ticket(
    ticket_id: str,
    body: TicketUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    return TicketRead.model_validate(support_service.update_ticket(db, ticket_id, body, admin, client_ip(request)))


@router.delete("/{ticket_id}")
def delete_ticket(
    ticket_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    support_service.delete_ticket(db, ticket_id, admin, client_ip(request))
    return {"success": True}


@router.post("/{ticket_id}/reject", response_model=TicketRead)
def reject_ticket(
    ticket_id: str,
    request: Request,
    body: Optional[TicketRejection] = None,
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    reason = body.rejection_reason if body else None
    return TicketRead.model_validate(support_service.reject_ticket(db, ticket_id, admin, reason, client_ip(request)))


@router.post("/{ticket_id}/resolve", response_model=TicketRead)
def resolve_ticket(
    ticket_id: str,
    request: Request,
    body: Optional[TicketResolution] = None,
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    notes = body.resolution_notes if body else None
    return TicketRead.model_validate(support_service.resolve_ticket(db, ticket_id, admin, notes, client_ip(request)))

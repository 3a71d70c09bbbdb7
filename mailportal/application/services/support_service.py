"""Support service: tickets raised by end users and handled by admins."""

from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from mailportal.application.services.audit_service import record_audit
from mailportal.core.clock import utcnow
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.enums import TicketStatus
from mailportal.domain.models.support_ticket import SupportTicket
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.support import TicketCreate, TicketUpdate

logger = structlog.get_logger(__name__)

DEFAULT_REJECTION_NOTE = "Request rejected"


def _set_status(ticket: SupportTicket, target: TicketStatus) -> None:
    current = TicketStatus(ticket.status)
    if not current.can_transition_to(target):
        raise ValidationException(f"Cannot move a {current.value} ticket to {target.value}")
    ticket.status = target.value


def list_tickets(db: Session, status: Optional[TicketStatus] = None) -> List[SupportTicket]:
    query = db.query(SupportTicket)
    if status:
        query = query.filter(SupportTicket.status == status.value)
    return query.order_by(SupportTicket.created_at.desc()).all()


def list_user_tickets(db: Session, email: str) -> List[SupportTicket]:
    return (
        db.query(SupportTicket)
        .filter(SupportTicket.user_email == email)
        .order_by(SupportTicket.created_at.desc())
        .all()
    )


def get_ticket(db: Session, ticket_id: str) -> SupportTicket:
    ticket = db.query(SupportTicket).filter(SupportTicket.id == ticket_id).first()
    if not ticket:
        raise EntityNotFoundException("Ticket not found")
    return ticket


def create_ticket(db: Session, body: TicketCreate, user_email: str) -> SupportTicket:
    if not body.ticket_type or not body.description:
        raise ValidationException("Ticket type and description are required")

    ticket = SupportTicket(
        ticket_type=body.ticket_type,
        description=body.description,
        priority=body.priority or "normal",
        user_email=user_email,
        status=TicketStatus.PENDING.value,
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    logger.info("Support ticket opened", ticket_id=ticket.id, ticket_type=ticket.ticket_type, email=user_email)
    return ticket


def admin_create_ticket(
    db: Session, body: TicketCreate, actor: SessionIdentity, ip_address: Optional[str] = None
) -> SupportTicket:
    if not body.user_email:
        raise ValidationException("user_email is required")
    ticket = create_ticket(db, body, body.user_email)
    record_audit(db, "ticket_created", actor.email, ticket.user_email, {"ticket_id": ticket.id}, ip_address)
    return ticket


def update_ticket(
    db: Session,
    ticket_id: str,
    body: TicketUpdate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> SupportTicket:
    ticket = get_ticket(db, ticket_id)
    changes = body.model_dump(exclude_unset=True)

    status = changes.pop("status", None)
    if status is not None:
        _set_status(ticket, status)
        if status in (TicketStatus.RESOLVED, TicketStatus.REJECTED):
            ticket.resolved_by = actor.email
            ticket.resolved_at = utcnow()
        elif status is TicketStatus.PENDING:
            ticket.resolved_by = None
            ticket.resolved_at = None
    if "priority" in changes and not changes["priority"]:
        raise ValidationException("priority cannot be empty")
    for field, value in changes.items():
        setattr(ticket, field, value)

    db.commit()
    db.refresh(ticket)
    record_audit(
        db,
        "ticket_updated",
        actor.email,
        ticket.user_email,
        {"ticket_id": ticket.id, "status": ticket.status},
        ip_address,
    )
    return ticket


def _close(
    db: Session,
    ticket_id: str,
    target: TicketStatus,
    notes: Optional[str],
    actor: SessionIdentity,
    ip_address: Optional[str],
) -> SupportTicket:
    ticket = get_ticket(db, ticket_id)
    _set_status(ticket, target)
    ticket.resolution_notes = notes
    ticket.resolved_by = actor.email
    ticket.resolved_at = utcnow()
    db.commit()
    db.refresh(ticket)

    logger.info("Support ticket closed", ticket_id=ticket.id, status=ticket.status, admin=actor.email)
    record_audit(
        db,
        f"ticket_{target.value}",
        actor.email,
        ticket.user_email,
        {"ticket_id": ticket.id, "notes": notes},
        ip_address,
    )
    return ticket


def reject_ticket(
    db: Session,
    ticket_id: str,
    actor: SessionIdentity,
    reason: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> SupportTicket:
    return _close(db, ticket_id, TicketStatus.REJECTED, reason or DEFAULT_REJECTION_NOTE, actor, ip_address)


def resolve_ticket(
    db: Session,
    ticket_id: str,
    actor: SessionIdentity,
    notes: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> SupportTicket:
    return _close(db, ticket_id, TicketStatus.RESOLVED, notes, actor, ip_address)


def delete_ticket(db: Session, ticket_id: str, actor: SessionIdentity, ip_address: Optional[str] = None) -> None:
    ticket = get_ticket(db, ticket_id)
    email = ticket.user_email
    db.delete(ticket)
    db.commit()
    record_audit(db, "ticket_deleted", actor.email, email, {"ticket_id": ticket_id}, ip_address)

"""Domain service: mail domains hosted by the portal."""

from typing import List, Optional

import structlog

from mailportal.application.services.audit_service import record_audit
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.models.mail_domain import MailDomain
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.directory import DomainCreate, DomainUpdate

logger = structlog.get_logger(__name__)


def list_domains(repo: BaseRepository[MailDomain]) -> List[MailDomain]:
    return repo.list(order_by=MailDomain.created_at.desc())


def get_domain(repo: BaseRepository[MailDomain], domain_id: str) -> MailDomain:
    domain = repo.get_by_id(domain_id)
    if not domain:
        raise EntityNotFoundException("Domain not found")
    return domain


def _clear_primary(repo: BaseRepository[MailDomain], keep_id: str) -> None:
    repo.db.query(MailDomain).filter(
        MailDomain.id != keep_id, MailDomain.is_primary.is_(True)
    ).update({MailDomain.is_primary: False}, synchronize_session=False)
    repo.db.commit()


def create_domain(
    repo: BaseRepository[MailDomain],
    body: DomainCreate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> MailDomain:
    name = body.domain.strip().lower()
    if repo.find_one(domain=name):
        raise ValidationException("Domain already exists")

    is_first = repo.count() == 0
    domain = repo.create(
        {
            "domain": name,
            "description": body.description,
            "is_active": body.is_active,
            "is_primary": is_first,
        }
    )
    logger.info("Domain created", domain=name, primary=is_first, admin=actor.email)
    record_audit(repo.db, "domain_created", actor.email, None, {"domain": name}, ip_address)
    return domain


def update_domain(
    repo: BaseRepository[MailDomain],
    domain_id: str,
    body: DomainUpdate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> MailDomain:
    domain = get_domain(repo, domain_id)
    changes = body.model_dump(exclude_unset=True)
    for field in ("is_primary", "is_active"):
        if field in changes and changes[field] is None:
            raise ValidationException(f"{field} cannot be null")

    domain = repo.update(domain, changes)
    if changes.get("is_primary"):
        # One primary domain at a time
        _clear_primary(repo, domain.id)
        repo.db.refresh(domain)

    record_audit(
        repo.db,
        "domain_updated",
        actor.email,
        None,
        {"domain": domain.domain, "changes": changes},
        ip_address,
    )
    return domain


def delete_domain(
    repo: BaseRepository[MailDomain], domain_id: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> None:
    domain = get_domain(repo, domain_id)
    name = domain.domain
    repo.delete(domain)
    logger.info("Domain deleted", domain=name, admin=actor.email)
    record_audit(repo.db, "domain_deleted", actor.email, None, {"domain": name}, ip_address)

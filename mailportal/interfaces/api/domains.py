"""Domain API routes: CRUD for hosted mail domains."""

from fastapi import APIRouter, Depends, Request, status

from mailportal.application.services import domain_service
from mailportal.domain.models.mail_domain import MailDomain
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.directory import DomainCreate, DomainRead, DomainUpdate
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import require_admin
from mailportal.interfaces.deps import get_domain_repository

router = APIRouter(prefix="/admin/domains", tags=["Domains"])


@router.get("")
def list_domains(
    repo: BaseRepository[MailDomain] = Depends(get_domain_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [DomainRead.model_validate(d) for d in domain_service.list_domains(repo)]


@router.post("", response_model=DomainRead, status_code=status.HTTP_201_CREATED)
def create_domain(
    body: DomainCreate,
    request: Request,
    repo: BaseRepository[MailDomain] = Depends(get_domain_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return DomainRead.model_validate(domain_service.create_domain(repo, body, admin, client_ip(request)))


@router.get("/{domain_id}", response_model=DomainRead)
def get_domain(
    domain_id: str,
    repo: BaseRepository[MailDomain] = Depends(get_domain_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return DomainRead.model_validate(domain_service.get_domain(repo, domain_id))


@router.put("/{domain_id}", response_model=DomainRead)
def update_domain(
    domain_id: str,
    body: DomainUpdate,
    request: Request,
    repo: BaseRepository[MailDomain] = Depends(get_domain_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    domain = domain_service.update_domain(repo, domain_id, body, admin, client_ip(request))
    return DomainRead.model_validate(domain)


@router.delete("/{domain_id}")
def delete_domain(
    domain_id: str,
    request: Request,
    repo: BaseRepository[MailDomain] = Depends(get_domain_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    domain_service.delete_domain(repo, domain_id, admin, client_ip(request))
    return {"success": True}

"""Alias API routes: forwarding aliases and distribution lists."""

from fastapi import APIRouter, Depends, Request, status

from mailportal.application.services import alias_service
from mailportal.domain.models.alias import EmailAlias
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.directory import AliasCreate, AliasRead, AliasUpdate
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import require_admin
from mailportal.interfaces.deps import get_alias_repository

router = APIRouter(prefix="/admin/aliases", tags=["Aliases"])


@router.get("")
def list_aliases(
    repo: BaseRepository[EmailAlias] = Depends(get_alias_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [AliasRead.model_validate(a) for a in alias_service.list_aliases(repo)]


@router.post("", response_model=AliasRead, status_code=status.HTTP_201_CREATED)
def create_alias(
    body: AliasCreate,
    request: Request,
    repo: BaseRepository[EmailAlias] = Depends(get_alias_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return AliasRead.model_validate(alias_service.create_alias(repo, body, admin, client_ip(request)))


@router.get("/{alias_id}", response_model=AliasRead)
def get_alias(
    alias_id: str,
    repo: BaseRepository[EmailAlias] = Depends(get_alias_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return AliasRead.model_validate(alias_service.get_alias(repo, alias_id))


@router.put("/{alias_id}", response_model=AliasRead)
def update_alias(
    alias_id: str,
    body: AliasUpdate,
    request: Request,
    repo: BaseRepository[EmailAlias] = Depends(get_alias_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return AliasRead.model_validate(alias_service.update_alias(repo, alias_id, body, admin, client_ip(request)))


@router.delete("/{alias_id}")
def delete_alias(
    alias_id: str,
    request: Request,
    repo: BaseRepository[EmailAlias] = Depends(get_alias_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    alias_service.delete_alias(repo, alias_id, admin, client_ip(request))
    return {"success": True}

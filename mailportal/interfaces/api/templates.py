"""Template API routes: user templates."""

from fastapi import APIRouter, Depends, Request, status

from mailportal.application.services import template_service
from mailportal.domain.models.template import UserTemplate
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.directory import TemplateCreate, TemplateRead, TemplateUpdate
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import require_admin
from mailportal.interfaces.deps import get_template_repository

router = APIRouter(prefix="/admin/templates", tags=["Templates"])


@router.get("")
def list_templates(
    repo: BaseRepository[UserTemplate] = Depends(get_template_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [TemplateRead.model_validate(t) for t in template_service.list_templates(repo)]


@router.post("", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
def create_template(
    body: TemplateCreate,
    request: Request,
    repo: BaseRepository[UserTemplate] = Depends(get_template_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return TemplateRead.model_validate(template_service.create_template(repo, body, admin, client_ip(request)))


@router.get("/{template_id}", response_model=TemplateRead)
def get_template(
    template_id: str,
    repo: BaseRepository[UserTemplate] = Depends(get_template_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return TemplateRead.model_validate(template_service.get_template(repo, template_id))


@router.put("/{template_id}", response_model=TemplateRead)
def update_template(
    template_id: str,
    body: TemplateUpdate,
    request: Request,
    repo: BaseRepository[UserTemplate] = Depends(get_template_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    template = template_service.update_template(repo, template_id, body, admin, client_ip(request))
    return TemplateRead.model_validate(template)


@router.delete("/{template_id}")
def delete_template(
    template_id: str,
    request: Request,
    repo: BaseRepository[UserTemplate] = Depends(get_template_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    template_service.delete_template(repo, template_id, admin, client_ip(request))
    return {"success": True}

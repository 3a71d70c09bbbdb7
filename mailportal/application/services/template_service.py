"""Template service: reusable defaults for new accounts."""

from typing import List, Optional

import structlog

from mailportal.application.services.audit_service import record_audit
from mailportal.application.services.quota_service import mb_to_bytes
from mailportal.config import get_settings
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.models.template import UserTemplate
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.directory import TemplateCreate, TemplateUpdate

settings = get_settings()
logger = structlog.get_logger(__name__)


def list_templates(repo: BaseRepository[UserTemplate]) -> List[UserTemplate]:
    return repo.list(order_by=UserTemplate.name.asc())


def get_template(repo: BaseRepository[UserTemplate], template_id: str) -> UserTemplate:
    template = repo.get_by_id(template_id)
    if not template:
        raise EntityNotFoundException("Template not found")
    return template


def create_template(
    repo: BaseRepository[UserTemplate],
    body: TemplateCreate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> UserTemplate:
    if not body.name or not body.name.strip():
        raise ValidationException("Template name is required")

    if body.quota_bytes is not None:
        quota_bytes = body.quota_bytes
    elif body.quota_mb is not None:
        quota_bytes = mb_to_bytes(body.quota_mb)
    else:
        quota_bytes = settings.DEFAULT_QUOTA_BYTES

    template = repo.create(
        {
            "name": body.name.strip(),
            "description": body.description,
            "quota_bytes": quota_bytes,
            "permissions": body.permissions,
            "is_system_template": body.is_system_template,
            "created_by": actor.user_id,
        }
    )
    logger.info("Template created", template=template.name, admin=actor.email)
    record_audit(repo.db, "template_created", actor.email, None, {"template": template.name}, ip_address)
    return template


def update_template(
    repo: BaseRepository[UserTemplate],
    template_id: str,
    body: TemplateUpdate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> UserTemplate:
    template = get_template(repo, template_id)
    changes = body.model_dump(exclude_unset=True)
    quota_mb = changes.pop("quota_mb", None)
    if quota_mb is not None and "quota_bytes" not in changes:
        changes["quota_bytes"] = mb_to_bytes(quota_mb)
    for field in ("name", "quota_bytes", "permissions", "is_system_template"):
        if field in changes and changes[field] is None:
            raise ValidationException(f"{field} cannot be null")

    template = repo.update(template, changes)
    record_audit(
        repo.db,
        "template_updated",
        actor.email,
        None,
        {"template": template.name, "fields": sorted(changes)},
        ip_address,
    )
    return template


def delete_template(
    repo: BaseRepository[UserTemplate], template_id: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> None:
    template = get_template(repo, template_id)
    name = template.name
    repo.delete(template)
    logger.info("Template deleted", template=name, admin=actor.email)
    record_audit(repo.db, "template_deleted", actor.email, None, {"template": name}, ip_address)

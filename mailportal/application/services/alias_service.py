"""Alias service: forwarding aliases and distribution lists."""

from typing import List, Optional

import structlog

from mailportal.application.services.audit_service import record_audit
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.models.alias import EmailAlias
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.directory import AliasCreate, AliasUpdate

logger = structlog.get_logger(__name__)


def _clean_targets(targets: Optional[List[str]]) -> List[str]:
    cleaned = [t.strip() for t in targets or [] if t and t.strip()]
    if not cleaned:
        raise ValidationException("At least one target address is required")
    return list(dict.fromkeys(cleaned))


def list_aliases(repo: BaseRepository[EmailAlias]) -> List[EmailAlias]:
    return repo.list(order_by=EmailAlias.created_at.desc())


def get_alias(repo: BaseRepository[EmailAlias], alias_id: str) -> EmailAlias:
    alias = repo.get_by_id(alias_id)
    if not alias:
        raise EntityNotFoundException("Alias not found")
    return alias


def create_alias(
    repo: BaseRepository[EmailAlias],
    body: AliasCreate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> EmailAlias:
    address = body.alias_address.strip()
    if repo.db.query(EmailAlias).filter(EmailAlias.alias_address == address).first():
        raise ValidationException("Alias already exists")

    alias = repo.create(
        {
            "alias_address": address,
            "target_addresses": _clean_targets(body.target_addresses),
            "is_distribution_list": body.is_distribution_list,
            "description": body.description,
            "active": body.active,
            "created_by": actor.user_id,
        }
    )
    logger.info("Alias created", alias=address, targets=len(alias.target_addresses), admin=actor.email)
    record_audit(repo.db, "alias_created", actor.email, address, {"targets": alias.target_addresses}, ip_address)
    return alias


def update_alias(
    repo: BaseRepository[EmailAlias],
    alias_id: str,
    body: AliasUpdate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> EmailAlias:
    alias = get_alias(repo, alias_id)
    changes = body.model_dump(exclude_unset=True)
    if "target_addresses" in changes:
        changes["target_addresses"] = _clean_targets(changes["target_addresses"])
    for field in ("is_distribution_list", "active"):
        if field in changes and changes[field] is None:
            raise ValidationException(f"{field} cannot be null")

    alias = repo.update(alias, changes)
    record_audit(repo.db, "alias_updated", actor.email, alias.alias_address, {"fields": sorted(changes)}, ip_address)
    return alias


def delete_alias(
    repo: BaseRepository[EmailAlias], alias_id: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> None:
    alias = get_alias(repo, alias_id)
    address = alias.alias_address
    repo.delete(alias)
    logger.info("Alias deleted", alias=address, admin=actor.email)
    record_audit(repo.db, "alias_deleted", actor.email, address, None, ip_address)

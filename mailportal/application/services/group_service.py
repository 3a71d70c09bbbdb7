"""Group service: user groups and group membership."""

from typing import Dict, List, Optional

import structlog

from mailportal.application.services.audit_service import record_audit
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.models.group import UserGroup, UserGroupMember
from mailportal.domain.models.user import User
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.directory import GroupCreate, GroupUpdate

logger = structlog.get_logger(__name__)


def list_groups(repo: BaseRepository[UserGroup]) -> List[UserGroup]:
    return repo.list(order_by=UserGroup.created_at.desc())


def get_group(repo: BaseRepository[UserGroup], group_id: str) -> UserGroup:
    group = repo.get_by_id(group_id)
    if not group:
        raise EntityNotFoundException("Group not found")
    return group


def create_group(
    repo: BaseRepository[UserGroup],
    body: GroupCreate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> UserGroup:
    group = repo.create(body.model_dump())
    logger.info("Group created", group=group.name, admin=actor.email)
    record_audit(repo.db, "group_created", actor.email, None, {"group": group.name}, ip_address)
    return group


def update_group(
    repo: BaseRepository[UserGroup],
    group_id: str,
    body: GroupUpdate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> UserGroup:
    group = get_group(repo, group_id)
    changes = body.model_dump(exclude_unset=True)
    for field in ("name", "color"):
        if field in changes and not changes[field]:
            raise ValidationException(f"{field} cannot be empty")

    group = repo.update(group, changes)
    record_audit(repo.db, "group_updated", actor.email, None, {"group": group.name, "fields": sorted(changes)}, ip_address)
    return group


def delete_group(
    repo: BaseRepository[UserGroup], group_id: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> None:
    group = get_group(repo, group_id)
    name = group.name
    repo.db.query(UserGroupMember).filter(UserGroupMember.group_id == group.id).delete(synchronize_session=False)
    repo.db.commit()
    repo.db.expire(group)
    repo.delete(group)
    logger.info("Group deleted", group=name, admin=actor.email)
    record_audit(repo.db, "group_deleted", actor.email, None, {"group": name}, ip_address)


def add_members(
    repo: BaseRepository[UserGroup],
    group_id: str,
    user_ids: List[str],
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> Dict[str, object]:
    if not user_ids:
        raise ValidationException("User ID(s) required")
    group = get_group(repo, group_id)

    existing = {member.user_id for member in group.members}
    known = {
        row.id for row in repo.db.query(User.id).filter(User.id.in_(user_ids)).all()
    }
    added = 0
    for user_id in user_ids:
        if user_id in existing or user_id not in known:
            continue
        repo.db.add(UserGroupMember(group_id=group.id, user_id=user_id))
        existing.add(user_id)
        added += 1
    repo.db.commit()

    logger.info("Group members added", group=group.name, added=added, admin=actor.email)
    record_audit(
        repo.db,
        "group_members_added",
        actor.email,
        None,
        {"group": group.name, "added_count": added},
        ip_address,
    )
    return {"success": True, "added_count": added}


def remove_members(
    repo: BaseRepository[UserGroup],
    group_id: str,
    user_ids: List[str],
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> Dict[str, object]:
    if not user_ids:
        raise ValidationException("User ID(s) required")
    group = get_group(repo, group_id)

    removed = (
        repo.db.query(UserGroupMember)
        .filter(UserGroupMember.group_id == group.id, UserGroupMember.user_id.in_(user_ids))
        .delete(synchronize_session=False)
    )
    repo.db.commit()
    repo.db.expire(group)

    logger.info("Group members removed", group=group.name, removed=removed, admin=actor.email)
    record_audit(
        repo.db,
        "group_members_removed",
        actor.email,
        None,
        {"group": group.name, "removed_count": removed},
        ip_address,
    )
    return {"success": True, "removed_count": removed}

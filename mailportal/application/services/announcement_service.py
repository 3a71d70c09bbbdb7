"""Announcement service: admin authoring and the end-user feed."""

from typing import List, Optional

import structlog

from mailportal.application.services.audit_service import record_audit
from mailportal.core.clock import utcnow
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.enums import AnnouncementPriority
from mailportal.domain.models.announcement import Announcement
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.announcement import AnnouncementCreate, AnnouncementUpdate
from mailportal.domain.schemas.auth import SessionIdentity

logger = structlog.get_logger(__name__)


def list_announcements(repo: BaseRepository[Announcement]) -> List[Announcement]:
    return repo.list(order_by=Announcement.created_at.desc())


def get_announcement(repo: BaseRepository[Announcement], announcement_id: str) -> Announcement:
    announcement = repo.get_by_id(announcement_id)
    if not announcement:
        raise EntityNotFoundException("Announcement not found")
    return announcement


def create_announcement(
    repo: BaseRepository[Announcement],
    body: AnnouncementCreate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> Announcement:
    if not body.title.strip() or not body.message.strip():
        raise ValidationException("Title and message are required")

    data = body.model_dump()
    data["priority"] = body.priority.value
    data["created_by"] = actor.user_id
    announcement = repo.create(data)
    logger.info("Announcement created", title=announcement.title, admin=actor.email)
    record_audit(repo.db, "announcement_created", actor.email, None, {"title": announcement.title}, ip_address)
    return announcement


def update_announcement(
    repo: BaseRepository[Announcement],
    announcement_id: str,
    body: AnnouncementUpdate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> Announcement:
    announcement = get_announcement(repo, announcement_id)
    changes = body.model_dump(exclude_unset=True)
    for field in ("title", "message", "target_group", "priority"):
        if field in changes and not changes[field]:
            raise ValidationException(f"{field} cannot be empty")
    if "priority" in changes:
        changes["priority"] = AnnouncementPriority(changes["priority"]).value

    announcement = repo.update(announcement, changes)
    record_audit(
        repo.db,
        "announcement_updated",
        actor.email,
        None,
        {"title": announcement.title, "fields": sorted(changes)},
        ip_address,
    )
    return announcement


def delete_announcement(
    repo: BaseRepository[Announcement], announcement_id: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> None:
    announcement = get_announcement(repo, announcement_id)
    title = announcement.title
    repo.delete(announcement)
    record_audit(repo.db, "announcement_deleted", actor.email, None, {"title": title}, ip_address)


def set_published(
    repo: BaseRepository[Announcement],
    announcement_id: str,
    published: bool,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> Announcement:
    announcement = get_announcement(repo, announcement_id)
    changes = {"published": published}
    if published:
        changes["published_at"] = utcnow()
    announcement = repo.update(announcement, changes)

    action = "announcement_published" if published else "announcement_unpublished"
    logger.info("Announcement visibility changed", title=announcement.title, published=published, admin=actor.email)
    record_audit(repo.db, action, actor.email, None, {"title": announcement.title}, ip_address)
    return announcement


def visible_announcements(repo: BaseRepository[Announcement]) -> List[Announcement]:
    """Published, unexpired announcements: most urgent first, then newest."""
    now = utcnow()
    published = (
        repo.db.query(Announcement)
        .filter(Announcement.published.is_(True))
        .order_by(Announcement.published_at.desc())
        .all()
    )
    visible = [a for a in published if a.is_visible(now)]
    # Stable sort keeps the published_at ordering within one priority
    return sorted(visible, key=lambda a: AnnouncementPriority(a.priority).rank, reverse=True)

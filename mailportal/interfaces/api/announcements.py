"""Announcement API routes: admin authoring and the public feed."""

from fastapi import APIRouter, Depends, Request, status

from mailportal.application.services import announcement_service
from mailportal.domain.models.announcement import Announcement
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.announcement import AnnouncementCreate, AnnouncementRead, AnnouncementUpdate
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import get_session_identity, require_admin
from mailportal.interfaces.deps import get_announcement_repository

router = APIRouter(prefix="/admin/announcements", tags=["Announcements"])
feed_router = APIRouter(prefix="/announcements", tags=["Announcements"])


@feed_router.get("")
def list_visible_announcements(
    repo: BaseRepository[Announcement] = Depends(get_announcement_repository),
    identity: SessionIdentity = Depends(get_session_identity),
):
    return [AnnouncementRead.model_validate(a) for a in announcement_service.visible_announcements(repo)]


@router.get("")
def list_announcements(
    repo: BaseRepository[Announcement] = Depends(get_announcement_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [AnnouncementRead.model_validate(a) for a in announcement_service.list_announcements(repo)]


@router.post("", response_model=AnnouncementRead, status_code=status.HTTP_201_CREATED)
def create_announcement(
    body: AnnouncementCreate,
    request: Request,
    repo: BaseRepository[Announcement] = Depends(get_announcement_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    announcement = announcement_service.create_announcement(repo, body, admin, client_ip(request))
    return AnnouncementRead.model_validate(announcement)


@router.get("/{announcement_id}", response_model=AnnouncementRead)
def get_announcement(
    announcement_id: str,
    repo: BaseRepository[Announcement] = Depends(get_announcement_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return AnnouncementRead.model_validate(announcement_service.get_announcement(repo, announcement_id))


@router.put("/{announcement_id}", response_model=AnnouncementRead)
def update_announcement(
    announcement_id: str,
    body: AnnouncementUpdate,
    request: Request,
    repo: BaseRepository[Announcement] = Depends(get_announcement_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    announcement = announcement_service.update_announcement(repo, announcement_id, body, admin, client_ip(request))
    return AnnouncementRead.model_validate(announcement)


@router.delete("/{announcement_id}")
def delete_announcement(
    announcement_id: str,
    request: Request,
    repo: BaseRepository[Announcement] = Depends(get_announcement_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    announcement_service.delete_announcement(repo, announcement_id, admin, client_ip(request))
    return {"success": True}


@router.post("/{announcement_id}/publish", response_model=AnnouncementRead)
def publish_announcement(
    announcement_id: str,
    request: Request,
    repo: BaseRepository[Announcement] = Depends(get_announcement_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    announcement = announcement_service.set_published(repo, announcement_id, True, admin, client_ip(request))
    return AnnouncementRead.model_validate(announcement)


@router.post("/{announcement_id}/unpublish", response_model=AnnouncementRead)
def unpublish_announcement(
    announcement_id: str,
    request: Request,
    repo: BaseRepository[Announcement] = Depends(get_announcement_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    announcement = announcement_service.set_published(repo, announcement_id, False, admin, client_ip(request))
    return AnnouncementRead.model_validate(announcement)

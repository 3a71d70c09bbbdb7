"""Group API routes: groups and membership."""

from fastapi import APIRouter, Depends, Request, status

from mailportal.application.services import group_service
from mailportal.domain.models.group import UserGroup
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.directory import (
    GroupCreate,
    GroupDetail,
    GroupMembersChange,
    GroupRead,
    GroupUpdate,
)
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import require_admin
from mailportal.interfaces.deps import get_group_repository

router = APIRouter(prefix="/admin/groups", tags=["Groups"])


@router.get("")
def list_groups(
    repo: BaseRepository[UserGroup] = Depends(get_group_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [GroupRead.model_validate(g) for g in group_service.list_groups(repo)]


@router.post("", response_model=GroupRead, status_code=status.HTTP_201_CREATED)
def create_group(
    body: GroupCreate,
    request: Request,
    repo: BaseRepository[UserGroup] = Depends(get_group_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return GroupRead.model_validate(group_service.create_group(repo, body, admin, client_ip(request)))


@router.get("/{group_id}", response_model=GroupDetail)
def get_group(
    group_id: str,
    repo: BaseRepository[UserGroup] = Depends(get_group_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return GroupDetail.model_validate(group_service.get_group(repo, group_id))


@router.put("/{group_id}", response_model=GroupRead)
def update_group(
    group_id: str,
    body: GroupUpdate,
    request: Request,
    repo: BaseRepository[UserGroup] = Depends(get_group_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return GroupRead.model_validate(group_service.update_group(repo, group_id, body, admin, client_ip(request)))


@router.delete("/{group_id}")
def delete_group(
    group_id: str,
    request: Request,
    repo: BaseRepository[UserGroup] = Depends(get_group_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    group_service.delete_group(repo, group_id, admin, client_ip(request))
    return {"success": True}


@router.post("/{group_id}/members")
def add_members(
    group_id: str,
    body: GroupMembersChange,
    request: Request,
    repo: BaseRepository[UserGroup] = Depends(get_group_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return group_service.add_members(repo, group_id, body.ids(), admin, client_ip(request))


@router.delete("/{group_id}/members")
def remove_members(
    group_id: str,
    body: GroupMembersChange,
    request: Request,
    repo: BaseRepository[UserGroup] = Depends(get_group_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return group_service.remove_members(repo, group_id, body.ids(), admin, client_ip(request))

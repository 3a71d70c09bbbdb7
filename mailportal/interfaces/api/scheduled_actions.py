"""Scheduled action API routes."""

from fastapi import APIRouter, Depends, Request, status

from mailportal.application.services import scheduled_action_service
from mailportal.domain.models.scheduled_action import ScheduledAction
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.scheduled_action import (
    ScheduledActionCreate,
    ScheduledActionRead,
    ScheduledActionUpdate,
)
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import require_admin
from mailportal.interfaces.deps import get_scheduled_action_repository

router = APIRouter(prefix="/admin/scheduled-actions", tags=["Scheduled Actions"])


@router.get("")
def list_actions(
    repo: BaseRepository[ScheduledAction] = Depends(get_scheduled_action_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [ScheduledActionRead.model_validate(a) for a in scheduled_action_service.list_actions(repo)]


@router.post("", response_model=ScheduledActionRead, status_code=status.HTTP_201_CREATED)
def create_action(
    body: ScheduledActionCreate,
    request: Request,
    repo: BaseRepository[ScheduledAction] = Depends(get_scheduled_action_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    action = scheduled_action_service.create_action(repo, body, admin, client_ip(request))
    return ScheduledActionRead.model_validate(action)


@router.get("/{action_id}", response_model=ScheduledActionRead)
def get_action(
    action_id: str,
    repo: BaseRepository[ScheduledAction] = Depends(get_scheduled_action_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return ScheduledActionRead.model_validate(scheduled_action_service.get_action(repo, action_id))


@router.put("/{action_id}", response_model=ScheduledActionRead)
def update_action(
    action_id: str,
    body: ScheduledActionUpdate,
    request: Request,
    repo: BaseRepository[ScheduledAction] = Depends(get_scheduled_action_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    action = scheduled_action_service.update_action(repo, action_id, body, admin, client_ip(request))
    return ScheduledActionRead.model_validate(action)


@router.delete("/{action_id}")
def delete_action(
    action_id: str,
    request: Request,
    repo: BaseRepository[ScheduledAction] = Depends(get_scheduled_action_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    scheduled_action_service.delete_action(repo, action_id, admin, client_ip(request))
    return {"success": True}


@router.post("/{action_id}/cancel", response_model=ScheduledActionRead)
def cancel_action(
    action_id: str,
    request: Request,
    repo: BaseRepository[ScheduledAction] = Depends(get_scheduled_action_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    action = scheduled_action_service.cancel_action(repo, action_id, admin, client_ip(request))
    return ScheduledActionRead.model_validate(action)

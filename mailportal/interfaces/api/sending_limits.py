"""Sending-limit API routes: ledger rows, stats, violations and tiers."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from mailportal.application.services import sending_limit_service
from mailportal.domain.repositories.sending_limit_repository import SendingLimitRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.sending_limit import (
    SendingLimitCreate,
    SendingLimitRead,
    SendingLimitUpdate,
    SendingStats,
    SendingTierCreate,
    SendingTierRead,
    ViolationCreate,
    ViolationRead,
    ViolationResolve,
)
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import require_admin
from mailportal.interfaces.deps import get_sending_limit_repository

router = APIRouter(prefix="/admin/sending-limits", tags=["Sending Limits"])
tiers_router = APIRouter(prefix="/admin/sending-tiers", tags=["Sending Limits"])


@router.get("")
def list_limits(
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [SendingLimitRead.model_validate(l) for l in sending_limit_service.list_limits(repo)]


@router.post("", response_model=SendingLimitRead, status_code=status.HTTP_201_CREATED)
def create_limit(
    body: SendingLimitCreate,
    request: Request,
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    limit = sending_limit_service.create_limit(repo, body, admin, client_ip(request))
    return SendingLimitRead.model_validate(limit)


@router.get("/stats", response_model=SendingStats)
def get_stats(
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return sending_limit_service.get_stats(repo)


@router.get("/violations")
def list_violations(
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [ViolationRead.model_validate(v) for v in sending_limit_service.list_violations(repo)]


@router.post("/violations", response_model=ViolationRead, status_code=status.HTTP_201_CREATED)
def record_violation(
    body: ViolationCreate,
    request: Request,
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    violation = sending_limit_service.record_violation(repo, body, admin, client_ip(request))
    return ViolationRead.model_validate(violation)


@router.post("/violations/{violation_id}/resolve", response_model=ViolationRead)
def resolve_violation(
    violation_id: str,
    request: Request,
    body: Optional[ViolationResolve] = None,
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    violation = sending_limit_service.resolve_violation(
        repo, violation_id, admin, body.admin_notes if body else None, client_ip(request)
    )
    return ViolationRead.model_validate(violation)


@router.get("/{limit_id}", response_model=SendingLimitRead)
def get_limit(
    limit_id: str,
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return SendingLimitRead.model_validate(sending_limit_service.get_limit(repo, limit_id))


@router.put("/{limit_id}", response_model=SendingLimitRead)
def update_limit(
    limit_id: str,
    body: SendingLimitUpdate,
    request: Request,
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    limit = sending_limit_service.update_limit(repo, limit_id, body, admin, client_ip(request))
    return SendingLimitRead.model_validate(limit)


@router.delete("/{limit_id}")
def delete_limit(
    limit_id: str,
    request: Request,
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    sending_limit_service.delete_limit(repo, limit_id, admin, client_ip(request))
    return {"success": True}


@router.post("/{limit_id}/unblock", response_model=SendingLimitRead)
def unblock_limit(
    limit_id: str,
    request: Request,
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    limit = sending_limit_service.unblock_limit(repo, limit_id, admin, client_ip(request))
    return SendingLimitRead.model_validate(limit)


@tiers_router.get("")
def list_tiers(
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [SendingTierRead.model_validate(t) for t in sending_limit_service.list_tiers(repo)]


@tiers_router.post("", response_model=SendingTierRead, status_code=status.HTTP_201_CREATED)
def create_tier(
    body: SendingTierCreate,
    request: Request,
    repo: SendingLimitRepository = Depends(get_sending_limit_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    tier = sending_limit_service.create_tier(repo, body, admin, client_ip(request))
    return SendingTierRead.model_validate(tier)

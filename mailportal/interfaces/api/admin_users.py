"""Admin user-management routes: lifecycle, quota and bulk actions."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from mailportal.application.services import account_service, quota_service
from mailportal.domain.repositories.user_repository import UserRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.user import (
    BulkActionRequest,
    BulkActionResult,
    PasswordReset,
    QuotaResult,
    QuotaUpdate,
    SuspendRequest,
    UserCreate,
    UserDetail,
    UserRead,
    UserUpdate,
)
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import require_admin
from mailportal.interfaces.deps import get_user_repository

router = APIRouter(prefix="/admin/users", tags=["Admin Users"])


@router.get("")
def list_users(
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return [UserRead.model_validate(u) for u in account_service.list_users(repo)]


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    user = account_service.create_user(repo, body, admin, client_ip(request))
    return UserRead.model_validate(user)


@router.post("/bulk", response_model=BulkActionResult)
def bulk_action(
    body: BulkActionRequest,
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return account_service.bulk_apply(
        repo,
        body.action,
        body.emails,
        admin,
        data=body.data,
        reason=body.reason,
        ip_address=client_ip(request),
    )


@router.get("/{email}", response_model=UserDetail)
def get_user(
    email: str,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return UserDetail.model_validate(account_service.get_user_detail(repo, email))


@router.put("/{email}", response_model=UserRead)
def update_user(
    email: str,
    body: UserUpdate,
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    user = account_service.update_user(repo, email, body, admin, client_ip(request))
    return UserRead.model_validate(user)


@router.delete("/{email}")
def delete_user(
    email: str,
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    account_service.delete_user(repo, email, admin, client_ip(request))
    return {"success": True}


@router.post("/{email}/suspend", response_model=UserRead)
def suspend_user(
    email: str,
    request: Request,
    body: Optional[SuspendRequest] = None,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    user = account_service.suspend_user(repo, email, admin, body.reason if body else None, client_ip(request))
    return UserRead.model_validate(user)


@router.post("/{email}/unsuspend", response_model=UserRead)
def unsuspend_user(
    email: str,
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    user = account_service.unsuspend_user(repo, email, admin, client_ip(request))
    return UserRead.model_validate(user)


@router.post("/{email}/unlock", response_model=UserRead)
def unlock_user(
    email: str,
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    user = account_service.unlock_user(repo, email, admin, client_ip(request))
    return UserRead.model_validate(user)


@router.post("/{email}/reset-password")
def reset_password(
    email: str,
    body: PasswordReset,
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    account_service.reset_password(repo, email, body.new_password, admin, client_ip(request))
    return {"success": True, "email": email}


@router.put("/{email}/quota", response_model=QuotaResult)
def update_quota(
    email: str,
    body: QuotaUpdate,
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    admin: SessionIdentity = Depends(require_admin),
):
    return quota_service.set_quota(repo, email, body.quota_mb, admin, client_ip(request))

"""Admin account API routes."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from mailportal.application.services import admin_service
from mailportal.domain.schemas.admin import AdminCreate, AdminRead, AdminUpdate
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.infrastructure.database import get_db
from mailportal.core.middleware import client_ip
from mailportal.interfaces.api.deps import require_admin

router = APIRouter(prefix="/admin/admins", tags=["Admins"])


@router.get("")
def list_admins(db: Session = Depends(get_db), admin: SessionIdentity = Depends(require_admin)):
    return [AdminRead.model_validate(a) for a in admin_service.list_admins(db)]


@router.post("", response_model=AdminRead, status_code=status.HTTP_201_CREATED)
def create_admin(
    body: AdminCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    return AdminRead.model_validate(admin_service.create_admin(db, body, admin, client_ip(request)))


@router.get("/{admin_id}", response_model=AdminRead)
def get_admin(admin_id: str, db: Session = Depends(get_db), admin: SessionIdentity = Depends(require_admin)):
    return AdminRead.model_validate(admin_service.get_admin(db, admin_id))


@router.put("/{admin_id}", response_model=AdminRead)
def update_admin(
    admin_id: str,
    body: AdminUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    return AdminRead.model_validate(admin_service.update_admin(db, admin_id, body, admin, client_ip(request)))


@router.delete("/{admin_id}")
def delete_admin(
    admin_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: SessionIdentity = Depends(require_admin),
):
    admin_service.delete_admin(db, admin_id, admin, client_ip(request))
    return {"success": True}

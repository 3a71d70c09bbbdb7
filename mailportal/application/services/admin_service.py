"""Admin service: administrator accounts."""

from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from mailportal.application.services.audit_service import record_audit
from mailportal.application.services.auth_service import get_admin_by_email, hash_password, validate_password
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.models.admin import AdminRole, AdminUser
from mailportal.domain.schemas.admin import AdminCreate, AdminUpdate
from mailportal.domain.schemas.auth import SessionIdentity

logger = structlog.get_logger(__name__)


def list_admins(db: Session) -> List[AdminUser]:
    return db.query(AdminUser).order_by(AdminUser.created_at.desc()).all()


def get_admin(db: Session, admin_id: str) -> AdminUser:
    admin = db.query(AdminUser).filter(AdminUser.id == admin_id).first()
    if not admin:
        raise EntityNotFoundException("Admin not found")
    return admin


def _check_role(db: Session, role_id: Optional[str]) -> None:
    if role_id and not db.query(AdminRole).filter(AdminRole.id == role_id).first():
        raise EntityNotFoundException("Role not found")


def create_admin(
    db: Session, body: AdminCreate, actor: SessionIdentity, ip_address: Optional[str] = None
) -> AdminUser:
    if not body.email or not body.password:
        raise ValidationException("Email and password are required")
    email = body.email.strip()
    if get_admin_by_email(db, email):
        raise ValidationException("Admin with this email already exists")
    validate_password(body.password)
    _check_role(db, body.role_id)

    admin = AdminUser(
        email=email,
        name=body.name or email.split("@")[0],
        password_hash=hash_password(body.password),
        role_id=body.role_id,
        is_active=body.is_active,
        created_by=actor.user_id,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)

    logger.info("Admin created", email=email, admin=actor.email)
    record_audit(db, "admin_created", actor.email, email, "Admin user created", ip_address)
    return admin


def update_admin(
    db: Session, admin_id: str, body: AdminUpdate, actor: SessionIdentity, ip_address: Optional[str] = None
) -> AdminUser:
    admin = get_admin(db, admin_id)
    changes = body.model_dump(exclude_unset=True)

    if "email" in changes:
        email = (changes["email"] or "").strip()
        if not email:
            raise ValidationException("email cannot be empty")
        existing = get_admin_by_email(db, email)
        if existing and existing.id != admin.id:
            raise ValidationException("Admin with this email already exists")
        admin.email = email
    if "name" in changes:
        if not changes["name"]:
            raise ValidationException("name cannot be empty")
        admin.name = changes["name"]
    if "role_id" in changes:
        _check_role(db, changes["role_id"])
        admin.role_id = changes["role_id"]
    if "is_active" in changes:
        if changes["is_active"] is None:
            raise ValidationException("is_active cannot be null")
        admin.is_active = changes["is_active"]
    if "password" in changes:
        admin.password_hash = hash_password(validate_password(changes["password"]))

    db.commit()
    db.refresh(admin)
    logger.info("Admin updated", email=admin.email, fields=sorted(changes), admin=actor.email)
    record_audit(db, "admin_updated", actor.email, admin.email, "Admin user updated", ip_address)
    return admin


def delete_admin(db: Session, admin_id: str, actor: SessionIdentity, ip_address: Optional[str] = None) -> None:
    admin = get_admin(db, admin_id)
    if admin.id == actor.user_id or admin.email == actor.email:
        raise ValidationException("Cannot delete your own admin account")

    email = admin.email
    db.delete(admin)
    db.commit()
    logger.info("Admin deleted", email=email, admin=actor.email)
    record_audit(db, "admin_deleted", actor.email, email, "Admin user deleted", ip_address)


def ensure_bootstrap_admin(db: Session, email: str, password: str) -> Optional[AdminUser]:
    """Create the configured admin on first start; existing accounts are left alone."""
    if not email or not password or get_admin_by_email(db, email):
        return None
    admin = AdminUser(email=email, name="Administrator", password_hash=hash_password(password))
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin

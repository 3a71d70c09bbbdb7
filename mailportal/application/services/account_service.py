"""Account service: end-user lifecycle: create, update, suspend, unlock, delete, bulk actions."""

from typing import Any, Dict, List, Optional

import structlog

from mailportal.application.services.audit_service import record_audit
from mailportal.application.services.auth_service import hash_password, validate_password
from mailportal.application.services.quota_service import bytes_to_mb, mb_to_bytes
from mailportal.core.exceptions import EntityNotFoundException, ValidationException
from mailportal.domain.enums import BulkAction
from mailportal.domain.models.group import UserGroup, UserGroupMember
from mailportal.domain.models.user import User
from mailportal.domain.repositories.user_repository import UserRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.user import ProfileUpdate, UserCreate, UserUpdate

logger = structlog.get_logger(__name__)

AUDIT_TARGET_MAX_LENGTH = 255


def get_user_or_404(repo: UserRepository, email: str) -> User:
    user = repo.get_by_email(email)
    if not user:
        raise EntityNotFoundException("User not found")
    return user


def list_users(repo: UserRepository) -> List[User]:
    return repo.list(order_by=User.created_at.desc())


def get_user_detail(repo: UserRepository, email: str) -> Dict[str, Any]:
    user = get_user_or_404(repo, email)
    mailbox = repo.get_or_create_mailbox(user)
    return {
        **{column.name: getattr(user, column.name) for column in User.__table__.columns},
        "is_locked": user.is_locked(),
        "quota_mb": bytes_to_mb(mailbox.quota_bytes),
        "storage_used_mb": bytes_to_mb(mailbox.usage_bytes),
    }


def create_user(
    repo: UserRepository, body: UserCreate, actor: SessionIdentity, ip_address: Optional[str] = None
) -> User:
    email = body.email.strip()
    if not email:
        raise ValidationException("Email is required")
    if repo.get_by_email(email):
        raise ValidationException("A user with this email already exists")

    password_hash = hash_password(validate_password(body.password)) if body.password else None
    user = repo.create(
        {
            "email": email,
            "first_name": body.first_name,
            "last_name": body.last_name,
            "recovery_email": body.recovery_email,
            "recovery_phone": body.recovery_phone,
            "password_hash": password_hash,
        }
    )
    if body.quota_mb is not None:
        repo.set_quota(user, mb_to_bytes(body.quota_mb))

    logger.info("User created", email=email, admin=actor.email)
    record_audit(repo.db, "user_created", actor.email, email, f"User {email} created", ip_address)
    return user


def update_user(
    repo: UserRepository,
    email: str,
    body: UserUpdate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> User:
    user = get_user_or_404(repo, email)
    changes = body.model_dump(exclude_unset=True)
    quota_mb = changes.pop("quota_mb", None)
    _reject_empty_names(changes)

    user = repo.update(user, changes)
    if quota_mb is not None:
        repo.set_quota(user, mb_to_bytes(quota_mb))
        changes["quota_mb"] = quota_mb

    logger.info("User updated", email=email, fields=sorted(changes), admin=actor.email)
    record_audit(
        repo.db,
        "user_updated",
        actor.email,
        email,
        {"updated_fields": sorted(changes)},
        ip_address,
    )
    return user


def _reject_empty_names(changes: Dict[str, Any]) -> None:
    for field in ("first_name", "last_name"):
        if field in changes and changes[field] is None:
            raise ValidationException(f"{field} cannot be null")


def update_profile(repo: UserRepository, user: User, body: ProfileUpdate) -> User:
    changes = body.model_dump(exclude_unset=True)
    _reject_empty_names(changes)
    user = repo.update(user, changes)
    logger.info("Profile updated", email=user.email, fields=sorted(changes))
    return user


def suspend_user(
    repo: UserRepository,
    email: str,
    actor: SessionIdentity,
    reason: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> User:
    user = get_user_or_404(repo, email)
    user = repo.update(user, {"is_suspended": True})
    logger.info("User suspended", email=email, admin=actor.email)
    record_audit(
        repo.db,
        "user_suspended",
        actor.email,
        email,
        f"User suspended. Reason: {reason or 'No reason provided'}",
        ip_address,
    )
    return user


def unsuspend_user(
    repo: UserRepository, email: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> User:
    user = get_user_or_404(repo, email)
    user = repo.update(user, {"is_suspended": False})
    logger.info("User unsuspended", email=email, admin=actor.email)
    record_audit(repo.db, "user_unsuspended", actor.email, email, "User unsuspended", ip_address)
    return user


def unlock_user(
    repo: UserRepository, email: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> User:
    user = get_user_or_404(repo, email)
    user = repo.update(user, {"failed_login_attempts": 0, "locked_until": None})
    logger.info("User unlocked", email=email, admin=actor.email)
    record_audit(repo.db, "user_unlocked", actor.email, email, "User account unlocked", ip_address)
    return user


def delete_user(
    repo: UserRepository, email: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> None:
    user = get_user_or_404(repo, email)
    repo.delete(user)
    logger.info("User deleted", email=email, admin=actor.email)
    record_audit(repo.db, "user_deleted", actor.email, email, "User deleted", ip_address)


def reset_password(
    repo: UserRepository,
    email: str,
    new_password: Optional[str],
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> User:
    validate_password(new_password)
    user = get_user_or_404(repo, email)
    user = repo.update(user, {"password_hash": hash_password(new_password)})
    logger.info("Password reset", email=email, admin=actor.email)
    record_audit(repo.db, "password_reset", actor.email, email, "Password reset by admin", ip_address)
    return user


def _parse_bulk_action(action: Any) -> BulkAction:
    try:
        return BulkAction(action)
    except ValueError:
        raise ValidationException(f"Unknown action: {action}")


def bulk_apply(
    repo: UserRepository,
    action: Any,
    emails: List[str],
    actor: SessionIdentity,
    data: Optional[Dict[str, Any]] = None,
    reason: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> Dict[str, Any]:
    """Apply one lifecycle action to many users, committing each user separately.

    A failure part-way leaves earlier users changed; there is no rollback across the list.
    """
    if not emails:
        raise ValidationException("Invalid request. Action and emails array required.")
    action = _parse_bulk_action(action)
    data = data or {}

    quota_bytes = None
    group = None
    if action is BulkAction.UPDATE_QUOTA:
        quota_mb = data.get("quota_mb")
        if isinstance(quota_mb, bool) or not isinstance(quota_mb, int) or quota_mb < 0:
            raise ValidationException("Quota value required for quota update")
        quota_bytes = mb_to_bytes(quota_mb)
    elif action is BulkAction.ASSIGN_GROUP:
        group_id = data.get("group_id")
        if not group_id:
            raise ValidationException("Group ID required for group assignment")
        group = repo.db.query(UserGroup).filter(UserGroup.id == group_id).first()
        if not group:
            raise EntityNotFoundException("Group not found")

    affected = 0
    for user in repo.list_by_emails(emails):
        if action is BulkAction.SUSPEND:
            repo.update(user, {"is_suspended": True})
        elif action is BulkAction.UNSUSPEND:
            repo.update(user, {"is_suspended": False})
        elif action is BulkAction.DELETE:
            repo.delete(user)
        elif action is BulkAction.UPDATE_QUOTA:
            repo.set_quota(user, quota_bytes)
        elif action is BulkAction.ASSIGN_GROUP:
            exists = (
                repo.db.query(UserGroupMember)
                .filter(UserGroupMember.group_id == group.id, UserGroupMember.user_id == user.id)
                .first()
            )
            if exists:
                continue
            repo.db.add(UserGroupMember(group_id=group.id, user_id=user.id))
            repo.db.commit()
        affected += 1

    reason = reason or data.get("reason")
    details = f"Bulk {action.value} applied to {len(emails)} users"
    if reason:
        details += f". Reason: {reason}"

    logger.info("Bulk action applied", action=action.value, requested=len(emails), affected=affected, admin=actor.email)
    record_audit(
        repo.db,
        f"bulk_{action.value}",
        actor.email,
        ", ".join(emails)[:AUDIT_TARGET_MAX_LENGTH],
        details,
        ip_address,
    )
    return {"success": True, "action": action.value, "affected_count": affected}

"""Scheduled action service: deferred bulk operations and their executor."""

from datetime import datetime
from typing import Dict, List, Optional

import structlog

from mailportal.application.services import account_service
from mailportal.application.services.audit_service import record_audit
from mailportal.core.clock import as_utc, utcnow
from mailportal.core.exceptions import AppError, EntityNotFoundException, ValidationException
from mailportal.domain.enums import ScheduledActionStatus
from mailportal.domain.models.scheduled_action import ScheduledAction
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.repositories.user_repository import UserRepository
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.scheduled_action import ScheduledActionCreate, ScheduledActionUpdate

logger = structlog.get_logger(__name__)

SUPPORTED_TARGET_TYPES = {"users"}


def _require_future(when: datetime) -> datetime:
    when = as_utc(when)
    if when <= utcnow():
        raise ValidationException("Scheduled time must be in the future")
    return when


def _transition(action: ScheduledAction, target: ScheduledActionStatus) -> None:
    if not action.status_enum.can_transition_to(target):
        raise ValidationException(f"Cannot move a {action.status} action to {target.value}")
    action.status = target.value


def list_actions(repo: BaseRepository[ScheduledAction]) -> List[ScheduledAction]:
    return repo.list(order_by=ScheduledAction.scheduled_for.asc())


def get_action(repo: BaseRepository[ScheduledAction], action_id: str) -> ScheduledAction:
    action = repo.get_by_id(action_id)
    if not action:
        raise EntityNotFoundException("Scheduled action not found")
    return action


def _require_pending(action: ScheduledAction, verb: str) -> None:
    if action.status_enum is not ScheduledActionStatus.PENDING:
        raise ValidationException(f"Can only {verb} pending actions")


def create_action(
    repo: BaseRepository[ScheduledAction],
    body: ScheduledActionCreate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> ScheduledAction:
    if not body.target_type or not body.target_ids:
        raise ValidationException("Action type, target type, target IDs, and scheduled time are required")
    if body.target_type not in SUPPORTED_TARGET_TYPES:
        raise ValidationException(f"Unsupported target type: {body.target_type}")

    action = repo.create(
        {
            "action_type": body.action_type.value,
            "target_type": body.target_type,
            "target_ids": body.target_ids,
            "action_data": body.action_data or {},
            "scheduled_for": _require_future(body.scheduled_for),
            "status": ScheduledActionStatus.PENDING.value,
            "created_by": actor.email,
        }
    )
    logger.info("Scheduled action created", action_type=action.action_type, scheduled_for=str(action.scheduled_for), admin=actor.email)
    record_audit(
        repo.db,
        "scheduled_action_created",
        actor.email,
        None,
        {"action_type": action.action_type, "targets": len(action.target_ids)},
        ip_address,
    )
    return action


def update_action(
    repo: BaseRepository[ScheduledAction],
    action_id: str,
    body: ScheduledActionUpdate,
    actor: SessionIdentity,
    ip_address: Optional[str] = None,
) -> ScheduledAction:
    action = get_action(repo, action_id)
    _require_pending(action, "modify")

    changes = body.model_dump(exclude_unset=True)
    if "action_type" in changes:
        if changes["action_type"] is None:
            raise ValidationException("action_type cannot be null")
        changes["action_type"] = changes["action_type"].value
    if "target_ids" in changes and not changes["target_ids"]:
        raise ValidationException("target_ids cannot be empty")
    if "scheduled_for" in changes:
        if changes["scheduled_for"] is None:
            raise ValidationException("scheduled_for cannot be null")
        changes["scheduled_for"] = _require_future(changes["scheduled_for"])

    action = repo.update(action, changes)
    record_audit(
        repo.db,
        "scheduled_action_updated",
        actor.email,
        None,
        {"id": action.id, "fields": sorted(changes)},
        ip_address,
    )
    return action


def delete_action(
    repo: BaseRepository[ScheduledAction], action_id: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> None:
    action = get_action(repo, action_id)
    _require_pending(action, "delete")
    repo.delete(action)
    record_audit(repo.db, "scheduled_action_deleted", actor.email, None, {"id": action_id}, ip_address)


def cancel_action(
    repo: BaseRepository[ScheduledAction], action_id: str, actor: SessionIdentity, ip_address: Optional[str] = None
) -> ScheduledAction:
    action = get_action(repo, action_id)
    _require_pending(action, "cancel")
    _transition(action, ScheduledActionStatus.CANCELLED)
    action.result = f"Cancelled by {actor.email}"
    repo.save(action)
    record_audit(repo.db, "scheduled_action_cancelled", actor.email, None, {"id": action.id}, ip_address)
    return action


def execute_due(
    repo: BaseRepository[ScheduledAction], user_repo: UserRepository, now: Optional[datetime] = None
) -> Dict[str, int]:
    """Run every pending action whose time has come through the bulk lifecycle operation."""
    now = as_utc(now) or utcnow()
    due = (
        repo.db.query(ScheduledAction)
        .filter(
            ScheduledAction.status == ScheduledActionStatus.PENDING.value,
            ScheduledAction.scheduled_for <= now,
        )
        .order_by(ScheduledAction.scheduled_for.asc())
        .all()
    )

    executed = cancelled = 0
    for action in due:
        actor = SessionIdentity(email=action.created_by or "scheduler", is_admin=True)
        try:
            if action.target_type not in SUPPORTED_TARGET_TYPES:
                raise ValidationException(f"Unsupported target type: {action.target_type}")
            outcome = account_service.bulk_apply(
                user_repo,
                action.action_type,
                list(action.target_ids or []),
                actor,
                data=action.action_data or {},
            )
        except AppError as exc:
            _transition(action, ScheduledActionStatus.CANCELLED)
            action.result = exc.message
            cancelled += 1
            logger.warning("Scheduled action cancelled", action_id=action.id, error=exc.message)
        else:
            _transition(action, ScheduledActionStatus.EXECUTED)
            action.result = f"{outcome['affected_count']} users affected"
            action.executed_at = now
            executed += 1
            logger.info("Scheduled action executed", action_id=action.id, affected=outcome["affected_count"])
        repo.db.commit()

    return {"executed": executed, "cancelled": cancelled}

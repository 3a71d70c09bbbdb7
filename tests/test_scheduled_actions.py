"""Scheduled actions: lifecycle guards and the due-action executor."""
from datetime import timedelta

import pytest

from mailportal.application.services import scheduled_action_service
from mailportal.core.clock import utcnow
from mailportal.domain.enums import ScheduledActionStatus
from mailportal.domain.models.scheduled_action import ScheduledAction
from mailportal.domain.models.user import User
from mailportal.infrastructure.repositories.base_repository import SQLAlchemyRepository
from mailportal.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


@pytest.fixture
def repos(db):
    return SQLAlchemyRepository(db, ScheduledAction), SQLAlchemyUserRepository(db, User)


def _future(hours=1):
    return (utcnow() + timedelta(hours=hours)).isoformat()


def _stored_action(db, target_ids, status="pending", scheduled_for=None, **fields):
    action = ScheduledAction(
        action_type=fields.pop("action_type", "suspend"),
        target_type=fields.pop("target_type", "users"),
        target_ids=target_ids,
        action_data=fields.pop("action_data", {}),
        scheduled_for=scheduled_for or utcnow() - timedelta(minutes=5),
        status=status,
        created_by="admin@example.com",
    )
    db.add(action)
    db.commit()
    db.refresh(action)
    return action


def test_create_action(admin_client, user, audit_rows):
    response = admin_client.post(
        "/admin/scheduled-actions",
        json={"action_type": "suspend", "target_ids": [user.email], "scheduled_for": _future()},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["created_by"] == "admin@example.com"
    assert len(audit_rows("scheduled_action_created")) == 1


def test_create_action_in_the_past(admin_client, user):
    response = admin_client.post(
        "/admin/scheduled-actions",
        json={
            "action_type": "suspend",
            "target_ids": [user.email],
            "scheduled_for": (utcnow() - timedelta(minutes=1)).isoformat(),
        },
    )
    assert response.status_code == 400


def test_create_action_needs_targets(admin_client):
    response = admin_client.post(
        "/admin/scheduled-actions",
        json={"action_type": "suspend", "target_ids": [], "scheduled_for": _future()},
    )
    assert response.status_code == 400


def test_create_action_unsupported_target_type(admin_client, user):
    response = admin_client.post(
        "/admin/scheduled-actions",
        json={
            "action_type": "suspend",
            "target_type": "groups",
            "target_ids": ["g1"],
            "scheduled_for": _future(),
        },
    )
    assert response.status_code == 400


def test_list_is_ordered_by_schedule(admin_client, db):
    later = _stored_action(db, ["a@afrimail.com"], scheduled_for=utcnow() + timedelta(days=2))
    sooner = _stored_action(db, ["b@afrimail.com"], scheduled_for=utcnow() + timedelta(days=1))

    ids = [a["id"] for a in admin_client.get("/admin/scheduled-actions").json()]
    assert ids == [sooner.id, later.id]


def test_update_pending_action(admin_client, db, user):
    action = _stored_action(db, [user.email], scheduled_for=utcnow() + timedelta(hours=2))

    response = admin_client.put(
        f"/admin/scheduled-actions/{action.id}", json={"action_type": "unsuspend"}
    )

    assert response.status_code == 200
    assert response.json()["action_type"] == "unsuspend"


@pytest.mark.parametrize("status", ["executed", "cancelled"])
def test_non_pending_action_cannot_change(admin_client, db, user, status):
    action = _stored_action(db, [user.email], status=status)

    update = admin_client.put(f"/admin/scheduled-actions/{action.id}", json={"target_ids": ["x"]})
    delete = admin_client.delete(f"/admin/scheduled-actions/{action.id}")
    cancel = admin_client.post(f"/admin/scheduled-actions/{action.id}/cancel")

    assert update.status_code == 400
    assert delete.status_code == 400
    assert cancel.status_code == 400
    db.refresh(action)
    assert action.status == status


def test_cancel_pending_action(admin_client, db, user, audit_rows):
    action = _stored_action(db, [user.email], scheduled_for=utcnow() + timedelta(hours=2))

    response = admin_client.post(f"/admin/scheduled-actions/{action.id}/cancel")

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert len(audit_rows("scheduled_action_cancelled")) == 1


def test_delete_pending_action(admin_client, db, user):
    action = _stored_action(db, [user.email], scheduled_for=utcnow() + timedelta(hours=2))

    assert admin_client.delete(f"/admin/scheduled-actions/{action.id}").json() == {"success": True}
    assert admin_client.get(f"/admin/scheduled-actions/{action.id}").status_code == 404


# =============================================================================
# Executor
# =============================================================================

def test_execute_due_runs_pending_actions(db, repos, make_user):
    scheduled, users = repos
    targets = [make_user(), make_user()]
    action = _stored_action(db, [u.email for u in targets])

    outcome = scheduled_action_service.execute_due(scheduled, users)

    assert outcome == {"executed": 1, "cancelled": 0}
    db.refresh(action)
    assert action.status_enum is ScheduledActionStatus.EXECUTED
    assert action.executed_at is not None
    assert action.result == "2 users affected"
    assert all(u.is_suspended for u in targets)


def test_execute_due_ignores_future_and_finished(db, repos, user):
    scheduled, users = repos
    future = _stored_action(db, [user.email], scheduled_for=utcnow() + timedelta(hours=1))
    done = _stored_action(db, [user.email], status="executed")

    assert scheduled_action_service.execute_due(scheduled, users) == {"executed": 0, "cancelled": 0}
    db.refresh(future)
    db.refresh(done)
    assert future.status == "pending"
    assert done.status == "executed"
    db.refresh(user)
    assert user.is_suspended is False


def test_execute_due_cancels_failing_action(db, repos, user):
    scheduled, users = repos
    action = _stored_action(db, [user.email], action_type="update_quota", action_data={})

    outcome = scheduled_action_service.execute_due(scheduled, users)

    assert outcome == {"executed": 0, "cancelled": 1}
    db.refresh(action)
    assert action.status == "cancelled"
    assert action.result == "Quota value required for quota update"


def test_execute_due_runs_each_action_once(db, repos, user):
    scheduled, users = repos
    _stored_action(db, [user.email])

    scheduled_action_service.execute_due(scheduled, users)
    assert scheduled_action_service.execute_due(scheduled, users) == {"executed": 0, "cancelled": 0}

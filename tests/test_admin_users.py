"""Admin user management: lifecycle, quota and bulk actions."""
from datetime import timedelta

import pytest

from mailportal.application.services import auth_service
from mailportal.core.clock import utcnow
from mailportal.domain.models.group import UserGroup, UserGroupMember
from mailportal.domain.models.mailbox import MailboxMetadata
from mailportal.domain.models.sending_limit import EmailSendingLimit
from mailportal.domain.models.user import User


def test_list_users(admin_client, make_user):
    make_user(email="a@afrimail.com")
    make_user(email="b@afrimail.com")

    response = admin_client.get("/admin/users")

    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {"a@afrimail.com", "b@afrimail.com"}
    assert all("password_hash" not in u for u in response.json())


def test_create_user_with_quota(admin_client, db, audit_rows):
    response = admin_client.post(
        "/admin/users",
        json={
            "email": "new@afrimail.com",
            "first_name": "New",
            "last_name": "Person",
            "password": "a-long-password",
            "quota_mb": 2048,
        },
    )

    assert response.status_code == 201
    mailbox = db.query(MailboxMetadata).filter(MailboxMetadata.email == "new@afrimail.com").one()
    assert mailbox.quota_bytes == 2048 * 1024 * 1024
    assert len(audit_rows("user_created")) == 1


def test_create_duplicate_user(admin_client, user):
    response = admin_client.post(
        "/admin/users", json={"email": user.email, "first_name": "X", "last_name": "Y"}
    )
    assert response.status_code == 400


def test_get_user_detail_creates_default_mailbox(admin_client, user):
    response = admin_client.get(f"/admin/users/{user.email}")

    assert response.status_code == 200
    body = response.json()
    assert body["quota_mb"] == 5120
    assert body["storage_used_mb"] == 0
    assert body["is_locked"] is False


def test_get_unknown_user(admin_client):
    response = admin_client.get("/admin/users/nobody@afrimail.com")
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_update_user_partial(admin_client, db, user, audit_rows):
    response = admin_client.put(f"/admin/users/{user.email}", json={"recovery_phone": "+2348000"})

    assert response.status_code == 200
    db.refresh(user)
    assert user.recovery_phone == "+2348000"
    assert user.first_name == "Jane"
    rows = audit_rows("user_updated")
    assert len(rows) == 1
    assert rows[0].details == {"updated_fields": ["recovery_phone"]}


def test_update_user_rejects_null_name(admin_client, user):
    response = admin_client.put(f"/admin/users/{user.email}", json={"first_name": None})
    assert response.status_code == 400


def test_suspend_and_unsuspend_are_idempotent(admin_client, db, user, audit_rows):
    for _ in range(2):
        response = admin_client.post(f"/admin/users/{user.email}/suspend", json={"reason": "spam"})
        assert response.status_code == 200
        assert response.json()["is_suspended"] is True

    rows = audit_rows("user_suspended")
    assert len(rows) == 2
    assert rows[0].details == "User suspended. Reason: spam"
    assert rows[0].target_user_email == user.email

    for _ in range(2):
        response = admin_client.post(f"/admin/users/{user.email}/unsuspend")
        assert response.json()["is_suspended"] is False
    assert len(audit_rows("user_unsuspended")) == 2


def test_suspend_without_body_records_default_reason(admin_client, user, audit_rows):
    response = admin_client.post(f"/admin/users/{user.email}/suspend")

    assert response.status_code == 200
    assert audit_rows("user_suspended")[0].details == "User suspended. Reason: No reason provided"


def test_unlock_user(admin_client, db, user):
    user.failed_login_attempts = 7
    user.locked_until = utcnow() + timedelta(minutes=20)
    db.commit()

    response = admin_client.post(f"/admin/users/{user.email}/unlock")

    assert response.status_code == 200
    db.refresh(user)
    assert user.failed_login_attempts == 0
    assert user.locked_until is None


def test_delete_user_removes_dependents(admin_client, db, user, audit_rows):
    db.add(MailboxMetadata(email=user.email, user_id=user.id, quota_bytes=1, usage_bytes=0))
    db.add(EmailSendingLimit(user_id=user.id, tier_name="free", daily_limit=10, hourly_limit=5))
    db.commit()

    response = admin_client.delete(f"/admin/users/{user.email}")

    assert response.json() == {"success": True}
    db.expire_all()
    assert db.query(User).count() == 0
    assert db.query(MailboxMetadata).count() == 0
    assert db.query(EmailSendingLimit).count() == 0
    assert len(audit_rows("user_deleted")) == 1


def test_reset_password(admin_client, db, user):
    response = admin_client.post(
        f"/admin/users/{user.email}/reset-password", json={"new_password": "brand-new-pass"}
    )

    assert response.status_code == 200
    db.refresh(user)
    assert auth_service.verify_password("brand-new-pass", user.password_hash)


def test_reset_password_too_short(admin_client, user):
    response = admin_client.post(
        f"/admin/users/{user.email}/reset-password", json={"new_password": "short"}
    )
    assert response.status_code == 400


# =============================================================================
# Quota
# =============================================================================

def test_quota_round_trip(admin_client, user, audit_rows):
    response = admin_client.put(f"/admin/users/{user.email}/quota", json={"quota_mb": 5000})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "email": user.email,
        "quota_mb": 5000,
        "storage_used_mb": 0,
    }
    assert admin_client.get(f"/admin/users/{user.email}").json()["quota_mb"] == 5000
    assert len(audit_rows("quota_updated")) == 1


def test_negative_quota_rejected(admin_client, user):
    response = admin_client.put(f"/admin/users/{user.email}/quota", json={"quota_mb": -1})
    assert response.status_code == 400


def test_quota_for_unknown_user(admin_client):
    response = admin_client.put("/admin/users/nobody@afrimail.com/quota", json={"quota_mb": 10})
    assert response.status_code == 404


# =============================================================================
# Bulk actions
# =============================================================================

def test_bulk_suspend(admin_client, db, make_user, audit_rows):
    first = make_user(email="one@afrimail.com")
    second = make_user(email="two@afrimail.com")
    untouched = make_user(email="three@afrimail.com")

    response = admin_client.post(
        "/admin/users/bulk",
        json={"action": "suspend", "emails": [first.email, second.email], "reason": "abuse"},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "action": "suspend", "affected_count": 2}
    db.expire_all()
    assert first.is_suspended and second.is_suspended
    assert not untouched.is_suspended

    rows = audit_rows("bulk_suspend")
    assert len(rows) == 1
    assert rows[0].details == "Bulk suspend applied to 2 users. Reason: abuse"


def test_bulk_skips_unknown_emails(admin_client, user):
    response = admin_client.post(
        "/admin/users/bulk",
        json={"action": "suspend", "emails": [user.email, "ghost@afrimail.com"]},
    )
    assert response.json()["affected_count"] == 1


def test_bulk_empty_emails_is_rejected(admin_client, db, user, audit_rows):
    response = admin_client.post("/admin/users/bulk", json={"action": "suspend", "emails": []})

    assert response.status_code == 400
    db.refresh(user)
    assert user.is_suspended is False
    assert audit_rows() == []


def test_bulk_unknown_action(admin_client, user):
    response = admin_client.post(
        "/admin/users/bulk", json={"action": "explode", "emails": [user.email]}
    )
    assert response.status_code == 400


def test_bulk_update_quota_requires_value(admin_client, user):
    response = admin_client.post(
        "/admin/users/bulk", json={"action": "update_quota", "emails": [user.email], "data": {}}
    )
    assert response.status_code == 400


@pytest.mark.parametrize("quota_mb", [1.5, True, "100", -1])
def test_bulk_update_quota_rejects_non_integer(admin_client, db, user, quota_mb):
    response = admin_client.post(
        "/admin/users/bulk",
        json={"action": "update_quota", "emails": [user.email], "data": {"quota_mb": quota_mb}},
    )

    assert response.status_code == 400
    assert db.query(MailboxMetadata).count() == 0


def test_bulk_update_quota(admin_client, db, make_user):
    users = [make_user(), make_user()]

    response = admin_client.post(
        "/admin/users/bulk",
        json={
            "action": "update_quota",
            "emails": [u.email for u in users],
            "data": {"quota_mb": 100},
        },
    )

    assert response.json()["affected_count"] == 2
    quotas = {m.quota_bytes for m in db.query(MailboxMetadata).all()}
    assert quotas == {100 * 1024 * 1024}


def test_bulk_assign_group_skips_existing_members(admin_client, db, make_user):
    member = make_user()
    newcomer = make_user()
    group = UserGroup(name="Staff")
    db.add(group)
    db.commit()
    db.add(UserGroupMember(group_id=group.id, user_id=member.id))
    db.commit()

    response = admin_client.post(
        "/admin/users/bulk",
        json={
            "action": "assign_group",
            "emails": [member.email, newcomer.email],
            "data": {"group_id": group.id},
        },
    )

    assert response.json()["affected_count"] == 1
    assert db.query(UserGroupMember).count() == 2


def test_bulk_assign_unknown_group(admin_client, user):
    response = admin_client.post(
        "/admin/users/bulk",
        json={"action": "assign_group", "emails": [user.email], "data": {"group_id": "missing"}},
    )
    assert response.status_code == 404


def test_bulk_delete(admin_client, db, make_user):
    users = [make_user(), make_user()]

    response = admin_client.post(
        "/admin/users/bulk", json={"action": "delete", "emails": [u.email for u in users]}
    )

    assert response.json()["affected_count"] == 2
    assert db.query(User).count() == 0

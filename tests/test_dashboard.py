"""Dashboard overview, storage report and activity report."""
from datetime import timedelta

from mailportal.application.services import stats_service
from mailportal.core.clock import utcnow
from mailportal.domain.models.mail_domain import MailDomain
from mailportal.domain.models.mailbox import MailboxMetadata

MB = 1024 * 1024


def _mailbox(db, user, quota_mb, used_mb):
    db.add(MailboxMetadata(email=user.email, user_id=user.id, quota_bytes=quota_mb * MB, usage_bytes=used_mb * MB))
    db.commit()


def test_storage_report(admin_client, db, make_user):
    full = make_user(email="full@afrimail.com")
    near = make_user(email="near@afrimail.com")
    light = make_user(email="light@afrimail.com")
    _mailbox(db, full, 100, 95)
    _mailbox(db, near, 100, 80)
    _mailbox(db, light, 200, 10)

    body = admin_client.get("/admin/storage").json()

    assert body["stats"] == {
        "total_allocated": 400,
        "total_used": 185,
        "users_over_quota": 1,
        "users_near_quota": 1,
        "total_users": 3,
        "average_usage_percentage": 46,
    }
    assert [u["email"] for u in body["users"]] == ["full@afrimail.com", "near@afrimail.com", "light@afrimail.com"]
    assert body["users"][2]["usage_percentage"] == 5


def test_dashboard_stats(admin_client, db, make_user):
    now = utcnow()
    make_user(last_login=now - timedelta(days=2))
    make_user(last_login=now - timedelta(days=20), is_suspended=True)
    make_user()
    db.add_all([MailDomain(domain="a.com", is_primary=True), MailDomain(domain="b.com", is_active=False)])
    db.commit()

    body = admin_client.get("/admin/stats").json()

    assert body["total_users"] == 3
    assert body["active_users"] == 2
    assert body["suspended_users"] == 1
    assert body["total_domains"] == 1
    assert body["activity"] == {"active_last_7_days": 1, "active_last_30_days": 2, "never_logged_in": 1}


def test_activity_report_classifies_issues(db, make_user):
    now = utcnow()
    locked = make_user(email="locked@afrimail.com", last_login=now - timedelta(days=1), locked_until=now + timedelta(minutes=10))
    make_user(email="recent@afrimail.com", last_login=now - timedelta(days=1))
    make_user(email="dormant@afrimail.com", last_login=now - timedelta(days=120))
    make_user(email="new@afrimail.com")

    report = stats_service.get_activity_report(db, now)

    assert report["stats"]["locked_users"] == 1
    assert report["stats"]["inactive_last_90_days"] == 1
    assert report["stats"]["never_logged_in"] == 1
    issues = {row["email"]: row["issue_type"] for row in report["users_with_issues"]}
    assert issues == {
        locked.email: "locked",
        "dormant@afrimail.com": "inactive",
        "new@afrimail.com": "never_logged_in",
    }
    assert report["recent_logins"][0]["email"] in {"locked@afrimail.com", "recent@afrimail.com"}


def test_activity_endpoint(admin_client, user):
    response = admin_client.get("/admin/activity")

    assert response.status_code == 200
    assert response.json()["stats"]["total_users"] == 1

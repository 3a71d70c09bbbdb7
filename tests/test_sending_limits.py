"""Sending-limit ledger, violations, tiers and counter rollover."""
from datetime import datetime, timedelta, timezone

import pytest
import pytz

from mailportal.application.services import sending_limit_service
from mailportal.core import clock
from mailportal.core.clock import utcnow
from mailportal.domain.models.sending_limit import (
    EmailSendingLimit,
    SendingLimitViolation,
    SendingTier,
)
from mailportal.infrastructure.repositories.sending_limit_repository import (
    SQLAlchemySendingLimitRepository,
)


@pytest.fixture
def repo(db):
    return SQLAlchemySendingLimitRepository(db, EmailSendingLimit)


@pytest.fixture
def make_limit(db, make_user):
    def _make(**fields):
        user = fields.pop("user", None) or make_user()
        limit = EmailSendingLimit(
            user_id=user.id,
            tier_name=fields.pop("tier_name", "free"),
            daily_limit=fields.pop("daily_limit", 100),
            hourly_limit=fields.pop("hourly_limit", 20),
            **fields,
        )
        db.add(limit)
        db.commit()
        db.refresh(limit)
        return limit

    return _make


def test_create_limit_uses_defaults(admin_client, user, audit_rows):
    response = admin_client.post(
        "/admin/sending-limits", json={"user_id": user.id, "tier_name": "starter"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["daily_limit"] == 100
    assert body["hourly_limit"] == 50
    assert body["emails_sent_today"] == 0
    assert body["is_sending_enabled"] is True
    rows = audit_rows("sending_limit_created")
    assert len(rows) == 1
    assert rows[0].target_user_email == user.email


def test_create_limit_takes_tier_defaults(admin_client, db, user):
    tier = SendingTier(name="pro", display_name="Pro", daily_limit=1000, hourly_limit=200)
    db.add(tier)
    db.commit()

    response = admin_client.post(
        "/admin/sending-limits", json={"user_id": user.id, "tier_name": "pro", "tier_id": tier.id}
    )

    assert response.json()["daily_limit"] == 1000
    assert response.json()["hourly_limit"] == 200


def test_create_limit_requires_tier_name(admin_client, user):
    response = admin_client.post("/admin/sending-limits", json={"user_id": user.id})
    assert response.status_code == 400


def test_create_limit_for_unknown_user(admin_client):
    response = admin_client.post(
        "/admin/sending-limits", json={"user_id": "missing", "tier_name": "free"}
    )
    assert response.status_code == 404


def test_create_limit_twice(admin_client, user):
    payload = {"user_id": user.id, "tier_name": "free"}
    assert admin_client.post("/admin/sending-limits", json=payload).status_code == 201
    assert admin_client.post("/admin/sending-limits", json=payload).status_code == 400


def test_update_limit_is_partial(admin_client, make_limit):
    limit = make_limit(custom_limit_reason="trial")

    response = admin_client.put(
        f"/admin/sending-limits/{limit.id}", json={"daily_limit": 5, "custom_limit_reason": None}
    )

    body = response.json()
    assert body["daily_limit"] == 5
    assert body["hourly_limit"] == 20
    assert body["custom_limit_reason"] is None


def test_update_limit_rejects_null_required_field(admin_client, make_limit):
    limit = make_limit()
    response = admin_client.put(f"/admin/sending-limits/{limit.id}", json={"daily_limit": None})
    assert response.status_code == 400


def test_update_limit_with_unknown_tier(admin_client, db, make_limit):
    limit = make_limit()

    response = admin_client.put(f"/admin/sending-limits/{limit.id}", json={"tier_id": "does-not-exist"})

    assert response.status_code == 404
    assert response.json() == {"error": "Sending tier not found"}
    db.refresh(limit)
    assert limit.tier_id is None


def test_update_limit_moves_to_existing_tier(admin_client, db, make_limit):
    tier = SendingTier(name="pro", display_name="Pro", daily_limit=1000, hourly_limit=200)
    db.add(tier)
    db.commit()
    limit = make_limit()

    response = admin_client.put(f"/admin/sending-limits/{limit.id}", json={"tier_id": tier.id})

    assert response.status_code == 200
    assert response.json()["tier_id"] == tier.id


def test_unblock_resets_counters(admin_client, make_limit, audit_rows):
    limit = make_limit(
        is_sending_enabled=False,
        custom_limit_reason="spam burst",
        emails_sent_today=100,
        emails_sent_this_hour=20,
    )

    response = admin_client.post(f"/admin/sending-limits/{limit.id}/unblock")

    body = response.json()
    assert body["is_sending_enabled"] is True
    assert body["custom_limit_reason"] is None
    assert body["emails_sent_today"] == 0
    assert body["emails_sent_this_hour"] == 0
    assert len(audit_rows("sending_limit_unblocked")) == 1


def test_delete_limit(admin_client, db, make_limit):
    limit = make_limit()

    assert admin_client.delete(f"/admin/sending-limits/{limit.id}").json() == {"success": True}
    assert admin_client.get(f"/admin/sending-limits/{limit.id}").status_code == 404


def test_stats(admin_client, db, make_limit):
    make_limit(emails_sent_today=100, daily_limit=100)
    make_limit(emails_sent_today=5, is_sending_enabled=False)
    db.add(SendingLimitViolation(user_id="u1", violation_type="daily", attempted_count=101, limit_at_time=100))
    db.add(
        SendingLimitViolation(
            user_id="u1",
            violation_type="daily",
            attempted_count=101,
            limit_at_time=100,
            created_at=utcnow() - timedelta(days=2),
        )
    )
    db.commit()

    response = admin_client.get("/admin/sending-limits/stats")

    assert response.json() == {
        "total_sent_today": 105,
        "users_at_limit": 1,
        "blocked_users": 1,
        "violations_today": 1,
        "avg_sending_per_user": 53,
        "total_users_with_limits": 2,
    }


def test_stats_with_no_limits(admin_client):
    body = admin_client.get("/admin/sending-limits/stats").json()
    assert body["avg_sending_per_user"] == 0
    assert body["total_users_with_limits"] == 0


# =============================================================================
# Violations
# =============================================================================

def test_violations_newest_first(admin_client, db):
    old = SendingLimitViolation(
        user_id="u1", violation_type="hourly", attempted_count=21, limit_at_time=20,
        created_at=utcnow() - timedelta(hours=3),
    )
    new = SendingLimitViolation(user_id="u2", violation_type="daily", attempted_count=101, limit_at_time=100)
    db.add_all([old, new])
    db.commit()

    ids = [v["id"] for v in admin_client.get("/admin/sending-limits/violations").json()]
    assert ids == [new.id, old.id]


def test_record_and_resolve_violation(admin_client, user, audit_rows):
    created = admin_client.post(
        "/admin/sending-limits/violations",
        json={
            "user_id": user.id,
            "violation_type": "hourly",
            "attempted_count": 60,
            "limit_at_time": 50,
        },
    )
    assert created.status_code == 201
    violation_id = created.json()["id"]

    resolved = admin_client.post(
        f"/admin/sending-limits/violations/{violation_id}/resolve", json={"admin_notes": "warned"}
    )

    assert resolved.status_code == 200
    assert resolved.json()["is_resolved"] is True
    assert resolved.json()["resolved_by"] == "admin@example.com"
    assert resolved.json()["admin_notes"] == "warned"
    assert len(audit_rows("violation_resolved")) == 1

    again = admin_client.post(f"/admin/sending-limits/violations/{violation_id}/resolve")
    assert again.status_code == 400


# =============================================================================
# Tiers
# =============================================================================

def test_create_and_list_tiers(admin_client):
    admin_client.post("/admin/sending-tiers", json={"name": "pro", "daily_limit": 1000, "hourly_limit": 100, "sort_order": 2})
    admin_client.post("/admin/sending-tiers", json={"name": "free", "daily_limit": 100, "hourly_limit": 10, "sort_order": 1})

    tiers = admin_client.get("/admin/sending-tiers").json()

    assert [t["name"] for t in tiers] == ["free", "pro"]
    assert tiers[0]["display_name"] == "free"


def test_duplicate_tier(admin_client):
    payload = {"name": "pro", "daily_limit": 1000, "hourly_limit": 100}
    assert admin_client.post("/admin/sending-tiers", json=payload).status_code == 201
    assert admin_client.post("/admin/sending-tiers", json=payload).status_code == 400


# =============================================================================
# Rollover
# =============================================================================

def test_rollover_resets_stale_counters(db, repo, make_limit):
    now = datetime(2026, 10, 17, 14, 30, tzinfo=timezone.utc)
    stale = make_limit(
        emails_sent_today=40,
        emails_sent_this_hour=10,
        last_reset_date=now - timedelta(days=1),
        last_reset_hour=now - timedelta(hours=2),
        is_sending_enabled=False,
    )
    fresh = make_limit(
        emails_sent_today=7,
        emails_sent_this_hour=3,
        last_reset_date=datetime(2026, 10, 17, 0, 0, tzinfo=timezone.utc),
        last_reset_hour=datetime(2026, 10, 17, 14, 5, tzinfo=timezone.utc),
    )

    outcome = sending_limit_service.rollover_counters(repo, now)

    assert outcome == {"hourly_reset": 1, "daily_reset": 1}
    db.refresh(stale)
    db.refresh(fresh)
    assert (stale.emails_sent_today, stale.emails_sent_this_hour) == (0, 0)
    assert (fresh.emails_sent_today, fresh.emails_sent_this_hour) == (7, 3)
    # Rollover never re-enables sending
    assert stale.is_sending_enabled is False


def test_hourly_rollover_leaves_daily_count(db, repo, make_limit):
    now = datetime(2026, 10, 17, 14, 30, tzinfo=timezone.utc)
    limit = make_limit(
        emails_sent_today=40,
        emails_sent_this_hour=10,
        last_reset_date=datetime(2026, 10, 17, 0, 0, tzinfo=timezone.utc),
        last_reset_hour=datetime(2026, 10, 17, 13, 59, tzinfo=timezone.utc),
    )

    sending_limit_service.rollover_counters(repo, now)

    db.refresh(limit)
    assert limit.emails_sent_this_hour == 0
    assert limit.emails_sent_today == 40


def test_hour_start_follows_half_hour_timezone(monkeypatch):
    monkeypatch.setattr(clock, "tz", pytz.timezone("Asia/Kolkata"))
    now = datetime(2026, 10, 17, 14, 20, tzinfo=timezone.utc)  # 19:50 IST

    assert clock.hour_start_utc(now) == datetime(2026, 10, 17, 13, 30, tzinfo=timezone.utc)


def test_hourly_rollover_uses_local_hour(db, repo, make_limit, monkeypatch):
    monkeypatch.setattr(clock, "tz", pytz.timezone("Asia/Kolkata"))
    now = datetime(2026, 10, 17, 14, 20, tzinfo=timezone.utc)
    limit = make_limit(
        emails_sent_today=40,
        emails_sent_this_hour=10,
        last_reset_date=datetime(2026, 10, 17, 0, 0, tzinfo=timezone.utc),
        last_reset_hour=datetime(2026, 10, 17, 13, 40, tzinfo=timezone.utc),  # 19:10 IST
    )

    outcome = sending_limit_service.rollover_counters(repo, now)

    assert outcome["hourly_reset"] == 0
    db.refresh(limit)
    assert limit.emails_sent_this_hour == 10

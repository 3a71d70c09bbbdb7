"""Sign-in, sign-up, session resolution and role guards."""
from datetime import timedelta

from mailportal.application.services import auth_service
from mailportal.core.clock import utcnow
from mailportal.domain.models.login_activity import LoginActivity
from mailportal.domain.models.user import User

from conftest import ADMIN_PASSWORD, USER_PASSWORD


# =============================================================================
# Admin login
# =============================================================================

def test_admin_login_sets_cookie_and_audits(client, admin, audit_rows):
    response = client.post(
        "/auth/admin-login", json={"email": admin.email, "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["admin"]["email"] == admin.email
    assert "auth-token" in response.cookies

    rows = audit_rows("admin_login")
    assert len(rows) == 1
    assert rows[0].admin_email == admin.email

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["isAdmin"] is True


def test_admin_login_wrong_password(client, admin):
    response = client.post(
        "/auth/admin-login", json={"email": admin.email, "password": "nope-nope"}
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_admin_login_missing_fields(client):
    response = client.post("/auth/admin-login", json={"email": "admin@example.com"})
    assert response.status_code == 400
    assert "error" in response.json()


def test_disabled_admin_cannot_login(client, make_admin):
    disabled = make_admin(email="off@example.com", is_active=False)
    response = client.post(
        "/auth/admin-login", json={"email": disabled.email, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 403


# =============================================================================
# End-user login
# =============================================================================

def test_user_login_appends_mail_domain(client, db, user):
    response = client.post("/auth/login", json={"email": "jane", "password": USER_PASSWORD})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "jane@afrimail.com"

    activity = db.query(LoginActivity).all()
    assert len(activity) == 1
    assert activity[0].success is True

    me = client.get("/auth/me")
    assert me.json()["email"] == "jane@afrimail.com"
    assert me.json()["isAdmin"] is False


def test_failed_logins_lock_the_account(client, db, user):
    for _ in range(5):
        response = client.post("/auth/login", json={"email": user.email, "password": "wrong-pass"})
        assert response.status_code == 401

    db.refresh(user)
    assert user.failed_login_attempts == 5
    assert user.is_locked()

    # Correct password is refused while the lock holds
    response = client.post("/auth/login", json={"email": user.email, "password": USER_PASSWORD})
    assert response.status_code == 403


def test_expired_lock_allows_login_and_resets_counter(client, db, user):
    user.failed_login_attempts = 5
    user.locked_until = utcnow() - timedelta(minutes=1)
    db.commit()

    response = client.post("/auth/login", json={"email": user.email, "password": USER_PASSWORD})

    assert response.status_code == 200
    db.refresh(user)
    assert user.failed_login_attempts == 0
    assert user.locked_until is None
    assert user.last_login is not None


def test_wrong_password_after_expired_lock_starts_a_fresh_count(client, db, user):
    user.failed_login_attempts = 5
    user.locked_until = utcnow() - timedelta(minutes=1)
    db.commit()

    response = client.post("/auth/login", json={"email": user.email, "password": "wrong-pass"})

    assert response.status_code == 401
    db.refresh(user)
    assert user.failed_login_attempts == 1
    assert user.locked_until is None
    assert not user.is_locked()


def test_suspended_user_cannot_login(client, db, user):
    user.is_suspended = True
    db.commit()

    response = client.post("/auth/login", json={"email": user.email, "password": USER_PASSWORD})
    assert response.status_code == 403


def test_unknown_user_login_is_logged(client, db):
    response = client.post("/auth/login", json={"email": "ghost", "password": "whatever1"})

    assert response.status_code == 401
    activity = db.query(LoginActivity).one()
    assert activity.user_email == "ghost@afrimail.com"
    assert activity.success is False


# =============================================================================
# Signup
# =============================================================================

SIGNUP = {
    "first_name": "Amara",
    "last_name": "Okafor",
    "email": "amara",
    "password": "long-enough-pw",
    "recovery_email": "amara@example.org",
    "date_of_birth": "1994-03-02",
}


def test_signup_creates_user(client, db):
    response = client.post("/auth/signup", json=SIGNUP)

    assert response.status_code == 201
    assert response.json()["user"]["email"] == "amara@afrimail.com"
    user = db.query(User).filter(User.email == "amara@afrimail.com").one()
    assert auth_service.verify_password("long-enough-pw", user.password_hash)


def test_signup_rejects_honeypot(client, db):
    response = client.post("/auth/signup", json={**SIGNUP, "website": "http://spam.example"})
    assert response.status_code == 400
    assert db.query(User).count() == 0


def test_signup_rejects_short_password(client):
    response = client.post("/auth/signup", json={**SIGNUP, "password": "short"})
    assert response.status_code == 400


def test_signup_rejects_duplicate(client):
    assert client.post("/auth/signup", json=SIGNUP).status_code == 201
    response = client.post("/auth/signup", json=SIGNUP)
    assert response.status_code == 400


def test_check_username(client, user):
    assert client.post("/auth/check-username", json={"username": "jane"}).json() == {"available": False}
    assert client.post("/auth/check-username", json={"username": "Kofi"}).json() == {"available": True}


# =============================================================================
# Session resolution and guards
# =============================================================================

def test_me_without_session(client):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_bearer_token_fallback(client, admin):
    token = auth_service.admin_token(admin)
    response = client.get("/admin/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_tampered_token_is_anonymous(client):
    client.cookies.set("auth-token", "not-a-jwt")
    assert client.get("/admin/users").status_code == 401


def test_user_session_cannot_reach_admin_routes(user_client):
    response = user_client.get("/admin/users")
    assert response.status_code == 403


def test_admin_session_cannot_reach_user_routes(admin_client):
    assert admin_client.get("/user/profile").status_code == 403


def test_disabled_admin_session_is_rejected(db, admin, admin_client):
    admin.is_active = False
    db.commit()
    assert admin_client.get("/admin/users").status_code == 403


def test_logout_clears_cookie(client, user):
    client.post("/auth/login", json={"email": user.email, "password": USER_PASSWORD})
    response = client.post("/auth/logout")

    assert response.json() == {"success": True}
    assert client.get("/auth/me").status_code == 401

"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema rebuilt for every test
- The app's get_db dependency bound to the test session
- Admin / end-user factories and clients carrying a session cookie
"""
import os
import uuid
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

# Must be set before the application settings are first read
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["TIMEZONE"] = "UTC"

from mailportal.main import app
from mailportal.application.services import auth_service
from mailportal.config import get_settings
from mailportal.domain.models.admin import AdminUser
from mailportal.domain.models.audit_log import AuditLog
from mailportal.domain.models.user import User
from mailportal.infrastructure.database import Base, SessionLocal, engine, get_db

# Minimum bcrypt cost
auth_service.pwd_context.update(bcrypt__rounds=4)

ADMIN_PASSWORD = "admin-pass-123"
USER_PASSWORD = "user-pass-123"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    app.dependency_overrides[get_db] = lambda: session

    yield session

    app.dependency_overrides.clear()
    session.close()
    Base.metadata.drop_all(bind=engine)


# =============================================================================
# Identity Fixtures
# =============================================================================

@pytest.fixture
def make_admin(db: Session) -> Callable[..., AdminUser]:
    def _make(email: str = None, password: str = ADMIN_PASSWORD, is_active: bool = True) -> AdminUser:
        admin = AdminUser(
            email=email or f"admin-{uuid.uuid4().hex[:8]}@example.com",
            name="Test Admin",
            password_hash=auth_service.hash_password(password),
            is_active=is_active,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return admin

    return _make


@pytest.fixture
def admin(make_admin) -> AdminUser:
    return make_admin(email="admin@example.com")


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    def _make(email: str = None, password: str = USER_PASSWORD, **fields) -> User:
        user = User(
            email=email or f"user-{uuid.uuid4().hex[:8]}@afrimail.com",
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", "User"),
            password_hash=auth_service.hash_password(password) if password else None,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def user(make_user) -> User:
    return make_user(email="jane@afrimail.com", first_name="Jane", last_name="Doe")


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
def client(db: Session) -> TestClient:
    return TestClient(app)


def _client_with_token(token: str) -> TestClient:
    test_client = TestClient(app)
    test_client.cookies.set(get_settings().SESSION_COOKIE_NAME, token)
    return test_client


@pytest.fixture
def admin_client(db: Session, admin: AdminUser) -> TestClient:
    return _client_with_token(auth_service.admin_token(admin))


@pytest.fixture
def user_client(db: Session, user: User) -> TestClient:
    return _client_with_token(auth_service.user_token(user))


# =============================================================================
# Audit helpers
# =============================================================================

@pytest.fixture
def audit_rows(db: Session) -> Callable[..., list]:
    def _rows(action_type: str = None) -> list:
        db.expire_all()
        query = db.query(AuditLog)
        if action_type:
            query = query.filter(AuditLog.action_type == action_type)
        return query.order_by(AuditLog.id.asc()).all()

    return _rows

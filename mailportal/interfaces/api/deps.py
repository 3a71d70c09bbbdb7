"""FastAPI dependencies: session resolution and role guards."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from mailportal.application.services.auth_service import decode_access_token
from mailportal.config import get_settings
from mailportal.core.exceptions import ForbiddenException, UnauthorizedException
from mailportal.domain.models.admin import AdminUser
from mailportal.domain.models.user import User
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.infrastructure.database import get_db

settings = get_settings()
security = HTTPBearer(auto_error=False)


def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[SessionIdentity]:
    """Session cookie first, bearer token as fallback."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token and credentials:
        token = credentials.credentials
    if not token:
        return None

    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        return None
    return SessionIdentity(
        email=payload["sub"],
        user_id=payload.get("uid"),
        is_admin=bool(payload.get("is_admin")),
        name=payload.get("name"),
    )


def get_session_identity(
    identity: Optional[SessionIdentity] = Depends(get_optional_identity),
) -> SessionIdentity:
    if identity is None:
        raise UnauthorizedException("Unauthorized")
    return identity


def require_admin(
    identity: SessionIdentity = Depends(get_session_identity),
    db: Session = Depends(get_db),
) -> SessionIdentity:
    """Require an active admin account behind the session."""
    if not identity.is_admin:
        raise ForbiddenException("Admin access required")

    admin = db.query(AdminUser).filter(AdminUser.email == identity.email).first()
    if admin is None:
        raise UnauthorizedException("Admin account no longer exists")
    if not admin.is_active:
        raise ForbiddenException("Admin account is disabled")
    return identity


def get_current_user(
    identity: SessionIdentity = Depends(get_session_identity),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the end-user record behind the session."""
    if identity.is_admin:
        raise ForbiddenException("End-user session required")

    user = db.query(User).filter(User.email == identity.email).first()
    if user is None:
        raise UnauthorizedException("User not found")
    if user.is_suspended:
        raise ForbiddenException("Your account has been suspended")
    return user

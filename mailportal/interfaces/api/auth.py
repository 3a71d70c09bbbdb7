"""Auth API routes: admin and end-user sign-in, sign-up, logout, me."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from mailportal.application.services import auth_service
from mailportal.config import get_settings
from mailportal.core.exceptions import UnauthorizedException
from mailportal.core.middleware import client_ip
from mailportal.domain.models.admin import AdminUser
from mailportal.domain.models.user import User
from mailportal.domain.schemas.auth import (
    AdminSummary,
    LoginRequest,
    SessionIdentity,
    SignupRequest,
    UsernameCheck,
)
from mailportal.domain.schemas.user import UserRead
from mailportal.infrastructure.database import get_db
from mailportal.interfaces.api.deps import get_optional_identity

settings = get_settings()
router = APIRouter(prefix="/auth", tags=["Auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.JWT_EXPIRATION_MINUTES * 60,
        path="/",
    )


@router.post("/admin-login")
def admin_login(body: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    admin = auth_service.authenticate_admin(db, body.email, body.password, client_ip(request))
    _set_session_cookie(response, auth_service.admin_token(admin))
    return {"success": True, "admin": AdminSummary.model_validate(admin)}


@router.post("/login")
def login(body: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    user = auth_service.authenticate_user(
        db,
        body.email,
        body.password,
        client_ip(request),
        request.headers.get("user-agent"),
    )
    _set_session_cookie(response, auth_service.user_token(user))
    return {
        "success": True,
        "user": {
            "id": user.id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
        },
    }


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, db: Session = Depends(get_db)):
    user = auth_service.signup(db, body)
    return {"success": True, "user": UserRead.model_validate(user)}


@router.post("/check-username")
def check_username(body: UsernameCheck, db: Session = Depends(get_db)):
    return {"available": auth_service.is_username_available(db, body.username)}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return {"success": True}


@router.get("/me")
def get_me(
    identity: Optional[SessionIdentity] = Depends(get_optional_identity),
    db: Session = Depends(get_db),
):
    if identity is None:
        raise UnauthorizedException("Unauthorized")

    if identity.is_admin:
        admin = db.query(AdminUser).filter(AdminUser.email == identity.email).first()
        if admin is None or not admin.is_active:
            raise UnauthorizedException("Unauthorized")
        return {
            "id": admin.id,
            "email": admin.email,
            "name": admin.name,
            "role": admin.role_name,
            "isAdmin": True,
        }

    user = db.query(User).filter(User.email == identity.email).first()
    if user is None:
        raise UnauthorizedException("Unauthorized")
    return {**UserRead.model_validate(user).model_dump(mode="json"), "isAdmin": False}

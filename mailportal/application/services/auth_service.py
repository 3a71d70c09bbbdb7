"""Auth service: password hashing, session tokens, sign-in and sign-up."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from mailportal.application.services.audit_service import record_audit
from mailportal.config import get_settings
from mailportal.core.clock import utcnow
from mailportal.core.exceptions import ForbiddenException, UnauthorizedException, ValidationException
from mailportal.domain.models.admin import AdminUser
from mailportal.domain.models.login_activity import LoginActivity
from mailportal.domain.models.user import User
from mailportal.domain.schemas.auth import SignupRequest

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def validate_password(password: Optional[str]) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationException(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        return None


def admin_token(admin: AdminUser) -> str:
    return create_access_token(
        data={"sub": admin.email, "uid": admin.id, "is_admin": True, "name": admin.name}
    )


def user_token(user: User) -> str:
    name = f"{user.first_name} {user.last_name}".strip()
    return create_access_token(
        data={"sub": user.email, "uid": user.id, "is_admin": False, "name": name}
    )


def normalize_login_email(email: str) -> str:
    email = email.strip()
    return email if "@" in email else f"{email}@{settings.MAIL_DOMAIN}"


def get_admin_by_email(db: Session, email: str) -> Optional[AdminUser]:
    return db.query(AdminUser).filter(AdminUser.email == email).first()


def authenticate_admin(
    db: Session, email: Optional[str], password: Optional[str], ip_address: Optional[str] = None
) -> AdminUser:
    if not email or not password:
        raise ValidationException("Email and password are required")

    admin = get_admin_by_email(db, email.strip())
    if not admin or not verify_password(password, admin.password_hash):
        logger.warning("Admin login failed", email=email, ip=ip_address)
        raise UnauthorizedException("Invalid credentials")
    if not admin.is_active:
        raise ForbiddenException("Admin account is disabled")

    admin.last_login = utcnow()
    db.commit()
    db.refresh(admin)

    record_audit(db, "admin_login", admin.email, None, "Admin logged in", ip_address)
    return admin


def _log_login(db: Session, email: str, success: bool, reason: Optional[str], ip: Optional[str], agent: Optional[str]):
    db.add(
        LoginActivity(
            user_email=email,
            success=success,
            failure_reason=reason,
            ip_address=ip or "unknown",
            user_agent=agent or "unknown",
        )
    )
    db.commit()


def authenticate_user(
    db: Session,
    email: Optional[str],
    password: Optional[str],
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> User:
    """End-user sign-in with failed-attempt counting and temporary lockout."""
    if not email or not password:
        raise ValidationException("Email and password are required")

    email = normalize_login_email(email)
    user = db.query(User).filter(User.email == email).first()
    if not user:
        _log_login(db, email, False, "Unknown account", ip_address, user_agent)
        raise UnauthorizedException("Invalid email or password")

    now = utcnow()
    if user.is_locked(now):
        _log_login(db, email, False, "Account locked", ip_address, user_agent)
        raise ForbiddenException("Account is temporarily locked. Please try again later.")
    if user.locked_until is not None:
        # Lock has run out: the next failure starts a fresh count
        user.failed_login_attempts = 0
        user.locked_until = None

    if not verify_password(password, user.password_hash):
        user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
        if user.failed_login_attempts >= settings.MAX_FAILED_LOGIN_ATTEMPTS:
            user.locked_until = now + timedelta(minutes=settings.ACCOUNT_LOCK_MINUTES)
            logger.warning("Account locked after failed logins", email=email, attempts=user.failed_login_attempts)
        db.commit()
        _log_login(db, email, False, "Invalid password", ip_address, user_agent)
        raise UnauthorizedException("Invalid email or password")

    if user.is_suspended:
        _log_login(db, email, False, "Account suspended", ip_address, user_agent)
        raise ForbiddenException("Your account has been suspended")

    user.failed_login_attempts = 0
    user.locked_until = None
    user.last_login = now
    db.commit()
    db.refresh(user)
    _log_login(db, email, True, None, ip_address, user_agent)
    return user


def is_username_available(db: Session, username: str) -> bool:
    email = normalize_login_email(username.lower())
    return db.query(User).filter(User.email == email).first() is None


def signup(db: Session, body: SignupRequest) -> User:
    if body.website:
        # Honeypot filled in: reject without revealing why
        logger.warning("Signup honeypot triggered", email=body.email)
        raise ValidationException("Invalid submission")

    required = {
        "first_name": body.first_name,
        "last_name": body.last_name,
        "email": body.email,
        "password": body.password,
        "recovery_email": body.recovery_email,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ValidationException(f"Missing required fields: {', '.join(missing)}")
    validate_password(body.password)

    email = normalize_login_email(body.email.lower())
    if db.query(User).filter(User.email == email).first():
        raise ValidationException("An account with this email already exists")

    date_of_birth = None
    if body.date_of_birth:
        try:
            date_of_birth = datetime.strptime(body.date_of_birth, "%Y-%m-%d").date()
        except ValueError:
            raise ValidationException("date_of_birth must be YYYY-MM-DD")

    user = User(
        email=email,
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        recovery_email=body.recovery_email,
        recovery_phone=body.recovery_phone,
        date_of_birth=date_of_birth,
        gender=body.gender,
        password_hash=hash_password(body.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User signed up", email=email)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise UnauthorizedException("Current password is incorrect")
    validate_password(new_password)
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Password changed", email=user.email)


"""Pydantic schemas for sign-in, sign-up and the session identity."""

from pydantic import BaseModel
from typing import Optional


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SignupRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    recovery_email: Optional[str] = None
    recovery_phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    # Honeypot: real browsers leave it empty
    website: Optional[str] = None


class UsernameCheck(BaseModel):
    username: str


class AdminSummary(BaseModel):
    id: str
    email: str
    name: str

    model_config = {"from_attributes": True}


class SessionIdentity(BaseModel):
    """Caller resolved from the session token, passed explicitly to services."""

    email: str
    user_id: Optional[str] = None
    is_admin: bool = False
    name: Optional[str] = None

    model_config = {"frozen": True}

"""End-user API routes: profile, password, mailbox and support tickets."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mailportal.application.services import account_service, auth_service, quota_service, support_service
from mailportal.domain.models.user import User
from mailportal.domain.repositories.user_repository import UserRepository
from mailportal.domain.schemas.support import TicketCreate, TicketRead
from mailportal.domain.schemas.user import MailboxUsage, PasswordChange, ProfileUpdate, UserRead
from mailportal.infrastructure.database import get_db
from mailportal.interfaces.api.deps import get_current_user
from mailportal.interfaces.deps import get_user_repository

router = APIRouter(prefix="/user", tags=["User"])


@router.get("/profile", response_model=UserRead)
def get_profile(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)


@router.put("/profile", response_model=UserRead)
def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    user = account_service.update_profile(repo, user, body)
    return UserRead.model_validate(user)


@router.put("/password")
def change_password(
    body: PasswordChange,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    auth_service.change_password(db, user, body.current_password, body.new_password)
    return {"success": True}


@router.get("/mailbox-info", response_model=MailboxUsage)
def mailbox_info(
    user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    return quota_service.get_usage(repo, user.email)


@router.get("/support/tickets")
def list_my_tickets(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    tickets = support_service.list_user_tickets(db, user.email)
    return [TicketRead.model_validate(t) for t in tickets]


@router.post("/support/tickets", response_model=TicketRead, status_code=status.HTTP_201_CREATED)
def create_my_ticket(
    body: TicketCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ticket = support_service.create_ticket(db, body, user.email)
    return TicketRead.model_validate(ticket)

"""
Repository providers for the API layer.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from mailportal.domain.models.alias import EmailAlias
from mailportal.domain.models.announcement import Announcement
from mailportal.domain.models.group import UserGroup
from mailportal.domain.models.mail_domain import MailDomain
from mailportal.domain.models.scheduled_action import ScheduledAction
from mailportal.domain.models.sending_limit import EmailSendingLimit
from mailportal.domain.models.template import UserTemplate
from mailportal.domain.models.user import User
from mailportal.domain.repositories.base import BaseRepository
from mailportal.domain.repositories.sending_limit_repository import SendingLimitRepository
from mailportal.domain.repositories.user_repository import UserRepository
from mailportal.infrastructure.database import get_db
from mailportal.infrastructure.repositories.base_repository import SQLAlchemyRepository
from mailportal.infrastructure.repositories.sending_limit_repository import SQLAlchemySendingLimitRepository
from mailportal.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return SQLAlchemyUserRepository(db, User)


def get_sending_limit_repository(db: Session = Depends(get_db)) -> SendingLimitRepository:
    return SQLAlchemySendingLimitRepository(db, EmailSendingLimit)


def get_domain_repository(db: Session = Depends(get_db)) -> BaseRepository[MailDomain]:
    return SQLAlchemyRepository(db, MailDomain)


def get_alias_repository(db: Session = Depends(get_db)) -> BaseRepository[EmailAlias]:
    return SQLAlchemyRepository(db, EmailAlias)


def get_group_repository(db: Session = Depends(get_db)) -> BaseRepository[UserGroup]:
    return SQLAlchemyRepository(db, UserGroup)


def get_template_repository(db: Session = Depends(get_db)) -> BaseRepository[UserTemplate]:
    return SQLAlchemyRepository(db, UserTemplate)


def get_announcement_repository(db: Session = Depends(get_db)) -> BaseRepository[Announcement]:
    return SQLAlchemyRepository(db, Announcement)


def get_scheduled_action_repository(db: Session = Depends(get_db)) -> BaseRepository[ScheduledAction]:
    return SQLAlchemyRepository(db, ScheduledAction)

"""FastAPI application: main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mailportal.config import get_settings
from mailportal.infrastructure.database import engine, Base, SessionLocal
from mailportal.core.logging import configure_logging
from mailportal.core.middleware import setup_middleware
from mailportal.core.exceptions import register_exception_handlers

# Import all models so SQLAlchemy knows about them
from mailportal.domain.models.user import User
from mailportal.domain.models.login_activity import LoginActivity
from mailportal.domain.models.admin import AdminRole, AdminUser
from mailportal.domain.models.mailbox import MailboxMetadata
from mailportal.domain.models.sending_limit import EmailSendingLimit, SendingLimitViolation, SendingTier
from mailportal.domain.models.audit_log import AuditLog
from mailportal.domain.models.mail_domain import MailDomain
from mailportal.domain.models.alias import EmailAlias
from mailportal.domain.models.group import UserGroup, UserGroupMember
from mailportal.domain.models.template import UserTemplate
from mailportal.domain.models.announcement import Announcement
from mailportal.domain.models.scheduled_action import ScheduledAction
from mailportal.domain.models.support_ticket import SupportTicket

# Import routers
from mailportal.interfaces.api.auth import router as auth_router
from mailportal.interfaces.api.user import router as user_router
from mailportal.interfaces.api.admin_users import router as admin_users_router
from mailportal.interfaces.api.sending_limits import router as sending_limits_router
from mailportal.interfaces.api.sending_limits import tiers_router as sending_tiers_router
from mailportal.interfaces.api.audit_logs import router as audit_logs_router
from mailportal.interfaces.api.domains import router as domains_router
from mailportal.interfaces.api.aliases import router as aliases_router
from mailportal.interfaces.api.groups import router as groups_router
from mailportal.interfaces.api.templates import router as templates_router
from mailportal.interfaces.api.announcements import router as announcements_router
from mailportal.interfaces.api.announcements import feed_router as announcement_feed_router
from mailportal.interfaces.api.scheduled_actions import router as scheduled_actions_router
from mailportal.interfaces.api.support import router as support_router
from mailportal.interfaces.api.admins import router as admins_router
from mailportal.interfaces.api.dashboard import router as dashboard_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting Mail Portal...", env=settings.ENVIRONMENT)

    # No migrations: tables are created/verified on startup
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
        from mailportal.application.services.admin_service import ensure_bootstrap_admin
        db = SessionLocal()
        try:
            if ensure_bootstrap_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD):
                logger.info("Bootstrap admin created", email=settings.ADMIN_EMAIL)
        finally:
            db.close()

    if settings.SCHEDULER_ENABLED:
        from mailportal.scheduler.jobs import start_scheduler
        start_scheduler()

    yield

    if settings.SCHEDULER_ENABLED:
        from mailportal.scheduler.jobs import stop_scheduler
        stop_scheduler()
    logger.info("Mail Portal stopped")


app = FastAPI(
    title="Mail Portal",
    description="Webmail account management API: users, quotas, sending limits and directory",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Every error leaves as {"error": "..."}
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(announcement_feed_router)
app.include_router(admin_users_router)
app.include_router(sending_limits_router)
app.include_router(sending_tiers_router)
app.include_router(audit_logs_router)
app.include_router(domains_router)
app.include_router(aliases_router)
app.include_router(groups_router)
app.include_router(templates_router)
app.include_router(announcements_router)
app.include_router(scheduled_actions_router)
app.include_router(support_router)
app.include_router(admins_router)
app.include_router(dashboard_router)


@app.get("/")
def root():
    return {
        "name": "Mail Portal",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}

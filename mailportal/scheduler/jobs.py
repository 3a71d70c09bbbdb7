"""APScheduler jobs: sending-counter rollover and scheduled-action execution."""

import logging
from datetime import datetime

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from mailportal.config import get_settings
from mailportal.infrastructure.database import SessionLocal

settings = get_settings()
logger = logging.getLogger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

scheduler = AsyncIOScheduler(timezone=tz)


def sending_rollover_job():
    """Zero sending counters whose hour or local day has passed."""
    from mailportal.application.services.sending_limit_service import rollover_counters
    from mailportal.domain.models.sending_limit import EmailSendingLimit
    from mailportal.infrastructure.repositories.sending_limit_repository import SQLAlchemySendingLimitRepository

    logger.info(f"Running sending counter rollover at {datetime.now(tz).strftime('%Y-%m-%d %H:%M')}")

    db = SessionLocal()
    try:
        repo = SQLAlchemySendingLimitRepository(db, EmailSendingLimit)
        result = rollover_counters(repo)
        logger.info(f"Sending counter rollover result: {result}")
    except Exception as e:
        db.rollback()
        logger.error(f"Sending counter rollover failed: {e}")
    finally:
        db.close()


def scheduled_action_job():
    """Execute pending scheduled actions that are due."""
    from mailportal.application.services.scheduled_action_service import execute_due
    from mailportal.domain.models.scheduled_action import ScheduledAction
    from mailportal.domain.models.user import User
    from mailportal.infrastructure.repositories.base_repository import SQLAlchemyRepository
    from mailportal.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

    db = SessionLocal()
    try:
        result = execute_due(
            SQLAlchemyRepository(db, ScheduledAction),
            SQLAlchemyUserRepository(db, User),
        )
        if result["executed"] or result["cancelled"]:
            logger.info(f"Scheduled actions processed: {result}")
    except Exception as e:
        db.rollback()
        logger.error(f"Scheduled action job failed: {e}")
    finally:
        db.close()


def start_scheduler():
    """Start the APScheduler with the rollover and scheduled-action jobs."""
    scheduler.add_job(
        sending_rollover_job,
        trigger=IntervalTrigger(minutes=settings.SENDING_RESET_INTERVAL_MINUTES, timezone=tz),
        id="sending_counter_rollover",
        name=f"Sending counter rollover (every {settings.SENDING_RESET_INTERVAL_MINUTES} min)",
        replace_existing=True,
    )

    scheduler.add_job(
        scheduled_action_job,
        trigger=IntervalTrigger(minutes=settings.SCHEDULED_ACTION_INTERVAL_MINUTES, timezone=tz),
        id="scheduled_action_executor",
        name=f"Scheduled action executor (every {settings.SCHEDULED_ACTION_INTERVAL_MINUTES} min)",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(f"Scheduler started, timezone {settings.TIMEZONE}")


def stop_scheduler():
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")

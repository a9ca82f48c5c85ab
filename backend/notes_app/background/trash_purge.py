"""
Background job: permanently delete trashed notes past the retention window.

Uses APScheduler, started and stopped by the FastAPI lifespan.
A TRASH_RETENTION_DAYS of 0 keeps trashed notes forever (no job registered).
"""

import logging
from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from supabase import Client

from notes_app.config import get_settings
from notes_app.core.database import get_supabase_admin_client
from notes_app.features.notes.service import TRASH_TABLE

logger = logging.getLogger(__name__)

PURGE_JOB_ID = "trash_purge_job"

# Singleton scheduler instance
scheduler = AsyncIOScheduler(timezone=timezone.utc)


def purge_expired_trash(db: Client, retention_days: int, now: datetime | None = None) -> int:
    """Delete trashed notes older than `retention_days`.

    Returns:
        Number of trashed notes removed.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=retention_days)

    result = (
        db.table(TRASH_TABLE)
        .delete()
        .lt("trashed_at", cutoff.isoformat())
        .execute()
    )
    removed = len(result.data or [])
    if removed:
        logger.info(f"🧹 Purged {removed} trashed note(s) older than {retention_days} day(s)")
    return removed


async def run_trash_purge():
    """Callback for the APScheduler purge job."""
    settings = get_settings()
    try:
        purge_expired_trash(get_supabase_admin_client(), settings.TRASH_RETENTION_DAYS)
    except Exception as e:
        logger.error(f"❌ Trash purge failed: {e}", exc_info=True)


def init_scheduler():
    """Register the purge job and start the scheduler.

    Called during FastAPI lifespan startup.
    """
    settings = get_settings()
    if settings.TRASH_RETENTION_DAYS <= 0:
        logger.info("📅 Trash retention disabled, purge job not scheduled")
        return

    scheduler.add_job(
        func=run_trash_purge,
        trigger=CronTrigger(hour=settings.TRASH_PURGE_HOUR, minute=0, timezone=timezone.utc),
        id=PURGE_JOB_ID,
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"📅 Trash purge scheduled daily at {settings.TRASH_PURGE_HOUR:02d}:00 UTC "
        f"(retention {settings.TRASH_RETENTION_DAYS} days)"
    )


def shutdown_scheduler():
    """Gracefully shutdown the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("📅 Scheduler shut down.")

"""
Daily timer for the reminder run.

APScheduler owns the clock; the notifier only ever sees "now".
"""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ro_service.notifications.dispatcher import DueServiceNotifier

logger = logging.getLogger(__name__)

JOB_ID = "due-service-reminders"


async def run_scheduled_check(notifier: DueServiceNotifier) -> None:
    """Timer entry point. Outcomes only reach the logs."""
    logger.info("🔔 Checking for upcoming service reminders...")
    summary = await notifier.run()
    if summary.success:
        logger.info("✅ Scheduled reminder run finished: %s", summary.message)
    else:
        logger.error("❌ Scheduled reminder run failed: %s", summary.error)


def create_scheduler(notifier: DueServiceNotifier, settings) -> AsyncIOScheduler:
    """Build a scheduler with the daily reminder job registered."""
    scheduler = AsyncIOScheduler(timezone=settings.scheduler_timezone)
    scheduler.add_job(
        run_scheduled_check,
        CronTrigger(
            hour=settings.scheduler_hour,
            minute=settings.scheduler_minute,
            timezone=settings.scheduler_timezone,
        ),
        args=[notifier],
        id=JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler

"""
Scheduled alert checks.
Runs the low-stock and expired-products checks inside the FastAPI process,
twice a day by default (ALERT_JOBS_CRON).
"""

import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.events import EVENT_JOB_EXECUTED, EVENT_JOB_ERROR

from retailpulse.core.config import get_settings
from retailpulse.core.utils import utc_now
from retailpulse.database import async_session
from retailpulse.services.alert_service import AlertService

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: Optional[AsyncIOScheduler] = None


async def low_stock_task():
    """Task to raise and resolve low stock alerts"""
    try:
        logger.info("Running low stock check")
        async with async_session() as db:
            created, resolved = await AlertService(db).check_low_stock()
        logger.info(f"Low stock check done: {created} new, {resolved} resolved")
    except Exception as e:
        logger.exception(f"Low stock job failed: {str(e)}")


async def expired_products_task():
    """Task to deactivate expired products and warn about ones expiring soon"""
    try:
        logger.info("Checking expired products")
        async with async_session() as db:
            expired, expiring = await AlertService(db).check_expired_products()
        logger.info(f"Expiry check done: {expired} deactivated, {expiring} expiring soon")
    except Exception as e:
        logger.exception(f"Expired product job failed: {str(e)}")


ALERT_JOBS = (
    ("low_stock_check", "Low Stock Check", low_stock_task),
    ("expired_products_check", "Expired Products Check", expired_products_task),
)


def job_listener(event):
    """Listen to job events for logging"""
    if event.exception:
        logger.error(f"Job {event.job_id} crashed: {event.exception}")
    else:
        logger.info(f"Job {event.job_id} executed successfully at {utc_now()}")


def create_scheduler() -> AsyncIOScheduler:
    """Create and configure the scheduler"""
    global scheduler

    if scheduler is not None:
        return scheduler

    settings = get_settings()
    scheduler = AsyncIOScheduler(timezone=settings.BUSINESS_TIMEZONE)
    scheduler.add_listener(job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    if settings.ALERT_JOBS_ENABLED:
        for job_id, name, func in ALERT_JOBS:
            scheduler.add_job(
                func,
                CronTrigger.from_crontab(settings.ALERT_JOBS_CRON, timezone=settings.BUSINESS_TIMEZONE),
                id=job_id,
                name=name,
                replace_existing=True,
                max_instances=1,
                misfire_grace_time=3600,
            )
        logger.info(f"{len(ALERT_JOBS)} alert jobs scheduled at '{settings.ALERT_JOBS_CRON}'")
    else:
        logger.info("Alert jobs are disabled. Set ALERT_JOBS_ENABLED=true to enable")

    return scheduler


async def start_scheduler():
    """Start the scheduler"""
    global scheduler

    if scheduler is None:
        scheduler = create_scheduler()

    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started successfully")

        jobs = scheduler.get_jobs()
        if jobs:
            logger.info(f"Active scheduled jobs: {len(jobs)}")
            for job in jobs:
                logger.info(f"  - {job.name}: {job.trigger}")
        else:
            logger.info("No scheduled jobs configured")


async def stop_scheduler():
    """Stop the scheduler gracefully"""
    global scheduler

    if scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped successfully")
    scheduler = None


async def get_scheduler_status():
    """Get current scheduler status and job information"""
    if scheduler is None:
        return {"status": "not_initialized", "jobs": []}

    jobs_info = []
    for job in scheduler.get_jobs():
        jobs_info.append({
            "id": job.id,
            "name": job.name,
            "next_run": job.next_run_time.isoformat() if getattr(job, "next_run_time", None) else None,
            "trigger": str(job.trigger)
        })

    return {
        "status": "running" if scheduler.running else "stopped",
        "jobs": jobs_info
    }

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from license_alerts.config import Settings
from license_alerts.workflow import run_license_alerts

logger = logging.getLogger(__name__)

JOB_ID = "license-alerts"


def workflow_job(settings: Settings) -> None:
    result = run_license_alerts(settings)
    if not result.success:
        logger.warning("Scheduled license alerts run finished with exit code %s", result.exit_code)


def add_workflow_job(scheduler, settings: Settings) -> None:
    # One run at a time per process; missed ticks collapse into a single run.
    scheduler.add_job(
        workflow_job,
        CronTrigger.from_crontab(settings.cron, timezone="UTC"),
        args=[settings],
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )


def build_scheduler(settings: Settings, background: bool = False):
    scheduler = BackgroundScheduler(daemon=True) if background else BlockingScheduler()
    add_workflow_job(scheduler, settings)
    return scheduler


def run_forever(settings: Settings) -> None:
    scheduler = build_scheduler(settings)
    logger.info("License alerts scheduled with cron '%s' (UTC)", settings.cron)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")

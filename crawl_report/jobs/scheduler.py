"""Cron-driven process that posts the crawl report.

    python -m crawl_report.jobs.scheduler          # run on REPORT_CRON
    python -m crawl_report.jobs.scheduler --once   # post one report and exit
"""

from __future__ import annotations

import argparse
import logging

from apscheduler.events import EVENT_JOB_ERROR, JobExecutionEvent
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from crawl_report.config import Settings, load_settings
from crawl_report.jobs.tasks import run_report

JOB_ID = "crawl_report"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(__name__)


def _on_job_error(event: JobExecutionEvent) -> None:
    logger.error("Report job %s failed", event.job_id, exc_info=event.exception)


def build_scheduler(settings: Settings) -> BlockingScheduler:
    scheduler = BlockingScheduler(timezone=settings.tz)
    scheduler.add_job(
        run_report,
        trigger=CronTrigger.from_crontab(settings.cron, timezone=settings.tz),
        kwargs={"name": settings.report_name, "settings": settings},
        id=JOB_ID,
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=1800,
    )
    scheduler.add_listener(_on_job_error, EVENT_JOB_ERROR)
    logger.info("Scheduled report %s on %r (%s)", settings.report_name, settings.cron, settings.timezone)
    return scheduler


def main() -> None:
    parser = argparse.ArgumentParser(description="Post the crawl report on a cron schedule")
    parser.add_argument("--once", action="store_true", help="Post one report now and exit")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    settings = load_settings()

    if args.once:
        run_report(settings.report_name, settings=settings)
        return

    build_scheduler(settings).start()


if __name__ == "__main__":
    main()

# dailyreport/scheduler.py
import os

from apscheduler.schedulers.background import BackgroundScheduler

from .logger import logger
from .report_job import check_for_new_report


def tick():
    """One email-triggered check; returns the ReportResult."""
    logger.debug("[SCHEDULER] tick()")
    result = check_for_new_report()
    logger.info(f"[SCHEDULER] ok={result.ok} msg={result.message} metrics={result.metrics}")
    return result


def start_scheduler():
    minutes = int(os.getenv("REPORT_CHECK_MINUTES", "5"))
    sched = BackgroundScheduler(timezone="UTC")
    # one check at a time; a slow run just skips the next slot
    sched.add_job(tick, "interval", minutes=minutes, id="check_report", max_instances=1, coalesce=True)
    sched.start()
    logger.info(f"[SCHEDULER] Checking for new reports every {minutes} minute(s)")
    return sched

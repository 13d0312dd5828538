"""
Scheduler initialization and management.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from core.config import get_settings

from . import jobs

logger = logging.getLogger("backend.scheduler")

JOB_DEFINITIONS = {
    "process_expired_trials": {
        "func": jobs.run_trial_expiry_job,
        "description": "Downgrade subscriptions whose free trial has ended",
    },
    "cleanup_token_blacklist": {
        "func": jobs.run_token_blacklist_cleanup,
        "description": "Clean up expired tokens from blacklist",
    },
}

scheduler = AsyncIOScheduler(timezone="UTC")


def _cron(trigger_str: str) -> CronTrigger:
    return CronTrigger.from_crontab(trigger_str, timezone="UTC")


def schedule_default_jobs() -> None:
    settings = get_settings()
    scheduler.add_job(
        jobs.run_trial_expiry_job,
        _cron(settings.scheduler_trial_cron),
        id="process_expired_trials",
        replace_existing=True,
        misfire_grace_time=300,
    )
    scheduler.add_job(
        jobs.run_token_blacklist_cleanup,
        _cron(settings.scheduler_cleanup_cron),
        id="cleanup_token_blacklist",
        replace_existing=True,
        misfire_grace_time=600,
    )


def start_scheduler() -> None:
    if scheduler.running:
        return
    schedule_default_jobs()
    scheduler.start()
    logger.info("Scheduler started with %d jobs", len(scheduler.get_jobs()))


def shutdown_scheduler() -> None:
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler shut down")


def list_jobs() -> list[dict[str, Any]]:
    items = []
    for job in scheduler.get_jobs():
        next_run = getattr(job, "next_run_time", None)
        items.append(
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": next_run.isoformat() if next_run else None,
                "trigger": str(job.trigger),
                "description": JOB_DEFINITIONS.get(job.id, {}).get("description"),
            }
        )
    return items


def trigger_job(job_id: str) -> None:
    """Queue a one-off run of a known job right now."""
    job_def = JOB_DEFINITIONS.get(job_id)
    if not job_def:
        raise ValueError(f"Unknown job_id: {job_id}")
    scheduler.add_job(
        job_def["func"],
        "date",
        run_date=datetime.now(timezone.utc),
        id=f"{job_id}_manual_{int(datetime.now(timezone.utc).timestamp())}",
    )

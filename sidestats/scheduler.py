"""
Scheduler for the periodic GA stats sync

Uses APScheduler to run the sync on the configured cron schedule.
"""
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
import asyncio
from typing import Optional

from sidestats.bootstrap import build_ga_sync_job
from sidestats.config import get_settings
from sidestats.services.ga_sync import GaSyncJob
from sidestats.utils.logger import log

settings = get_settings()
scheduler = AsyncIOScheduler()

_ga_sync_job: Optional[GaSyncJob] = None


def get_ga_sync_job() -> GaSyncJob:
    """Lazy-init so importing the scheduler doesn't build the GA client"""
    global _ga_sync_job
    if _ga_sync_job is None:
        _ga_sync_job = build_ga_sync_job(settings)
    return _ga_sync_job


# Sync Functions

def sync_ga():
    """Sync GA summary + question stats for all configured accounts"""
    log.info("Starting GA stats sync...")
    get_ga_sync_job().run_update_ga()


def setup_scheduler():
    """Configure all scheduled jobs"""
    if not settings.stats_enabled:
        log.info("Stats sync disabled, no jobs scheduled")
        return

    # Sync functions are plain callables; APScheduler runs them in its
    # thread pool, max_instances=1 keeps runs from overlapping
    scheduler.add_job(
        sync_ga,
        trigger=CronTrigger.from_crontab(settings.stats_schedule, timezone=settings.stats_timezone),
        id='ga_sync',
        name='GA Stats Daily Sync',
        replace_existing=True,
        max_instances=1
    )

    log.info(f"Scheduler configured with GA sync ({settings.stats_schedule} {settings.stats_timezone})")


def start_scheduler():
    """Start the scheduler"""
    setup_scheduler()
    scheduler.start()
    log.info("Scheduler started")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
    log.info("Scheduler stopped")


def run_sync_now(connector_name: str) -> dict:
    """
    Manually trigger a sync

    Args:
        connector_name: Name of sync (ga)

    Returns:
        Dict with sync results
    """
    sync_functions = {
        'ga': sync_ga,
    }

    if connector_name not in sync_functions:
        return {
            'success': False,
            'error': f'Unknown connector: {connector_name}. Valid options: {", ".join(sync_functions.keys())}'
        }

    log.info(f"Manually triggering {connector_name} sync...")
    sync_functions[connector_name]()

    return {
        'success': True,
        'message': f'{connector_name} sync finished'
    }


def get_scheduled_jobs() -> list:
    """
    Get list of all scheduled jobs

    Returns:
        List of job info dicts
    """
    jobs = []

    for job in scheduler.get_jobs():
        next_run = getattr(job, "next_run_time", None)

        jobs.append({
            'id': job.id,
            'name': job.name,
            'next_run': next_run.isoformat() if next_run else None,
            'trigger': str(job.trigger)
        })

    return jobs


async def _serve():
    start_scheduler()
    try:
        await asyncio.Event().wait()
    finally:
        stop_scheduler()


# CLI for manual syncs

if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m sidestats.scheduler <command> [connector_name]")
        print("\nCommands:")
        print("  start              Start the scheduler")
        print("  sync <connector>   Manually run a sync")
        print("  list               List all scheduled jobs")
        print("\nConnectors:")
        print("  ga")
        sys.exit(1)

    command = sys.argv[1]

    if command == "start":
        print("Starting scheduler...")
        try:
            asyncio.run(_serve())
        except (KeyboardInterrupt, SystemExit):
            print("\nShutting down scheduler...")

    elif command == "sync":
        if len(sys.argv) < 3:
            print("Error: Please specify a connector name")
            print("Usage: python -m sidestats.scheduler sync <connector_name>")
            sys.exit(1)

        from sidestats.models.base import init_db
        init_db()

        result = run_sync_now(sys.argv[2])

        if result['success']:
            print(f"✓ {result['message']}")
        else:
            print(f"✗ Error: {result['error']}")
            sys.exit(1)

    elif command == "list":
        setup_scheduler()
        print("\nScheduled Jobs:")
        print("-" * 80)

        jobs = get_scheduled_jobs()

        if not jobs:
            print("No jobs scheduled")
        else:
            for job in jobs:
                print(f"\nID:       {job['id']}")
                print(f"Name:     {job['name']}")
                print(f"Next Run: {job['next_run']}")
                print(f"Trigger:  {job['trigger']}")

    else:
        print(f"Unknown command: {command}")
        sys.exit(1)

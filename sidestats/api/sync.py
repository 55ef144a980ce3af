"""
GA sync endpoints
"""
from fastapi import APIRouter, BackgroundTasks, Depends

from sidestats.repositories.ga_stats_repository import GaStatsRepository
from sidestats.services.ga_sync import SYNC_SOURCE, GaSyncJob
from sidestats.utils.logger import log

router = APIRouter(prefix="/sync", tags=["sync"])


def get_ga_sync_job() -> GaSyncJob:
    from sidestats.scheduler import get_ga_sync_job as _get_job
    return _get_job()


def get_repository() -> GaStatsRepository:
    return GaStatsRepository()


@router.post("/ga")
def trigger_ga_sync(
    background_tasks: BackgroundTasks,
    job: GaSyncJob = Depends(get_ga_sync_job),
):
    """
    Run the GA sync in the background.
    Check the outcome at GET /sync/status
    """
    log.info("GA sync requested via API")
    background_tasks.add_task(job.run_update_ga)
    return {
        "message": "GA sync started in background",
        "accounts": list(job.accounts.keys()),
        "check_progress": "/sync/status",
    }


@router.get("/status")
def get_sync_status(repository: GaStatsRepository = Depends(get_repository)):
    """Outcome of the last GA sync run and the scheduled jobs"""
    from sidestats.scheduler import get_scheduled_jobs

    return {
        "ga": repository.get_sync_status(SYNC_SOURCE),
        "jobs": get_scheduled_jobs(),
    }

"""
Scheduler wiring tests: jobs are registered but the scheduler is never started.
"""
import pytest

from sidestats import scheduler as scheduler_module


@pytest.fixture
def fresh_scheduler(monkeypatch):
    from apscheduler.schedulers.asyncio import AsyncIOScheduler

    sched = AsyncIOScheduler()
    monkeypatch.setattr(scheduler_module, "scheduler", sched)
    return sched


def test_ga_sync_job_is_scheduled_from_cron_expression(fresh_scheduler, monkeypatch):
    monkeypatch.setattr(scheduler_module.settings, "stats_enabled", True)
    monkeypatch.setattr(scheduler_module.settings, "stats_schedule", "30 4 * * *")

    scheduler_module.setup_scheduler()

    jobs = scheduler_module.get_scheduled_jobs()
    assert [j["id"] for j in jobs] == ["ga_sync"]
    assert "hour='4'" in jobs[0]["trigger"]
    assert "minute='30'" in jobs[0]["trigger"]


def test_disabled_sync_schedules_nothing(fresh_scheduler, monkeypatch):
    monkeypatch.setattr(scheduler_module.settings, "stats_enabled", False)

    scheduler_module.setup_scheduler()

    assert scheduler_module.get_scheduled_jobs() == []


def test_run_sync_now_runs_the_job(monkeypatch, ga_client, recording_repository):
    from sidestats.services.ga_sync import GaSyncJob

    job = GaSyncJob(ga_client, recording_repository, {"A": "ga-A"}, retry_base_delay=0)
    monkeypatch.setattr(scheduler_module, "_ga_sync_job", job)

    result = scheduler_module.run_sync_now("ga")

    assert result["success"] is True
    assert len(recording_repository.saves) == 1


def test_run_sync_now_unknown_connector():
    result = scheduler_module.run_sync_now("shopify")

    assert result["success"] is False
    assert "Unknown connector" in result["error"]

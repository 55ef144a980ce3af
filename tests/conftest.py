"""
Shared fakes for provider clients and the stats sink.
"""
from collections import defaultdict
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sidestats.connectors.base_connector import AnalyticsClient, BuildSystemClient, PerformanceMonitorClient
from sidestats.connectors.types import DailySummary, QuestionStat
from sidestats.errors import PersistenceError, ProviderError
from sidestats.models.base import init_db
from sidestats.repositories.ga_stats_repository import GaStatsRepository


class FakeClock:
    """Clock that the fake providers can move forward to simulate latency"""

    def __init__(self, now: datetime):
        self.now = now
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        return self.now


class FakeAnalyticsClient(AnalyticsClient):
    def __init__(self, questions=None, clock=None, latency=None):
        super().__init__("fake-ga")
        self.questions = questions or {}
        self.clock = clock
        self.latency = latency
        # ga_id -> number of calls that still fail
        self.summary_failures = defaultdict(int)
        self.breakdown_failures = defaultdict(int)
        self.realtime_failures = 0
        self.realtime_count = 42
        self.summary_calls = defaultdict(int)
        self.breakdown_calls = defaultdict(int)
        self.realtime_calls = []
        self.windows = []

    def validate_connection(self) -> bool:
        return True

    def _tick(self):
        if self.clock is not None and self.latency is not None:
            self.clock.now += self.latency

    def get_realtime(self, ga_id):
        self.realtime_calls.append(ga_id)
        if self.realtime_failures:
            self.realtime_failures -= 1
            raise ProviderError("realtime unavailable", provider=self.name)
        return self.realtime_count

    def get_summary_data(self, ga_id, start, end):
        self.summary_calls[ga_id] += 1
        self.windows.append((ga_id, start, end))
        self._tick()
        if self.summary_failures[ga_id]:
            self.summary_failures[ga_id] -= 1
            raise ProviderError(f"summary failed for {ga_id}", provider=self.name)
        return DailySummary(active_users=10, sessions=12, pageviews=30)

    def get_entity_breakdown(self, ga_id, start, end):
        self.breakdown_calls[ga_id] += 1
        self._tick()
        if self.breakdown_failures[ga_id]:
            self.breakdown_failures[ga_id] -= 1
            raise ProviderError(f"breakdown failed for {ga_id}", provider=self.name)
        return {
            qid: QuestionStat(question_id=qid, pageviews=views, paths=[f"/questions/{qid}"])
            for qid, views in self.questions.get(ga_id, {}).items()
        }


class FakeServersClient(PerformanceMonitorClient):
    def __init__(self, servers=None, failures=0):
        super().__init__("fake-nr")
        self.servers = servers if servers is not None else []
        self.failures = failures
        self.calls = 0

    def validate_connection(self) -> bool:
        return True

    def get_servers_stats(self):
        self.calls += 1
        if self.failures:
            self.failures -= 1
            raise ProviderError("servers unavailable", provider=self.name)
        return self.servers


class FakeProjectsClient(BuildSystemClient):
    def __init__(self, projects=None, failures=0):
        super().__init__("fake-tc")
        self.projects = projects if projects is not None else []
        self.failures = failures
        self.calls = 0

    def validate_connection(self) -> bool:
        return True

    def get_projects_status(self):
        self.calls += 1
        if self.failures:
            self.failures -= 1
            raise ProviderError("projects unavailable", provider=self.name)
        return self.projects


class RecordingRepository:
    """In-memory sink recording every save in call order"""

    def __init__(self, save_failures=0, status_fails=False):
        self.saves = []
        self.synced = set()
        self.save_failures = save_failures
        self.status_fails = status_fails
        self.statuses = []

    def save(self, account_key, ga_id, sync_date, summary, questions):
        if self.save_failures:
            self.save_failures -= 1
            raise PersistenceError("database is locked")
        self.saves.append({
            "account_key": account_key,
            "ga_id": ga_id,
            "date": sync_date,
            "summary": summary,
            "questions": questions,
        })
        return {"created": 1 + len(questions), "updated": 0}

    def has_summary(self, ga_id, sync_date):
        return (ga_id, sync_date) in self.synced

    def record_sync_status(self, source, success, attempts=0, retry_delay_seconds=0.0, errors=None):
        if self.status_fails:
            raise PersistenceError("status table missing")
        self.statuses.append({
            "source": source,
            "success": success,
            "attempts": attempts,
            "errors": list(errors or []),
        })


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 17, 23, 59, 30, tzinfo=timezone.utc))


@pytest.fixture
def ga_client():
    return FakeAnalyticsClient()


@pytest.fixture
def servers_client():
    return FakeServersClient()


@pytest.fixture
def projects_client():
    return FakeProjectsClient()


@pytest.fixture
def recording_repository():
    return RecordingRepository()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db_repository(session_factory):
    return GaStatsRepository(session_factory=session_factory)


@pytest.fixture
def ga_client_factory():
    return FakeAnalyticsClient


@pytest.fixture
def repository_factory():
    return RecordingRepository

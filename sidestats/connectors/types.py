"""
Result types returned by the provider connectors
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass
class DailySummary:
    """Site-wide GA metrics for one account over one day"""
    active_users: int = 0
    new_users: int = 0
    sessions: int = 0
    pageviews: int = 0
    engaged_sessions: int = 0
    bounce_rate: float = 0.0
    avg_session_duration: float = 0.0
    event_count: int = 0
    # Stamped by the sync job
    timestamp: Optional[date] = None


@dataclass
class QuestionStat:
    """Per-question page metrics for one account over one day"""
    question_id: int
    pageviews: int = 0
    users: int = 0
    engagement_seconds: float = 0.0
    paths: List[str] = field(default_factory=list)
    timestamp: Optional[date] = None

    def merge(self, pageviews: int, users: int, engagement_seconds: float, path: str):
        """Fold another page path of the same question into this record"""
        self.pageviews += pageviews
        self.users += users
        self.engagement_seconds += engagement_seconds
        if path not in self.paths:
            self.paths.append(path)


@dataclass
class ServerSummary:
    cpu: float = 0.0
    cpu_stolen: float = 0.0
    disk_io: float = 0.0
    memory: float = 0.0
    memory_used: int = 0
    memory_total: int = 0
    fullest_disk: float = 0.0
    fullest_disk_free: int = 0


@dataclass
class ServerStatus:
    """New Relic server health"""
    id: int
    name: str
    account_id: Optional[int] = None
    host: Optional[str] = None
    health_status: Optional[str] = None
    reporting: bool = False
    last_reported_at: Optional[datetime] = None
    summary: ServerSummary = field(default_factory=ServerSummary)


@dataclass
class BuildTypeStatus:
    id: str
    name: str
    last_build_number: Optional[str] = None
    last_build_status: Optional[str] = None  # SUCCESS, FAILURE, UNKNOWN
    last_build_state: Optional[str] = None  # finished, running, queued


@dataclass
class ProjectStatus:
    """TeamCity project with the last build of each build configuration"""
    id: str
    name: str
    description: Optional[str] = None
    parent_project_id: Optional[str] = None
    web_url: Optional[str] = None
    archived: bool = False
    build_types: List[BuildTypeStatus] = field(default_factory=list)

    @property
    def status(self) -> str:
        statuses = [b.last_build_status for b in self.build_types if b.last_build_status]
        if "FAILURE" in statuses:
            return "FAILURE"
        if "SUCCESS" in statuses:
            return "SUCCESS"
        return "UNKNOWN"

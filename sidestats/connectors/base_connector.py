"""
Base connector classes for all stats providers
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional
import requests

from sidestats.connectors.types import DailySummary, ProjectStatus, QuestionStat, ServerStatus
from sidestats.errors import ProviderError
from sidestats.utils.logger import log


class BaseConnector(ABC):
    """Base class for all provider connectors"""

    def __init__(self, name: str, timeout: float = 15.0):
        self.name = name
        self.timeout = timeout
        self.last_call = None
        self.call_count = 0
        self.error_count = 0

    @abstractmethod
    def validate_connection(self) -> bool:
        """Validate connection is working"""
        pass

    def _record_call(self, error: Optional[Exception] = None):
        self.last_call = datetime.utcnow()
        self.call_count += 1
        if error is not None:
            self.error_count += 1

    def _get_json(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        auth: Optional[tuple] = None,
    ) -> Any:
        """
        GET a JSON document, raising ProviderError on any failure.

        Network errors, non-2xx statuses and undecodable bodies all surface
        as ProviderError so callers handle a single error type.
        """
        try:
            response = requests.get(
                url,
                headers=headers,
                params=params,
                auth=auth,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            self._record_call(e)
            log.error(f"{self.name} request to {url} failed: {e}")
            raise ProviderError(f"request failed: {e}", provider=self.name) from e

        if response.status_code != 200:
            error = ProviderError(
                f"HTTP {response.status_code} from {url}: {response.text[:200]}",
                provider=self.name
            )
            self._record_call(error)
            log.error(str(error))
            raise error

        try:
            payload = response.json()
        except ValueError as e:
            self._record_call(e)
            raise ProviderError(f"malformed JSON from {url}", provider=self.name) from e

        self._record_call()
        return payload

    def get_status(self) -> Dict[str, Any]:
        """Get connector status"""
        return {
            "name": self.name,
            "last_call": self.last_call,
            "call_count": self.call_count,
            "error_count": self.error_count,
            "error_rate": self.error_count / max(self.call_count, 1),
        }


class AnalyticsClient(BaseConnector):
    """Web analytics capability: realtime, daily summary, per-question breakdown"""

    @abstractmethod
    def get_realtime(self, ga_id: str) -> int:
        pass

    @abstractmethod
    def get_summary_data(self, ga_id: str, start: datetime, end: datetime) -> DailySummary:
        """Site-wide metrics for the half-open window [start, end)"""
        pass

    @abstractmethod
    def get_entity_breakdown(self, ga_id: str, start: datetime, end: datetime) -> Dict[int, QuestionStat]:
        """Per-question metrics for the half-open window [start, end), keyed by question id"""
        pass


class PerformanceMonitorClient(BaseConnector):
    """Application performance monitoring capability"""

    @abstractmethod
    def get_servers_stats(self) -> List[ServerStatus]:
        pass


class BuildSystemClient(BaseConnector):
    """Continuous integration capability"""

    @abstractmethod
    def get_projects_status(self) -> List[ProjectStatus]:
        pass

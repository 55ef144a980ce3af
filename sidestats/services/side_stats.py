"""
Side Stats Service
One read interface over the analytics, performance-monitoring and CI providers
"""
from typing import Dict, List

from sidestats.connectors.base_connector import AnalyticsClient, BuildSystemClient, PerformanceMonitorClient
from sidestats.connectors.types import ProjectStatus, ServerStatus
from sidestats.errors import UnknownAccountError


class SideStatsService:
    """
    Pass-through facade over the three provider clients.

    Every call is a single delegation: no retry, no caching, errors
    propagate unchanged.
    """

    def __init__(
        self,
        ga_client: AnalyticsClient,
        nr_client: PerformanceMonitorClient,
        tc_client: BuildSystemClient,
        analytics_ids: Dict[str, str],
        realtime_key: str = "TheQuestion",
    ):
        self.ga_client = ga_client
        self.nr_client = nr_client
        self.tc_client = tc_client
        self.analytics_ids = dict(analytics_ids)
        self.realtime_key = realtime_key

    def realtime(self) -> int:
        """Active users right now on the realtime-tracked GA property"""
        ga_id = self.analytics_ids.get(self.realtime_key)
        if not ga_id:
            raise UnknownAccountError(
                f"no GA property configured for realtime key '{self.realtime_key}'",
                provider=self.ga_client.name
            )
        return self.ga_client.get_realtime(ga_id)

    def servers_stats(self) -> List[ServerStatus]:
        return self.nr_client.get_servers_stats()

    def project_stats(self) -> List[ProjectStatus]:
        return self.tc_client.get_projects_status()

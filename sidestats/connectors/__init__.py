"""Provider connectors for the side-stats service"""

from sidestats.connectors.base_connector import (
    AnalyticsClient,
    BaseConnector,
    BuildSystemClient,
    PerformanceMonitorClient,
)
from sidestats.connectors.ga4_connector import GA4Connector
from sidestats.connectors.newrelic_connector import NewRelicConnector
from sidestats.connectors.teamcity_connector import TeamCityConnector

__all__ = [
    "AnalyticsClient",
    "BaseConnector",
    "BuildSystemClient",
    "PerformanceMonitorClient",
    "GA4Connector",
    "NewRelicConnector",
    "TeamCityConnector",
]

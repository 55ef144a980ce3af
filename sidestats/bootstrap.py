"""
Wiring: build the stats facade and the GA sync job from settings
"""
from typing import Optional

from sidestats.config import Settings, get_settings
from sidestats.connectors.ga4_connector import GA4Connector
from sidestats.connectors.newrelic_connector import NewRelicConnector
from sidestats.connectors.teamcity_connector import TeamCityConnector
from sidestats.repositories.ga_stats_repository import GaStatsRepository
from sidestats.services.ga_sync import GaSyncJob
from sidestats.services.side_stats import SideStatsService


def build_ga_connector(settings: Settings) -> GA4Connector:
    return GA4Connector(
        key_file=settings.google_service_key_file,
        timeout=settings.http_timeout_seconds
    )


def build_side_stats(settings: Optional[Settings] = None, ga_client=None) -> SideStatsService:
    settings = settings or get_settings()
    return SideStatsService(
        ga_client=ga_client or build_ga_connector(settings),
        nr_client=NewRelicConnector(
            settings.newrelic_api_key,
            base_url=settings.newrelic_api_url,
            timeout=settings.http_timeout_seconds
        ),
        tc_client=TeamCityConnector(
            settings.teamcity_address,
            username=settings.teamcity_username,
            password=settings.teamcity_password,
            timeout=settings.http_timeout_seconds
        ),
        analytics_ids=settings.google_analytics_ids,
        realtime_key=settings.realtime_ga_key,
    )


def build_ga_sync_job(
    settings: Optional[Settings] = None,
    ga_client=None,
    repository: Optional[GaStatsRepository] = None,
) -> GaSyncJob:
    settings = settings or get_settings()
    return GaSyncJob(
        ga_client=ga_client or build_ga_connector(settings),
        repository=repository or GaStatsRepository(),
        accounts=settings.google_analytics_ids,
        max_retry=settings.ga_sync_max_retry,
        retry_base_delay=settings.ga_sync_retry_base_delay,
        retry_max_delay=settings.ga_sync_retry_max_delay,
        skip_synced=settings.ga_sync_skip_synced,
    )

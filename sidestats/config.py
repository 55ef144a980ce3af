"""
Configuration management for the side-stats service
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Dict, Optional


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Side Stats Service"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Database
    database_url: str = "sqlite:///./sidestats.db"

    # Google Analytics 4
    google_service_key_file: str = "./credentials/google-service-key.json"
    # Account key -> GA4 property id, e.g. {"TheQuestion": "123456789"}
    google_analytics_ids: Dict[str, str] = {}
    google_dfp_network_ids: Dict[str, str] = {}
    realtime_ga_key: str = "TheQuestion"

    # GA sync job
    stats_enabled: bool = True
    stats_schedule: str = "0 3 * * *"
    stats_timezone: str = "UTC"
    ga_sync_max_retry: int = 5
    ga_sync_retry_base_delay: float = 2.0  # 0 = retry immediately
    ga_sync_retry_max_delay: float = 60.0
    ga_sync_skip_synced: bool = False

    # New Relic
    newrelic_api_key: Optional[str] = None
    newrelic_api_url: str = "https://api.newrelic.com/v2"

    # TeamCity
    teamcity_address: Optional[str] = None
    teamcity_username: Optional[str] = None
    teamcity_password: Optional[str] = None

    # Outbound HTTP
    http_timeout_seconds: float = 15.0

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

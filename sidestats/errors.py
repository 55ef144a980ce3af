"""Error definitions for provider calls and stats persistence."""
from typing import Optional


class SideStatsError(Exception):
    """Base side-stats error."""

    pass


class ProviderError(SideStatsError):
    """A call to an external stats provider failed."""

    def __init__(self, message: str, provider: Optional[str] = None):
        self.message = message
        self.provider = provider
        super().__init__(f"{provider}: {message}" if provider else message)


class ConfigurationError(ProviderError):
    """A provider call was requested for something that is not configured."""

    pass


class UnknownAccountError(ConfigurationError):
    """No analytics account is configured under the requested key."""

    pass


class PersistenceError(SideStatsError):
    """Writing synced stats to the database failed."""

    pass

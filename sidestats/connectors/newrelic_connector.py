"""
New Relic data connector
Fetches server health from the New Relic REST API (v2)
"""
from typing import Any, Dict, List, Optional
from sidestats.connectors.base_connector import PerformanceMonitorClient
from sidestats.connectors.types import ServerStatus, ServerSummary
from sidestats.errors import ConfigurationError, ProviderError
from sidestats.utils.helpers import parse_datetime
from sidestats.utils.logger import log


class NewRelicConnector(PerformanceMonitorClient):
    """Connector for New Relic server monitoring"""

    def __init__(self, api_key: Optional[str], base_url: str = "https://api.newrelic.com/v2", timeout: float = 15.0):
        super().__init__("New Relic", timeout=timeout)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def headers(self) -> Dict[str, str]:
        return {"X-Api-Key": self.api_key} if self.api_key else {}

    def validate_connection(self) -> bool:
        """Validate New Relic connection"""
        if not self.api_key:
            return False
        try:
            self._get_json(f"{self.base_url}/servers.json", headers=self.headers, params={"page": 1})
            return True
        except ProviderError:
            return False

    def get_servers_stats(self) -> List[ServerStatus]:
        """List all servers with their latest health summary"""
        if not self.api_key:
            raise ConfigurationError("no API key configured", provider=self.name)

        servers = []
        page = 1
        while True:
            payload = self._get_json(
                f"{self.base_url}/servers.json",
                headers=self.headers,
                params={"page": page}
            )
            if not isinstance(payload, dict) or not isinstance(payload.get("servers"), list):
                raise ProviderError("unexpected servers payload", provider=self.name)

            batch = payload["servers"]
            servers.extend(self._parse_server(s) for s in batch)

            # The API pages 200 servers at a time
            if len(batch) < 200:
                break
            page += 1

        log.info(f"Fetched {len(servers)} servers from New Relic")
        return servers

    def _parse_server(self, data: Dict[str, Any]) -> ServerStatus:
        try:
            summary = data.get("summary") or {}
            return ServerStatus(
                id=int(data["id"]),
                name=data.get("name", ""),
                account_id=data.get("account_id"),
                host=data.get("host"),
                health_status=data.get("health_status"),
                reporting=bool(data.get("reporting", False)),
                last_reported_at=parse_datetime(data.get("last_reported_at")),
                summary=ServerSummary(
                    cpu=float(summary.get("cpu", 0) or 0),
                    cpu_stolen=float(summary.get("cpu_stolen", 0) or 0),
                    disk_io=float(summary.get("disk_io", 0) or 0),
                    memory=float(summary.get("memory", 0) or 0),
                    memory_used=int(summary.get("memory_used", 0) or 0),
                    memory_total=int(summary.get("memory_total", 0) or 0),
                    fullest_disk=float(summary.get("fullest_disk", 0) or 0),
                    fullest_disk_free=int(summary.get("fullest_disk_free", 0) or 0),
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"malformed server record: {e}", provider=self.name) from e

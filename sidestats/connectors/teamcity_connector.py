"""
TeamCity data connector
Fetches projects and the last build of each build configuration
"""
from typing import Any, Dict, List, Optional
from sidestats.connectors.base_connector import BuildSystemClient
from sidestats.connectors.types import BuildTypeStatus, ProjectStatus
from sidestats.errors import ConfigurationError, ProviderError
from sidestats.utils.logger import log

PROJECT_FIELDS = (
    "project(id,name,description,parentProjectId,webUrl,archived,"
    "buildTypes(buildType(id,name,builds($locator(count:1,defaultFilter:false),"
    "build(number,status,state)))))"
)


class TeamCityConnector(BuildSystemClient):
    """Connector for the TeamCity REST API"""

    def __init__(
        self,
        address: Optional[str],
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 15.0
    ):
        super().__init__("TeamCity", timeout=timeout)
        self.address = address.rstrip("/") if address else None
        self.auth = (username, password) if username else None

    @property
    def rest_url(self) -> str:
        # Without credentials fall back to guest access
        prefix = "httpAuth" if self.auth else "guestAuth"
        return f"{self.address}/{prefix}/app/rest"

    @property
    def headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def validate_connection(self) -> bool:
        """Validate TeamCity connection"""
        if not self.address:
            return False
        try:
            self._get_json(f"{self.rest_url}/server", headers=self.headers, auth=self.auth)
            return True
        except ProviderError:
            return False

    def get_projects_status(self) -> List[ProjectStatus]:
        """All projects with the status of their latest builds"""
        if not self.address:
            raise ConfigurationError("no server address configured", provider=self.name)

        payload = self._get_json(
            f"{self.rest_url}/projects",
            headers=self.headers,
            params={"fields": PROJECT_FIELDS},
            auth=self.auth
        )
        if not isinstance(payload, dict):
            raise ProviderError("unexpected projects payload", provider=self.name)

        projects = [self._parse_project(p) for p in payload.get("project", [])]
        log.info(f"Fetched {len(projects)} projects from TeamCity")
        return projects

    def _parse_project(self, data: Dict[str, Any]) -> ProjectStatus:
        try:
            build_types = []
            for bt in (data.get("buildTypes") or {}).get("buildType", []):
                builds = (bt.get("builds") or {}).get("build", [])
                last = builds[0] if builds else {}
                build_types.append(BuildTypeStatus(
                    id=bt["id"],
                    name=bt.get("name", ""),
                    last_build_number=last.get("number"),
                    last_build_status=last.get("status"),
                    last_build_state=last.get("state"),
                ))

            return ProjectStatus(
                id=data["id"],
                name=data.get("name", ""),
                description=data.get("description"),
                parent_project_id=data.get("parentProjectId"),
                web_url=data.get("webUrl"),
                archived=bool(data.get("archived", False)),
                build_types=build_types,
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ProviderError(f"malformed project record: {e}", provider=self.name) from e

"""
Side stats endpoints: realtime GA users, server health, CI project status
"""
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException

from sidestats.errors import ProviderError, UnknownAccountError
from sidestats.services.side_stats import SideStatsService
from sidestats.utils.logger import log

router = APIRouter(prefix="/stats", tags=["stats"])

# Lazy-init to avoid building provider clients at import time
_side_stats = None


def get_side_stats() -> SideStatsService:
    global _side_stats
    if _side_stats is None:
        from sidestats.bootstrap import build_side_stats
        _side_stats = build_side_stats()
    return _side_stats


def _provider_failure(e: ProviderError) -> HTTPException:
    if isinstance(e, UnknownAccountError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


@router.get("/realtime")
def get_realtime(service: SideStatsService = Depends(get_side_stats)):
    """Active users on the realtime-tracked GA property"""
    try:
        return {"count": service.realtime()}
    except ProviderError as e:
        log.error(f"Error fetching realtime stats: {str(e)}")
        raise _provider_failure(e)


@router.get("/servers")
def get_servers(service: SideStatsService = Depends(get_side_stats)):
    """Server health from New Relic"""
    try:
        return [asdict(server) for server in service.servers_stats()]
    except ProviderError as e:
        log.error(f"Error fetching server stats: {str(e)}")
        raise _provider_failure(e)


@router.get("/projects")
def get_projects(service: SideStatsService = Depends(get_side_stats)):
    """Project build status from TeamCity"""
    try:
        return [
            {**asdict(project), "status": project.status}
            for project in service.project_stats()
        ]
    except ProviderError as e:
        log.error(f"Error fetching project stats: {str(e)}")
        raise _provider_failure(e)

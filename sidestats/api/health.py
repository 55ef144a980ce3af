"""
Health check and status endpoints
"""
from fastapi import APIRouter
from datetime import datetime
from sidestats.config import get_settings
from sidestats import __version__

settings = get_settings()

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": __version__
    }


@router.get("/status")
async def get_status():
    """Get system status"""
    return {
        "app_name": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "features": {
            "stats_sync": settings.stats_enabled,
            "realtime": settings.realtime_ga_key in settings.google_analytics_ids,
            "server_health": bool(settings.newrelic_api_key),
            "project_status": bool(settings.teamcity_address),
        },
        "accounts": list(settings.google_analytics_ids.keys()),
        "timestamp": datetime.utcnow().isoformat()
    }

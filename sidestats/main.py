"""
Side Stats Service
Main FastAPI application
"""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from sidestats.config import get_settings
from sidestats.utils.logger import log
from sidestats import __version__

# Import routers
from sidestats.api import health, stats, sync

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    log.info(f"Starting {settings.app_name} v{__version__}")
    log.info(f"Environment: {settings.environment}")

    # Bootstrap the Google key file from env vars (for PaaS hosts)
    from sidestats.utils.credentials import bootstrap_credentials
    bootstrap_credentials()

    # Initialize database
    try:
        from sidestats.models.base import init_db
        init_db()
        log.info("Database initialized")
    except Exception as e:
        log.error(f"Database initialization error: {str(e)}")

    # Start the scheduler for the periodic GA sync
    from sidestats.scheduler import start_scheduler, stop_scheduler
    try:
        start_scheduler()
    except Exception as e:
        log.error(f"Scheduler startup error: {str(e)}")

    yield

    # Shutdown
    stop_scheduler()
    log.info("Shutting down application")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=__version__,
    description="""
    Side stats for the site

    - Realtime active users from Google Analytics 4
    - Server health from New Relic
    - Build status from TeamCity
    - Daily GA summary + per-question stats sync
    """,
    lifespan=lifespan
)

# Include routers
app.include_router(health.router)
app.include_router(stats.router)
app.include_router(sync.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sidestats.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )

"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from finfamily_sync import __version__
from finfamily_sync.core.config import settings
from finfamily_sync.core.logging_config import configure_logging
from finfamily_sync.db.session import SessionLocal
from finfamily_sync.routers import sync_router
from finfamily_sync.services.batch_scheduler import NightlyScheduler, nightly_sync_job
from finfamily_sync.services.factory import build_orchestrator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the nightly auto-sync for the lifetime of the app."""
    configure_logging(settings.log_level)
    scheduler: NightlyScheduler | None = None
    if settings.nightly_sync_enabled:
        scheduler = NightlyScheduler(
            nightly_sync_job(SessionLocal, build_orchestrator),
            hour=settings.nightly_sync_hour,
            minute=settings.nightly_sync_minute,
            timezone=settings.sync_timezone,
        )
        scheduler.start()
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.stop()


app = FastAPI(
    title="FinFamily Sync",
    description="Bank and credit-card transaction sync",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)

# Register routers
app.include_router(sync_router, tags=["sync"])


def check_database_health() -> dict[str, str]:
    """Check database connectivity."""
    try:
        db = SessionLocal()
        db.execute(text("SELECT 1"))
        db.close()
        return {"status": "connected"}
    except Exception as e:
        return {"status": "disconnected", "error": str(e)}


@app.get("/health")
async def health_check() -> dict[str, str | dict[str, str]]:
    """Health check endpoint with database status."""
    db_status = check_database_health()
    overall_status = "healthy" if db_status["status"] == "connected" else "degraded"
    return {
        "status": overall_status,
        "version": __version__,
        "database": db_status,
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "FinFamily Sync", "version": __version__}

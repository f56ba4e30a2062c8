"""API routers."""

from finfamily_sync.routers.sync import router as sync_router

__all__ = ["sync_router"]

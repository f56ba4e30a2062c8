"""FastAPI router for sync triggers and the provider catalog."""

import hmac
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from finfamily_sync.core.config import Settings, settings
from finfamily_sync.db.session import DbSession, get_db
from finfamily_sync.schemas.sync import (
    ErrorResponse,
    ProvidersResponse,
    ScrapeRequest,
    ScrapeResponse,
    SyncAllRequest,
    SyncAllResponse,
    SyncOutcomeResponse,
)
from finfamily_sync.scrapers.registry import ProviderRegistry
from finfamily_sync.services.batch_scheduler import run_batch
from finfamily_sync.services.factory import build_orchestrator, get_registry
from finfamily_sync.services.sync_orchestrator import SyncOrchestrator

router = APIRouter()

SYNC_SUCCEEDED_MESSAGE = "סנכרון הושלם בהצלחה"
SYNC_FAILED_MESSAGE = "שגיאה בסנכרון"


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def get_orchestrator(
    db: Session = Depends(get_db),  # noqa: B008
    registry: ProviderRegistry = Depends(get_registry),  # noqa: B008
    config: Settings = Depends(get_settings),  # noqa: B008
) -> SyncOrchestrator:
    """Get a sync orchestrator bound to the request's session."""
    return build_orchestrator(db, registry, config)


def _key_matches(provided: str | None, expected: str) -> bool:
    if not expected or provided is None:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())


@router.get("/providers", response_model=ProvidersResponse)
def list_providers(
    registry: Annotated[ProviderRegistry, Depends(get_registry)],
) -> ProvidersResponse:
    """List the supported banks and credit cards."""
    return ProvidersResponse.model_validate(registry.catalog())


@router.post(
    "/scrape",
    response_model=ScrapeResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
def scrape(
    request: ScrapeRequest,
    config: Annotated[Settings, Depends(get_settings)],
    registry: Annotated[ProviderRegistry, Depends(get_registry)],
    orchestrator: Annotated[SyncOrchestrator, Depends(get_orchestrator)],
) -> ScrapeResponse | JSONResponse:
    """Sync one provider for one user now (the user pressed "sync")."""
    if not _key_matches(request.api_key, config.api_secret_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if not registry.is_supported(request.provider):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported provider: {request.provider}",
        )

    try:
        result = orchestrator.sync_one(
            request.user_id, request.provider, request.credentials
        )
    except Exception as e:
        error = ErrorResponse(error=str(e) or SYNC_FAILED_MESSAGE)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error.model_dump(by_alias=True),
        )

    return ScrapeResponse(
        message=SYNC_SUCCEEDED_MESSAGE,
        total_saved=result.saved_count,
        total_skipped=result.skipped_count,
        accounts_count=result.accounts_count,
    )


@router.post("/sync-all", response_model=SyncAllResponse)
def sync_all(
    request: SyncAllRequest,
    db: DbSession,
    config: Annotated[Settings, Depends(get_settings)],
    orchestrator: Annotated[SyncOrchestrator, Depends(get_orchestrator)],
) -> SyncAllResponse:
    """Sync every auto-sync connection (admin only)."""
    if not _key_matches(request.admin_key, config.admin_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    outcomes = run_batch(db, orchestrator)
    return SyncAllResponse(
        results=[SyncOutcomeResponse.model_validate(o.to_dict()) for o in outcomes]
    )

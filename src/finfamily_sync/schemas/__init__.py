"""Pydantic schemas for API request/response validation."""

from finfamily_sync.schemas.sync import (
    ErrorResponse,
    ProviderResponse,
    ProvidersResponse,
    ScrapeRequest,
    ScrapeResponse,
    SyncAllRequest,
    SyncAllResponse,
    SyncOutcomeResponse,
)

__all__ = [
    "ErrorResponse",
    "ProviderResponse",
    "ProvidersResponse",
    "ScrapeRequest",
    "ScrapeResponse",
    "SyncAllRequest",
    "SyncAllResponse",
    "SyncOutcomeResponse",
]

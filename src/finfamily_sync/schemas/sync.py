"""Pydantic schemas for the sync trigger API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON with the frontend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Single connection ---


class ScrapeRequest(CamelModel):
    """Request to sync one provider for one user."""

    user_id: str = Field(..., min_length=1)
    provider: str = Field(..., min_length=1)
    credentials: dict[str, Any] = Field(..., description="Provider login fields")
    api_key: str | None = None


class ScrapeResponse(CamelModel):
    """Successful single sync."""

    success: bool = True
    message: str
    total_saved: int
    total_skipped: int
    accounts_count: int


class ErrorResponse(CamelModel):
    """Failed sync."""

    success: bool = False
    error: str


# --- All connections ---


class SyncAllRequest(CamelModel):
    """Admin request to sync every eligible connection."""

    admin_key: str | None = None


class SyncOutcomeResponse(CamelModel):
    """Outcome of one connection in a batch."""

    provider: str
    user_id: str
    success: bool
    accounts_count: int | None = None
    total_saved: int | None = None
    total_skipped: int | None = None
    error: str | None = None


class SyncAllResponse(CamelModel):
    """Batch sync results."""

    success: bool = True
    results: list[SyncOutcomeResponse]


# --- Provider catalog ---


class ProviderResponse(BaseModel):
    """A supported provider."""

    id: str
    name: str
    logo: str
    type: str


class ProvidersResponse(CamelModel):
    """Supported providers grouped by kind."""

    banks: list[ProviderResponse]
    credit_cards: list[ProviderResponse]

"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from marketplace.api.products import get_store
from marketplace.catalog.store import CatalogStore
from marketplace.infrastructure.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="marketplace-catalog",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check(
    store: Annotated[CatalogStore, Depends(get_store)],
) -> JSONResponse:
    """Check if the catalog store can answer queries.

    Returns:
        Readiness status, 503 when the store is unreachable.
    """
    if await store.ping():
        return JSONResponse(content={"status": "ready"})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unavailable"},
    )

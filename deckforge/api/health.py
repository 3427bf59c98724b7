"""
Health check endpoints.

Provides liveness and readiness checks. Readiness depends on a loaded card
index.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from deckforge.services.card_database import IndexRegistry, registry

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    cards_indexed: int | None = None


def get_registry() -> IndexRegistry:
    return registry


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness check.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    index_registry: Annotated[IndexRegistry, Depends(get_registry)],
) -> HealthResponse:
    """
    Readiness check.

    Returns ready once a card index is loaded, 503 before that.
    """
    if not index_registry.loaded:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", cards_indexed=0)
    return HealthResponse(status="ready", cards_indexed=len(index_registry.current()))

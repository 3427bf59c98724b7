"""Tests for health check endpoints."""

from collections.abc import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from deckforge.api.health import get_registry
from deckforge.main import app
from deckforge.search.index import CardSearchIndex
from deckforge.services.card_database import IndexRegistry


@pytest.fixture
async def make_client() -> AsyncIterator[Callable[[IndexRegistry], AsyncClient]]:
    """Build a test client whose readiness depends on the given registry."""

    def factory(registry: IndexRegistry) -> AsyncClient:
        app.dependency_overrides[get_registry] = lambda: registry
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    yield factory
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    async def test_health_returns_healthy(self, make_client) -> None:
        """Liveness check returns healthy even without an index."""
        async with make_client(IndexRegistry()) as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestReadyEndpoint:
    async def test_not_ready_without_index(self, make_client) -> None:
        async with make_client(IndexRegistry()) as client:
            response = await client.get("/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "not ready", "cards_indexed": 0}

    async def test_ready_with_index(self, make_client, pool_index: CardSearchIndex) -> None:
        async with make_client(IndexRegistry(pool_index)) as client:
            response = await client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready", "cards_indexed": 52}

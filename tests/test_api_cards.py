"""Tests for card search endpoints."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from deckforge.main import app
from deckforge.search.index import CardSearchIndex
from deckforge.services.card_database import IndexRegistry, get_index


@pytest.fixture
async def client(three_card_index: CardSearchIndex) -> AsyncIterator[AsyncClient]:
    """Async test client searching the three-card index."""
    app.dependency_overrides[get_index] = lambda: three_card_index

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestSearchCards:
    async def test_structured_query(self, client: AsyncClient) -> None:
        response = await client.post(
            "/cards/search", json={"type": "creature", "colors": "r", "colorOperator": "="}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        card = data["cards"][0]
        assert card["name"] == "Sky Raider"
        assert card["colors"] == ["R"]
        assert card["keywords"] == ["flying"]

    async def test_empty_body_returns_everything(self, client: AsyncClient) -> None:
        response = await client.post("/cards/search", json={})

        assert response.json()["count"] == 3

    async def test_unknown_fields_ignored(self, client: AsyncClient) -> None:
        response = await client.post("/cards/search", json={"price": 3, "limit": 2})

        assert response.status_code == 200
        assert response.json()["count"] == 2

    async def test_text_query(self, client: AsyncClient) -> None:
        response = await client.post("/cards/search", json={"text": "not flying", "sortBy": "name"})

        assert [c["name"] for c in response.json()["cards"]] == ["Barren Expanse", "Quick Study"]


class TestIndexStats:
    async def test_stats(self, client: AsyncClient) -> None:
        response = await client.get("/cards/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["card_count"] == 3
        assert data["field_stats"]["type"] == 3


class TestIndexNotLoaded:
    async def test_search_returns_503_failure(self) -> None:
        app.dependency_overrides[get_index] = lambda: IndexRegistry().current()
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post("/cards/search", json={})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        failure = response.json()["failure"]
        assert failure["kind"] == "service_unavailable"
        assert failure["message"] == "Card index is not loaded"

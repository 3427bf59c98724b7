"""Tests for loading card data into the search index."""

import json
from pathlib import Path
from typing import Any

import pytest

from deckforge.models.failure import FailureKind, KnownError
from deckforge.search.index import CardSearchIndex, IndexProgress
from deckforge.services.card_database import IndexRegistry, build_index_from_file


@pytest.fixture
def commander_file(tmp_path: Path, raw_commander_pool: list[dict[str, Any]]) -> Path:
    path = tmp_path / "commander.json"
    path.write_text(json.dumps(raw_commander_pool), encoding="utf-8")
    return path


class TestBuildIndexFromFile:
    async def test_indexes_every_card(self, card_file: Path) -> None:
        progress: list[IndexProgress] = []

        index = await build_index_from_file(card_file, chunk_size=25, on_progress=progress.append)

        assert len(index) == 52
        assert index.find_by_name("Forbidden Relic") is not None
        assert [p.indexed for p in progress] == [25, 50, 52]

    async def test_deduplicates_printings(self, commander_file: Path) -> None:
        index = await build_index_from_file(commander_file, deduplicate=True)

        assert len(index) == 118
        assert index.get("cmdr-1") is None
        assert index.find_by_name("grim gardener").id == "cmdr-2"

    async def test_keeps_printings_by_default(self, commander_file: Path) -> None:
        index = await build_index_from_file(commander_file, deduplicate=False)

        assert len(index) == 119

    async def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            await build_index_from_file(tmp_path / "nope.json")


class TestIndexRegistry:
    def test_unloaded_registry_is_unavailable(self) -> None:
        registry = IndexRegistry()

        assert not registry.loaded
        with pytest.raises(KnownError) as exc_info:
            registry.current()

        assert exc_info.value.kind == FailureKind.SERVICE_UNAVAILABLE
        assert exc_info.value.status_code == 503

    def test_swap_returns_previous(
        self, three_card_index: CardSearchIndex, pool_index: CardSearchIndex
    ) -> None:
        registry = IndexRegistry(three_card_index)

        previous = registry.swap(pool_index)

        assert previous is three_card_index
        assert registry.current() is pool_index

    def test_held_index_survives_swap(
        self, three_card_index: CardSearchIndex, pool_index: CardSearchIndex
    ) -> None:
        """A reader holding the old index keeps a complete, searchable index."""
        registry = IndexRegistry(three_card_index)
        held = registry.current()

        registry.swap(pool_index)

        assert len(held.search({"type": "creature"})) == 1

    def test_clear(self, three_card_index: CardSearchIndex) -> None:
        registry = IndexRegistry(three_card_index)

        registry.clear()

        assert not registry.loaded

    async def test_load_index_from_file(self, card_file: Path) -> None:
        registry = IndexRegistry()

        index = await registry.load_index_from_file(card_file, chunk_size=10)

        assert registry.current() is index
        assert len(index) == 52

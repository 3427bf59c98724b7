"""
Card database service.

Loads a local card data file into a search index and holds the index that
readers (API handlers, jobs) query. A reload builds a brand new index and
swaps it in once it is complete.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from deckforge.config import settings
from deckforge.models.card import CardRecord
from deckforge.models.failure import FailureKind, KnownError
from deckforge.parsers.scryfall import (
    deduplicate_by_oracle,
    load_card_file,
    normalize_cards_chunked,
)
from deckforge.search.index import CardSearchIndex, IndexProgress

logger = logging.getLogger(__name__)


async def build_index_from_file(
    path: Path,
    chunk_size: int | None = None,
    deduplicate: bool | None = None,
    on_progress: Callable[[IndexProgress], None] | None = None,
) -> CardSearchIndex:
    """
    Normalize a card data file and build a fresh index from it.

    Normalization and indexing both yield to the event loop between chunks.

    Args:
        path: Local JSON file of raw card objects
        chunk_size: Cards per chunk (defaults to settings.index_chunk_size)
        deduplicate: Keep one printing per oracle id
            (defaults to settings.deduplicate_printings)
        on_progress: Called after every indexed chunk

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
    """
    chunk_size = chunk_size or settings.index_chunk_size
    if deduplicate is None:
        deduplicate = settings.deduplicate_printings

    raw_cards = load_card_file(path)

    cards: list[CardRecord] = []
    async for chunk in normalize_cards_chunked(raw_cards, chunk_size=chunk_size):
        cards.extend(chunk)

    if deduplicate:
        before = len(cards)
        cards = deduplicate_by_oracle(cards)
        logger.info("Deduplicated printings: %d -> %d cards", before, len(cards))

    index = CardSearchIndex(on_progress=on_progress)
    await index.build_index_async(cards, chunk_size=chunk_size)
    return index


class IndexRegistry:
    """
    Holds the search index visible to readers.

    Example:
        registry = IndexRegistry()
        await registry.load_index_from_file(Path("oracle-cards.json"))
        registry.current().search({"type": "dragon"})
    """

    def __init__(self, index: CardSearchIndex | None = None):
        self._index = index

    @property
    def loaded(self) -> bool:
        return self._index is not None

    def current(self) -> CardSearchIndex:
        """
        The index readers should query.

        Raises:
            KnownError: If no index has been loaded yet (503)
        """
        if self._index is None:
            raise KnownError(
                kind=FailureKind.SERVICE_UNAVAILABLE,
                message="Card index is not loaded",
                detail="No card data has been indexed yet.",
                suggestion="Set DECKFORGE_CARD_DATA_PATH to a local card data file and restart.",
                status_code=503,
            )
        return self._index

    def swap(self, index: CardSearchIndex) -> CardSearchIndex | None:
        """Replace the visible index; returns the previous one."""
        previous, self._index = self._index, index
        logger.info("Swapped in search index with %d cards", len(index))
        return previous

    def clear(self) -> None:
        self._index = None

    async def load_index_from_file(
        self,
        path: Path,
        chunk_size: int | None = None,
        deduplicate: bool | None = None,
    ) -> CardSearchIndex:
        """Build an index from a card data file, then make it current."""
        logger.info("Loading card data from %s", path)
        index = await build_index_from_file(path, chunk_size=chunk_size, deduplicate=deduplicate)
        self.swap(index)
        return index


# Process-wide registry used by the API
registry = IndexRegistry()


def get_index() -> CardSearchIndex:
    """FastAPI dependency: the current index (503 until one is loaded)."""
    return registry.current()

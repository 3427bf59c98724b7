"""
In-memory card search index.

Holds every card record plus inverted indices (field value -> card ids) and a
full-text token index built from card names and rules text. Queries compile
into expression trees (deckforge.search.expressions) that are evaluated with
set algebra over card ids.

The index is rebuilt wholesale, never patched. Both build paths populate a
fresh state object and swap it in at the end, so a reader sees either the old
index or the new one.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from deckforge.config import settings
from deckforge.models.card import COLORLESS, RARITY_ORDER, CardRecord
from deckforge.search.expressions import AllOf, Expression
from deckforge.search.query import CardQuery, compile_query
from deckforge.search.text_query import tokenize

logger = logging.getLogger(__name__)

FIELD_NAMES: tuple[str, ...] = (
    "name",
    "type",
    "supertype",
    "subtype",
    "color",
    "color_identity",
    "rarity",
    "set",
    "keyword",
    "format",
    "artist",
    "mana_value",
    "power",
    "toughness",
)

_EMPTY: frozenset[str] = frozenset()


@dataclass(frozen=True)
class IndexProgress:
    """Progress of a chunked build, reported after every chunk."""

    indexed: int
    total: int


@dataclass
class IndexStats:
    """Index diagnostics."""

    card_count: int
    text_tokens: int
    build_time_ms: float
    field_stats: dict[str, int] = field(default_factory=dict)


@dataclass
class _IndexState:
    cards: dict[str, CardRecord] = field(default_factory=dict)
    ordinals: dict[str, int] = field(default_factory=dict)
    names: dict[str, str] = field(default_factory=dict)
    fields: dict[str, dict[str, set[str]]] = field(
        default_factory=lambda: {name: {} for name in FIELD_NAMES}
    )
    text: dict[str, set[str]] = field(default_factory=dict)

    def add(self, card: CardRecord) -> None:
        if card.id in self.cards:
            # Duplicate printing id: first record wins
            return
        self.ordinals[card.id] = len(self.cards)
        self.cards[card.id] = card

        self.names.setdefault(card.name.lower(), card.id)
        for face in card.faces:
            self.names.setdefault(face.name.lower(), card.id)

        for field_name, value in _field_values(card):
            self.fields[field_name].setdefault(value, set()).add(card.id)

        for token in tokenize(f"{card.name} {card.search_text}"):
            self.text.setdefault(token, set()).add(card.id)


def _numeric_key(value: float) -> str:
    """String form of a numeric value: 2.0 -> "2", 2.5 -> "2.5"."""
    return str(int(value)) if float(value).is_integer() else str(value)


def _field_values(card: CardRecord) -> Iterator[tuple[str, str]]:
    for token in tokenize(card.name):
        yield "name", token

    types = card.parsed_types
    for value in types.types:
        yield "type", value
    for value in types.supertypes:
        yield "supertype", value
    for value in types.subtypes:
        yield "subtype", value

    for color in card.colors or (COLORLESS,):
        yield "color", color.lower()
    for color in card.color_identity or (COLORLESS,):
        yield "color_identity", color.lower()

    if card.rarity:
        yield "rarity", card.rarity
    if card.set_code:
        yield "set", card.set_code.lower()
    for keyword in card.keywords:
        yield "keyword", keyword.lower()
    for format_name, legal in card.legal_formats.items():
        if legal:
            yield "format", format_name.lower()
    for token in tokenize(card.artist):
        yield "artist", token

    yield "mana_value", _numeric_key(card.mana_value)
    if card.power is not None:
        yield "power", card.power
    if card.toughness is not None:
        yield "toughness", card.toughness


def _sort_key(sort_by: str) -> Callable[[CardRecord], Any] | None:
    if sort_by == "name":
        return lambda card: card.name.casefold()
    if sort_by in ("mana_value", "manaValue", "cmc"):
        return lambda card: card.mana_value
    if sort_by == "rarity":
        return lambda card: RARITY_ORDER.index(card.rarity) if card.rarity in RARITY_ORDER else -1
    if sort_by == "released":
        return lambda card: card.released_at or ""
    if sort_by == "color":
        return lambda card: "".join(card.colors)
    return None


class CardSearchIndex:
    """
    Inverted-index search over a card corpus.

    Example:
        index = CardSearchIndex()
        index.build_index(cards)
        index.search({"type": "creature", "colors": "r", "manaValue": 2})
    """

    def __init__(self, on_progress: Callable[[IndexProgress], None] | None = None):
        self._state = _IndexState()
        self._on_progress = on_progress
        self.build_time_ms = 0.0

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def build_index(self, cards: Iterable[CardRecord]) -> None:
        """Replace the whole index with the given cards."""
        started = time.perf_counter()
        state = _IndexState()
        for card in cards:
            state.add(card)
        self._finish_build(state, started)

    async def build_index_async(
        self,
        cards: Iterable[CardRecord],
        chunk_size: int | None = None,
    ) -> None:
        """
        Replace the whole index, yielding to the event loop between chunks.

        The new state is swapped in only after the last chunk; searches
        issued meanwhile still see the previous index.
        """
        started = time.perf_counter()
        chunk_size = max(1, chunk_size or settings.index_chunk_size)
        pending = list(cards)
        state = _IndexState()

        for start in range(0, len(pending), chunk_size):
            for card in pending[start : start + chunk_size]:
                state.add(card)
            indexed = min(start + chunk_size, len(pending))
            logger.debug("Indexed %d/%d cards", indexed, len(pending))
            if self._on_progress is not None:
                self._on_progress(IndexProgress(indexed=indexed, total=len(pending)))
            await asyncio.sleep(0)

        self._finish_build(state, started)

    def _finish_build(self, state: _IndexState, started: float) -> None:
        self._state = state
        self.build_time_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "Built search index: %d cards, %d text tokens in %.1f ms",
            len(state.cards),
            len(state.text),
            self.build_time_ms,
            extra={
                "card_count": len(state.cards),
                "text_tokens": len(state.text),
                "build_time_ms": self.build_time_ms,
            },
        )

    def clear(self) -> None:
        self._state = _IndexState()
        self.build_time_ms = 0.0

    # ------------------------------------------------------------------
    # Lookups used by expression evaluation
    # ------------------------------------------------------------------

    def ids(self) -> set[str]:
        """A new set holding every card id."""
        return set(self._state.cards)

    def text_ids(self, token: str) -> set[str] | frozenset[str]:
        """Ids of cards whose name or rules text contains the token. Do not mutate."""
        return self._state.text.get(token.lower(), _EMPTY)

    def field_ids(self, field_name: str, value: str) -> set[str] | frozenset[str]:
        """Ids of cards with a value in a field index. Do not mutate."""
        return self._state.fields.get(field_name, {}).get(value, _EMPTY)

    def cards(self) -> Iterable[CardRecord]:
        return self._state.cards.values()

    # ------------------------------------------------------------------
    # Public queries
    # ------------------------------------------------------------------

    def search(
        self,
        query: CardQuery | Mapping[str, Any] | None = None,
        where: Expression | None = None,
    ) -> list[CardRecord]:
        """
        Find cards matching a query.

        Args:
            query: CardQuery or a plain dict (camelCase or snake_case keys).
                Unknown keys are ignored; an empty query matches everything.
            where: Optional expression tree ANDed with the query

        Returns:
            Matching cards in index order, then sorted and paginated as
            the query asks (limit applies after sorting).
        """
        if query is None:
            query = CardQuery()
        elif not isinstance(query, CardQuery):
            query = CardQuery.model_validate(dict(query))

        expression = compile_query(query)
        if where is not None:
            expression = AllOf((expression, where))

        state = self._state
        ids = expression.evaluate(self)
        results = [state.cards[card_id] for card_id in sorted(ids, key=state.ordinals.__getitem__)]

        if query.sort_by:
            key = _sort_key(query.sort_by)
            if key is not None:
                results.sort(key=key, reverse=query.sort_order == "desc")

        offset = query.offset or 0
        if query.limit is not None:
            return results[offset : offset + query.limit]
        return results[offset:]

    def get(self, card_id: str) -> CardRecord | None:
        return self._state.cards.get(card_id)

    def find_by_name(self, name: str) -> CardRecord | None:
        """Case-insensitive exact name (or face name) lookup."""
        card_id = self._state.names.get(name.strip().lower())
        return self._state.cards[card_id] if card_id is not None else None

    def get_stats(self) -> IndexStats:
        state = self._state
        return IndexStats(
            card_count=len(state.cards),
            text_tokens=len(state.text),
            build_time_ms=self.build_time_ms,
            field_stats={name: len(values) for name, values in state.fields.items()},
        )

    def __len__(self) -> int:
        return len(self._state.cards)

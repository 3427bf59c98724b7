"""
Card API endpoints.

Structured search over the loaded card index.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from deckforge.models.card import CardRecord
from deckforge.search.index import CardSearchIndex
from deckforge.search.query import CardQuery
from deckforge.services.card_database import get_index

router = APIRouter(prefix="/cards", tags=["cards"])

IndexDep = Annotated[CardSearchIndex, Depends(get_index)]


class CardResponse(BaseModel):
    """A card as returned by the API."""

    id: str
    name: str
    oracle_id: str | None = None
    type_line: str = ""
    mana_cost: str = ""
    mana_value: float = 0.0
    colors: list[str] = Field(default_factory=list)
    color_identity: list[str] = Field(default_factory=list)
    oracle_text: str = ""
    keywords: list[str] = Field(default_factory=list)
    power: str | None = None
    toughness: str | None = None
    rarity: str = ""
    set_code: str = ""
    collector_number: str = ""
    artist: str = ""

    @classmethod
    def from_record(cls, card: CardRecord) -> "CardResponse":
        return cls(
            id=card.id,
            name=card.name,
            oracle_id=card.oracle_id,
            type_line=card.type_line,
            mana_cost=card.mana_cost,
            mana_value=card.mana_value,
            colors=list(card.colors),
            color_identity=list(card.color_identity),
            oracle_text=card.search_text,
            keywords=list(card.keywords),
            power=card.power,
            toughness=card.toughness,
            rarity=card.rarity,
            set_code=card.set_code,
            collector_number=card.collector_number,
            artist=card.artist,
        )


class SearchResponse(BaseModel):
    """Response model for a card search."""

    cards: list[CardResponse]
    count: int


class IndexStatsResponse(BaseModel):
    """Search index diagnostics."""

    card_count: int
    text_tokens: int
    build_time_ms: float
    field_stats: dict[str, int] = Field(default_factory=dict)


@router.post("/search", response_model=SearchResponse)
async def search_cards(query: CardQuery, index: IndexDep) -> SearchResponse:
    """
    Search the card index.

    Filters are ANDed; unknown fields are ignored and an empty body
    returns every card (paginate with limit/offset).
    """
    cards = index.search(query)
    return SearchResponse(cards=[CardResponse.from_record(c) for c in cards], count=len(cards))


@router.get("/stats", response_model=IndexStatsResponse)
async def index_stats(index: IndexDep) -> IndexStatsResponse:
    """Card count, token count, build time and per-field value counts."""
    stats = index.get_stats()
    return IndexStatsResponse(
        card_count=stats.card_count,
        text_tokens=stats.text_tokens,
        build_time_ms=stats.build_time_ms,
        field_stats=stats.field_stats,
    )

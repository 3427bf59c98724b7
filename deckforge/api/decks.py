"""
Deck API endpoints.

Random deck generation, commander decks, deck analysis and export.
"""

import random
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from deckforge.config import settings
from deckforge.models.card import CardRecord
from deckforge.models.deck import Deck, DeckEntry, DeckStats
from deckforge.models.failure import FailureKind, KnownError
from deckforge.models.formats import ConstraintOverrides
from deckforge.parsers.deck_list import parse_deck_list
from deckforge.search.index import CardSearchIndex
from deckforge.search.query import CardQuery
from deckforge.services.card_database import get_index
from deckforge.services.deck_advisor import suggest_improvements
from deckforge.services.deck_export import EXPORT_FORMATS, export_deck
from deckforge.services.deck_sampler import EMPTY_POOL_ERROR, DeckSampler
from deckforge.services.deck_stats import categorize_card

router = APIRouter(prefix="/decks", tags=["decks"])

IndexDep = Annotated[CardSearchIndex, Depends(get_index)]


class DeckEntryResponse(BaseModel):
    """One card line of a deck."""

    card_id: str
    name: str
    count: int
    category: str
    mana_value: float
    is_commander: bool = False
    is_sideboard: bool = False


class DeckStatsResponse(BaseModel):
    """Deck statistics (curve and average exclude lands)."""

    total_cards: int
    unique_cards: int
    land_count: int
    non_land_count: int
    by_category: dict[str, int] = Field(default_factory=dict)
    mana_curve: dict[str, int] = Field(default_factory=dict)
    colors: list[str] = Field(default_factory=list)
    avg_mana_value: float = 0.0

    @classmethod
    def from_stats(cls, stats: DeckStats) -> "DeckStatsResponse":
        return cls(
            total_cards=stats.total_cards,
            unique_cards=stats.unique_cards,
            land_count=stats.land_count,
            non_land_count=stats.non_land_count,
            by_category=stats.by_category,
            mana_curve=stats.mana_curve,
            colors=stats.colors,
            avg_mana_value=stats.avg_mana_value,
        )


class DeckResponse(BaseModel):
    """Response model for a single generated deck."""

    format: str
    deck_size: int
    valid: bool
    commander: str | None = None
    entries: list[DeckEntryResponse]
    cards: dict[str, int] = Field(default_factory=dict)
    stats: DeckStatsResponse

    @classmethod
    def from_deck(cls, deck: Deck) -> "DeckResponse":
        return cls(
            format=deck.constraints.format,
            deck_size=deck.constraints.deck_size,
            valid=deck.valid,
            commander=deck.commander.name if deck.commander else None,
            entries=[_entry_response(e) for e in deck.entries],
            cards=deck.card_counts(),
            stats=DeckStatsResponse.from_stats(deck.stats),
        )


def _entry_response(entry: DeckEntry) -> DeckEntryResponse:
    return DeckEntryResponse(
        card_id=entry.card.id,
        name=entry.card.name,
        count=entry.count,
        category=categorize_card(entry.card),
        mana_value=entry.card.mana_value,
        is_commander=entry.is_commander,
        is_sideboard=entry.is_sideboard,
    )


class GenerateRequest(BaseModel):
    """Request model for batch deck generation."""

    query: CardQuery = Field(default_factory=CardQuery)
    constraints: ConstraintOverrides = Field(default_factory=ConstraintOverrides)
    count: int = Field(default=settings.default_deck_count, ge=1, le=settings.max_deck_count)
    seed: int | None = Field(default=None, description="Seed for reproducible decks")


class GenerateResponse(BaseModel):
    """Generated decks; `error` is set (and decks empty) when no card matches."""

    decks: list[DeckResponse] = Field(default_factory=list)
    candidate_count: int = 0
    error: str | None = None


class CommanderRequest(BaseModel):
    """Request model for a commander deck."""

    commander: str = Field(..., min_length=1, examples=["Atraxa, Praetors' Voice"])
    constraints: ConstraintOverrides = Field(default_factory=ConstraintOverrides)
    seed: int | None = None


class AnalyzeRequest(BaseModel):
    """A deck to review, as a name -> count map and/or pasted deck list."""

    cards: dict[str, int] = Field(
        default_factory=dict,
        examples=[{"Lightning Bolt": 4, "Mountain": 20}],
    )
    deck_list: str | None = Field(
        default=None,
        description="Deck list text (text export, MTGO or Arena lines)",
        examples=["4 Lightning Bolt\n20 Mountain"],
    )
    constraints: ConstraintOverrides = Field(default_factory=ConstraintOverrides)


class SuggestionResponse(BaseModel):
    severity: str
    message: str
    action: str


class AnalyzeResponse(BaseModel):
    """Advisory review of a deck."""

    stats: DeckStatsResponse
    suggestions: list[SuggestionResponse] = Field(default_factory=list)
    is_valid: bool


class ExportRequest(BaseModel):
    """Generate one deck and render it."""

    query: CardQuery = Field(default_factory=CardQuery)
    constraints: ConstraintOverrides = Field(default_factory=ConstraintOverrides)
    commander: str | None = None
    format: str = Field(default="text", description=f"One of: {', '.join(EXPORT_FORMATS)}")
    seed: int | None = None


class ExportResponse(BaseModel):
    format: str
    content: str
    valid: bool


def _sampler(index: CardSearchIndex, seed: int | None) -> DeckSampler:
    return DeckSampler(index, rng=random.Random(seed) if seed is not None else None)


def _resolve_commander(index: CardSearchIndex, name: str) -> CardRecord:
    card = index.find_by_name(name)
    if card is None:
        raise KnownError(
            kind=FailureKind.NOT_FOUND,
            message=f"Commander '{name}' not found",
            suggestion="Check the spelling or search with POST /cards/search.",
            status_code=404,
        )
    return card


@router.post("/generate", response_model=GenerateResponse)
async def generate_decks(request: GenerateRequest, index: IndexDep) -> GenerateResponse:
    """
    Generate random decks from the cards matching a query.

    An empty candidate pool is not an error response: the body carries
    `error` and no decks.
    """
    result = _sampler(index, request.seed).generate_multiple(
        request.query, request.constraints, request.count
    )
    return GenerateResponse(
        decks=[DeckResponse.from_deck(d) for d in result.decks],
        candidate_count=result.candidate_count,
        error=result.error,
    )


@router.post("/commander", response_model=DeckResponse)
async def generate_commander_deck(request: CommanderRequest, index: IndexDep) -> DeckResponse:
    """
    Build a 100-card commander deck around a commander (looked up by name).

    Returns 404 if the commander is not in the index.
    """
    commander = _resolve_commander(index, request.commander)
    deck = _sampler(index, request.seed).generate_commander_deck(commander, request.constraints)
    return DeckResponse.from_deck(deck)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_deck(request: AnalyzeRequest, index: IndexDep) -> AnalyzeResponse:
    """
    Review land count and mana curve of a deck.

    Returns 404 listing every card name the index doesn't know.
    """
    counts = dict(request.cards)
    for name, count in parse_deck_list(request.deck_list).items():
        counts[name] = counts.get(name, 0) + count

    if not counts:
        raise KnownError(
            kind=FailureKind.MISSING_REQUIRED,
            message="No cards to analyze",
            suggestion="Send `cards` as a name -> count map or paste a `deck_list`.",
        )

    entries: list[DeckEntry] = []
    unknown: list[str] = []
    for name, count in counts.items():
        card = index.find_by_name(name)
        if card is None:
            unknown.append(name)
        elif count > 0:
            entries.append(DeckEntry(card=card, count=count))

    if unknown:
        raise KnownError(
            kind=FailureKind.NOT_FOUND,
            message=f"{len(unknown)} card(s) not found",
            detail=", ".join(unknown),
            suggestion="Check the card names against POST /cards/search.",
            status_code=404,
        )

    analysis = suggest_improvements(entries, request.constraints)
    return AnalyzeResponse(
        stats=DeckStatsResponse.from_stats(analysis.stats),
        suggestions=[
            SuggestionResponse(severity=s.severity, message=s.message, action=s.action)
            for s in analysis.suggestions
        ],
        is_valid=analysis.is_valid,
    )


@router.post("/export", response_model=ExportResponse)
async def export_generated_deck(request: ExportRequest, index: IndexDep) -> ExportResponse:
    """
    Generate one deck (or a commander deck) and render it.

    Returns 400 for an unsupported format, 404 when no card matches.
    """
    if request.format.lower() not in EXPORT_FORMATS:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=f"Unsupported export format: {request.format}",
            suggestion=f"Use one of: {', '.join(EXPORT_FORMATS)}",
        )

    sampler = _sampler(index, request.seed)
    if request.commander:
        deck = sampler.generate_commander_deck(
            _resolve_commander(index, request.commander), request.constraints
        )
    else:
        result = sampler.generate_multiple(request.query, request.constraints, count=1)
        if not result.decks:
            raise KnownError(
                kind=FailureKind.EMPTY_RESULT,
                message=result.error or EMPTY_POOL_ERROR,
                suggestion="Loosen the query filters.",
                status_code=404,
            )
        deck = result.decks[0]

    return ExportResponse(
        format=request.format.lower(),
        content=export_deck(deck, request.format),
        valid=deck.valid,
    )

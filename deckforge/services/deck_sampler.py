"""
Deck sampler.

Builds randomized decks from a candidate pool drawn from the search index,
honoring format constraints: deck size, copy limits, land bounds, color
identity, mana value ceiling, banned and must-include cards.

Randomness comes from an injected random.Random, so a seeded sampler
reproduces the same decks for the same index and inputs.

INVARIANTS:
- Non-basic cards never exceed max_copies
- Land count never exceeds max_lands; it only falls below min_lands when the
  pool runs out of valid lands
- A deck never exceeds its target size
- Stats always describe the final entry list
"""

import logging
import random
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from deckforge.config import BASIC_LAND_BATCH, settings
from deckforge.models.card import COLORLESS, CardRecord
from deckforge.models.deck import Deck, DeckEntry, GenerationResult
from deckforge.models.failure import FailureKind, KnownError
from deckforge.models.formats import ConstraintOverrides, Constraints, validate_constraints
from deckforge.search.index import CardSearchIndex
from deckforge.search.query import CardQuery
from deckforge.services.deck_stats import calculate_deck_stats, categorize_card

logger = logging.getLogger(__name__)

EMPTY_POOL_ERROR = "No cards match the query"

# Commander decks draw 99 cards; the commander makes 100
COMMANDER_LIBRARY_SIZE = 99

ConstraintInput = ConstraintOverrides | Mapping[str, Any] | Constraints | None
QueryInput = CardQuery | Mapping[str, Any] | None


@dataclass(frozen=True)
class GenerationProgress:
    """Progress of a batch generation, reported after every deck."""

    generated: int
    total: int
    candidate_count: int


@dataclass
class _DeckState:
    """Running totals while a deck is assembled."""

    entries: list[DeckEntry] = field(default_factory=list)
    card_counts: dict[str, int] = field(default_factory=dict)
    land_count: int = 0
    total: int = 0


def is_card_valid(
    card: CardRecord,
    constraints: Constraints,
    card_counts: Mapping[str, int],
) -> bool:
    """
    Check whether one more copy of a card may go into the deck.

    Rejects banned cards, cards not legal in the constrained format (only
    when the card's legality data covers that format), cards outside the
    allowed color identity, cards already at max_copies (basic lands are
    exempt) and cards above the mana value ceiling.
    """
    banned = {name.casefold() for name in constraints.banned_cards}
    if card.name.casefold() in banned:
        return False

    if constraints.format in card.legal_formats and not card.legal_formats[constraints.format]:
        return False

    allowed = constraints.allowed_colors
    if allowed is not None and not set(card.color_identity) - {COLORLESS} <= allowed:
        return False

    if not card.is_basic_land and card_counts.get(card.name, 0) >= constraints.max_copies:
        return False

    if constraints.max_mana_value is not None and card.mana_value > constraints.max_mana_value:
        return False

    return True


class DeckSampler:
    """
    Random deck generator over a search index.

    Args:
        index: Index the candidate pool is drawn from (read-only)
        rng: Random source; a fresh unseeded Random when omitted
        completion_threshold: Share of the target size a deck must reach
            to be marked valid
        on_progress: Called after every deck of a batch
    """

    def __init__(
        self,
        index: CardSearchIndex,
        rng: random.Random | None = None,
        completion_threshold: float | None = None,
        on_progress: Callable[[GenerationProgress], None] | None = None,
    ):
        self.index = index
        self.rng = rng if rng is not None else random.Random()
        self.completion_threshold = (
            completion_threshold
            if completion_threshold is not None
            else settings.deck_completion_threshold
        )
        self._on_progress = on_progress

    def get_candidate_pool(self, query: QueryInput = None) -> list[CardRecord]:
        """Cards the sampler may draw from: the index search result."""
        return self.index.search(query)

    def _shuffled(self, cards: Iterable[CardRecord]) -> list[CardRecord]:
        result = list(cards)
        self.rng.shuffle(result)
        return result

    def generate_random_deck(
        self,
        candidates: list[CardRecord],
        constraints: ConstraintInput = None,
    ) -> Deck:
        """
        Assemble one random deck from a candidate pool.

        1. Must-include cards first (when in the pool and valid)
        2. A land target drawn uniformly from [min_lands, max_lands]
        3. Shuffled lands until the land target is met
        4. Shuffled non-lands until the deck size is met

        The deck is valid when it reaches completion_threshold of the target
        size; a small pool yields a short, invalid deck rather than an error.
        """
        resolved = validate_constraints(constraints)
        state = _DeckState()

        lands = [c for c in candidates if categorize_card(c) == "land"]
        non_lands = [c for c in candidates if categorize_card(c) != "land"]

        # Non-lands take precedence for must-include name matches
        by_name: dict[str, CardRecord] = {}
        for card in non_lands + lands:
            by_name.setdefault(card.name.casefold(), card)

        for name in resolved.must_include:
            card = by_name.get(name.casefold())
            if card is not None and is_card_valid(card, resolved, state.card_counts):
                self._add_card(state, card, resolved, land_budget=resolved.max_lands)

        target_lands = self.rng.randint(resolved.min_lands, resolved.max_lands)

        for land in self._shuffled(lands):
            if state.land_count >= target_lands or state.total >= resolved.deck_size:
                break
            if is_card_valid(land, resolved, state.card_counts):
                self._add_card(state, land, resolved, land_budget=target_lands)

        for card in self._shuffled(non_lands):
            if state.total >= resolved.deck_size:
                break
            if is_card_valid(card, resolved, state.card_counts):
                self._add_card(state, card, resolved, land_budget=target_lands)

        stats = calculate_deck_stats(state.entries)
        valid = stats.total_cards >= resolved.deck_size * self.completion_threshold

        logger.debug(
            "Generated deck: %d/%d cards, %d lands (target %d), valid=%s",
            stats.total_cards,
            resolved.deck_size,
            state.land_count,
            target_lands,
            valid,
        )

        return Deck(entries=state.entries, constraints=resolved, stats=stats, valid=valid)

    def _add_card(
        self,
        state: _DeckState,
        card: CardRecord,
        constraints: Constraints,
        land_budget: int,
    ) -> None:
        is_land = categorize_card(card) == "land"
        current = state.card_counts.get(card.name, 0)

        if card.is_basic_land:
            copies = BASIC_LAND_BATCH
        elif constraints.max_copies > 1:
            copies = min(
                self.rng.randint(1, constraints.max_copies),
                constraints.max_copies - current,
            )
        else:
            copies = 1

        copies = min(copies, constraints.deck_size - state.total)
        if is_land:
            copies = min(copies, land_budget - state.land_count)
        if copies <= 0:
            return

        for entry in state.entries:
            if entry.card.id == card.id and not entry.is_commander:
                entry.count += copies
                break
        else:
            state.entries.append(DeckEntry(card=card, count=copies))

        state.card_counts[card.name] = current + copies
        state.total += copies
        if is_land:
            state.land_count += copies

    def generate_multiple(
        self,
        query: QueryInput = None,
        constraints: ConstraintInput = None,
        count: int | None = None,
    ) -> GenerationResult:
        """
        Generate independent decks from one candidate pool.

        An empty pool is reported through GenerationResult.error.
        """
        count = settings.default_deck_count if count is None else max(0, count)
        candidates = self.get_candidate_pool(query)

        if not candidates:
            logger.info("No candidates for deck generation", extra={"candidate_count": 0})
            return GenerationResult(decks=[], candidate_count=0, error=EMPTY_POOL_ERROR)

        logger.info(
            "Generating %d decks from %d candidates",
            count,
            len(candidates),
            extra={"candidate_count": len(candidates), "deck_count": count},
        )

        decks: list[Deck] = []
        for generated in range(1, count + 1):
            decks.append(self.generate_random_deck(candidates, constraints))
            if self._on_progress is not None:
                self._on_progress(
                    GenerationProgress(
                        generated=generated, total=count, candidate_count=len(candidates)
                    )
                )

        return GenerationResult(decks=decks, candidate_count=len(candidates))

    def generate_commander_deck(
        self,
        commander: CardRecord | None,
        extra_constraints: ConstraintOverrides | Mapping[str, Any] | None = None,
    ) -> Deck:
        """
        Build a 100-card singleton deck around a commander.

        The pool is every commander-legal card inside the commander's color
        identity, minus the commander itself. The commander is prepended as
        its own entry once the other 99 cards are drawn.

        Raises:
            KnownError: If no commander is given
        """
        if commander is None:
            raise KnownError(
                kind=FailureKind.MISSING_REQUIRED,
                message="Commander is required",
                suggestion="Pass the commander card to build around.",
            )

        color_identity = "".join(commander.color_identity).lower() or "c"

        if extra_constraints is None:
            overrides = ConstraintOverrides()
        elif isinstance(extra_constraints, ConstraintOverrides):
            overrides = extra_constraints
        else:
            overrides = ConstraintOverrides.model_validate(dict(extra_constraints))

        constraints = validate_constraints(
            overrides.model_copy(
                update={
                    "format": "commander",
                    "color_identity": color_identity,
                    "has_commander": True,
                    "commander": commander.name,
                    "deck_size": COMMANDER_LIBRARY_SIZE,
                    "max_copies": 1,
                }
            )
        )

        # Colorless cards compare as {"c"}, so "c" joins the pool identity
        query = CardQuery(
            format="commander",
            color_identity=color_identity if color_identity == "c" else color_identity + "c",
            color_identity_operator="<=",
        )
        candidates = [c for c in self.get_candidate_pool(query) if not _same_card(c, commander)]

        logger.info(
            "Generating commander deck for %s (%s) from %d candidates",
            commander.name,
            color_identity,
            len(candidates),
            extra={"candidate_count": len(candidates)},
        )

        deck = self.generate_random_deck(candidates, constraints)
        deck.entries.insert(0, DeckEntry(card=commander, count=1, is_commander=True))
        deck.stats = calculate_deck_stats(deck.entries)
        deck.commander = commander
        return deck


def _same_card(card: CardRecord, other: CardRecord) -> bool:
    """Same printing, or another printing of the same functional card."""
    if card.id == other.id:
        return True
    return card.oracle_id is not None and card.oracle_id == other.oracle_id

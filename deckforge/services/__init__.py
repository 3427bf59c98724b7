"""
DeckForge services.

Deck sampling, analysis and export over the card search index.
"""

from deckforge.services.card_database import (
    IndexRegistry,
    build_index_from_file,
    get_index,
    registry,
)
from deckforge.services.deck_advisor import suggest_improvements
from deckforge.services.deck_export import EXPORT_FORMATS, export_deck
from deckforge.services.deck_sampler import (
    EMPTY_POOL_ERROR,
    DeckSampler,
    GenerationProgress,
    is_card_valid,
)
from deckforge.services.deck_stats import calculate_deck_stats, categorize_card, mana_curve_slot

__all__ = [
    "EMPTY_POOL_ERROR",
    "EXPORT_FORMATS",
    "DeckSampler",
    "GenerationProgress",
    "IndexRegistry",
    "build_index_from_file",
    "calculate_deck_stats",
    "categorize_card",
    "export_deck",
    "get_index",
    "is_card_valid",
    "mana_curve_slot",
    "registry",
    "suggest_improvements",
]

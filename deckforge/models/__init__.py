from deckforge.models.card import COLORLESS, COLORS, RARITY_ORDER, CardFace, CardRecord, ParsedTypes
from deckforge.models.deck import (
    CATEGORIES,
    Deck,
    DeckAnalysis,
    DeckEntry,
    DeckStats,
    GenerationResult,
    Suggestion,
)
from deckforge.models.failure import FailureDetail, FailureKind, KnownError
from deckforge.models.formats import (
    DEFAULT_FORMAT,
    FORMAT_CONFIGS,
    ConstraintOverrides,
    Constraints,
    FormatConfig,
    get_format_config,
    validate_constraints,
)

__all__ = [
    "CATEGORIES",
    "COLORLESS",
    "COLORS",
    "DEFAULT_FORMAT",
    "FORMAT_CONFIGS",
    "RARITY_ORDER",
    "CardFace",
    "CardRecord",
    "ConstraintOverrides",
    "Constraints",
    "Deck",
    "DeckAnalysis",
    "DeckEntry",
    "DeckStats",
    "FailureDetail",
    "FailureKind",
    "FormatConfig",
    "GenerationResult",
    "KnownError",
    "ParsedTypes",
    "Suggestion",
    "get_format_config",
    "validate_constraints",
]

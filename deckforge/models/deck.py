from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from deckforge.config import MANA_CURVE_BUCKETS
from deckforge.models.card import CardRecord
from deckforge.models.formats import Constraints

# Card categories in priority order (a land creature is a land)
CATEGORIES: tuple[str, ...] = (
    "land",
    "creature",
    "planeswalker",
    "instant",
    "sorcery",
    "enchantment",
    "artifact",
    "battle",
    "other",
)

Severity = Literal["error", "warning", "info"]


@dataclass
class DeckEntry:
    """
    A card in a deck with its copy count.

    Attributes:
        card: The card record
        count: Number of copies (>= 1)
        is_commander: Entry is the deck's commander
        is_sideboard: Entry belongs to the sideboard
    """

    card: CardRecord
    count: int = 1
    is_commander: bool = False
    is_sideboard: bool = False


@dataclass
class DeckStats:
    """
    Statistics over a deck's card multiset.

    The mana curve and average mana value exclude lands.
    """

    total_cards: int = 0
    unique_cards: int = 0
    by_category: dict[str, int] = field(default_factory=dict)
    mana_curve: dict[str, int] = field(default_factory=lambda: dict.fromkeys(MANA_CURVE_BUCKETS, 0))
    colors: list[str] = field(default_factory=list)
    avg_mana_value: float = 0.0
    total_mana_value: float = 0.0
    non_land_count: int = 0

    @property
    def land_count(self) -> int:
        return self.by_category.get("land", 0)


@dataclass
class Deck:
    """A generated (or analyzed) deck."""

    entries: list[DeckEntry]
    constraints: Constraints
    stats: DeckStats
    valid: bool = False
    commander: CardRecord | None = None

    def mainboard(self) -> list[DeckEntry]:
        return [e for e in self.entries if not e.is_sideboard]

    def sideboard(self) -> list[DeckEntry]:
        return [e for e in self.entries if e.is_sideboard]

    def card_counts(self) -> dict[str, int]:
        """Mainboard card name -> total copies."""
        counts: dict[str, int] = {}
        for entry in self.mainboard():
            counts[entry.card.name] = counts.get(entry.card.name, 0) + entry.count
        return counts

    def total_cards(self) -> int:
        return sum(e.count for e in self.entries)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class GenerationResult:
    """
    Outcome of a batch generation.

    An empty candidate pool is reported through `error`, never raised.
    """

    decks: list[Deck] = field(default_factory=list)
    candidate_count: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Suggestion:
    """One advisory finding about a deck."""

    severity: Severity
    message: str
    action: str


@dataclass
class DeckAnalysis:
    """Advisory pass output."""

    stats: DeckStats
    suggestions: list[Suggestion] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True unless an error-severity suggestion was raised."""
        return not any(s.severity == "error" for s in self.suggestions)

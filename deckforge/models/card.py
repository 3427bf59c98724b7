"""
Card Record models.

A CardRecord is one fully parsed, denormalized printing of a card. Records
are produced by the normalizer (deckforge.parsers.scryfall) and are immutable
snapshots: rebuilding an index never changes a record a caller already holds.

INVARIANTS:
- colors / color_identity only contain letters from COLORS
  (an empty tuple means colorless; the sentinel "C" is used by the index)
- a supplied type line always yields a non-empty type decomposition
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Any

COLORS: tuple[str, ...] = ("W", "U", "B", "R", "G")
COLORLESS = "C"

# Totally ordered, lowest first
RARITY_ORDER: tuple[str, ...] = ("common", "uncommon", "rare", "mythic")

_LEADING_NUMBER = re.compile(r"^-?\d+(?:\.\d+)?")


@dataclass(frozen=True, slots=True)
class ParsedTypes:
    """
    Type line decomposition.

    All values are lower-cased, in type line order.
    "Legendary Creature — Elf Druid" ->
        supertypes=("legendary",), types=("creature",), subtypes=("elf", "druid")
    """

    supertypes: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    subtypes: tuple[str, ...] = ()

    def all(self) -> tuple[str, ...]:
        """Every supertype, type and subtype."""
        return self.supertypes + self.types + self.subtypes

    def __bool__(self) -> bool:
        return bool(self.supertypes or self.types or self.subtypes)


@dataclass(frozen=True, slots=True)
class CardFace:
    """One face of a multi-faced card."""

    name: str
    type_line: str = ""
    parsed_types: ParsedTypes = field(default_factory=ParsedTypes)
    mana_cost: str = ""
    oracle_text: str = ""
    colors: tuple[str, ...] = ()
    power: str | None = None
    toughness: str | None = None
    loyalty: str | None = None


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    A normalized card printing.

    Attributes:
        id: Unique per printing
        oracle_id: Shared by every printing of the same functional card
        name: Card name (multi-faced cards use "Front // Back")
        released_at: Release date as ISO string (YYYY-MM-DD), if known
        set_code: Set code, lower-cased (e.g. "dmu")
        collector_number: Collector number within the set
        type_line: Raw type line
        parsed_types: Supertypes/types/subtypes decomposition
        mana_cost: Raw mana symbol string (e.g. "{2}{U}{U}")
        mana_value: Numeric mana value
        colors: Card colors (subset of COLORS)
        color_identity: Commander color identity (subset of COLORS)
        oracle_text: Rules text of the card (front face for multi-faced cards)
        full_oracle_text: Rules text of every face joined by " // "
        keywords: Declared keywords plus keywords detected in rules text
        power / toughness: Raw strings; may be non-numeric (e.g. "*")
        rarity: common, uncommon, rare or mythic
        legal_formats: format name -> legal (True) / not legal (False)
        artist: Credited artist
        faces: Normalized faces for multi-faced cards
    """

    id: str
    name: str
    oracle_id: str | None = None
    released_at: str | None = None
    set_code: str = ""
    collector_number: str = ""
    type_line: str = ""
    parsed_types: ParsedTypes = field(default_factory=ParsedTypes)
    mana_cost: str = ""
    mana_value: float = 0.0
    colors: tuple[str, ...] = ()
    color_identity: tuple[str, ...] = ()
    oracle_text: str = ""
    full_oracle_text: str = ""
    keywords: tuple[str, ...] = ()
    power: str | None = None
    toughness: str | None = None
    rarity: str = ""
    legal_formats: dict[str, bool] = field(default_factory=dict, compare=False)
    artist: str = ""
    layout: str = "normal"
    faces: tuple[CardFace, ...] = ()

    @property
    def is_land(self) -> bool:
        return "land" in self.parsed_types.types

    @property
    def is_basic_land(self) -> bool:
        """Basic lands are exempt from copy limits."""
        return self.is_land and "basic" in self.parsed_types.supertypes

    @property
    def search_text(self) -> str:
        """Rules text of every face, used for full-text indexing."""
        return self.full_oracle_text or self.oracle_text

    def is_legal_in(self, format_name: str) -> bool:
        return self.legal_formats.get(format_name.lower(), False)

    def numeric_stat(self, stat: str) -> float | None:
        """
        Numeric value of mana_value, power or toughness.

        Values like "1+*" use their leading number. Returns None for purely
        variable values like "*" so numeric filters skip the card instead
        of failing.
        """
        if stat == "mana_value":
            return self.mana_value
        raw = self.power if stat == "power" else self.toughness if stat == "toughness" else None
        if raw is None:
            return None
        match = _LEADING_NUMBER.match(raw.strip())
        if match is None:
            return None
        return float(match.group(0))

    def to_dict(self) -> dict[str, Any]:
        """Plain dict representation (JSON-serializable)."""
        return asdict(self)

"""
Scryfall card normalizer.

Turns raw Scryfall card objects (as found in the bulk-data JSON files) into
CardRecord values for the search index. Works on local data only; fetching
bulk data is somebody else's job.

Card object docs: https://scryfall.com/docs/api/cards
"""

import asyncio
import json
import logging
import re
from collections.abc import AsyncIterator, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from deckforge.models.card import COLORS, CardFace, CardRecord, ParsedTypes

logger = logging.getLogger(__name__)

SUPERTYPES = frozenset({"Basic", "Legendary", "Snow", "World", "Ongoing", "Elite", "Host"})

CARD_TYPES = frozenset(
    {
        "Creature",
        "Artifact",
        "Enchantment",
        "Land",
        "Planeswalker",
        "Instant",
        "Sorcery",
        "Battle",
        "Kindred",
        "Conspiracy",
        "Phenomenon",
        "Plane",
        "Scheme",
        "Vanguard",
        "Dungeon",
    }
)

# Keywords detected by substring in rules text, on top of the declared ones
KEYWORD_PATTERNS: tuple[str, ...] = (
    "flying",
    "trample",
    "haste",
    "vigilance",
    "lifelink",
    "deathtouch",
    "first strike",
    "double strike",
    "hexproof",
    "indestructible",
    "menace",
    "reach",
    "flash",
    "defender",
    "ward",
    "protection",
    "shroud",
    "equip",
    "enchant",
    "prowess",
    "landwalk",
    "forestwalk",
    "islandwalk",
    "mountainwalk",
    "swampwalk",
    "plainswalk",
    "fear",
    "intimidate",
    "regenerate",
    "unblockable",
    "persist",
    "undying",
    "cascade",
    "cycling",
    "flashback",
    "kicker",
    "multikicker",
    "overload",
    "affinity",
    "convoke",
    "delve",
    "emerge",
    "improvise",
    "spectacle",
    "escape",
    "mutate",
    "companion",
    "partner",
    "foretell",
    "disturb",
    "daybound",
    "nightbound",
    "decayed",
    "exploit",
    "transform",
)

# Legalities that allow a card to be played
PLAYABLE_LEGALITIES = frozenset({"legal", "restricted"})

_MANA_SYMBOL = re.compile(r"\{([^}]+)\}")
_TYPE_SEPARATOR = "—"
_FACE_SEPARATOR = " // "


@dataclass(frozen=True, slots=True)
class ParsedMana:
    """Breakdown of a mana cost string."""

    symbols: tuple[str, ...] = ()
    colors: tuple[str, ...] = ()
    generic: int = 0
    colorless: int = 0


def parse_type_line(type_line: str | None) -> ParsedTypes:
    """
    Split a type line into supertypes, types and subtypes.

    Multi-faced type lines ("Creature — Human // Land") contribute every face.
    """
    if not type_line:
        return ParsedTypes()

    supertypes: list[str] = []
    types: list[str] = []
    subtypes: list[str] = []

    for face_line in type_line.split("//"):
        main_part, _, subtype_part = face_line.partition(_TYPE_SEPARATOR)
        for word in main_part.split():
            if word in SUPERTYPES:
                _append_unique(supertypes, word.lower())
            elif word in CARD_TYPES:
                _append_unique(types, word.lower())
        for word in subtype_part.split():
            _append_unique(subtypes, word.lower())

    if not (supertypes or types or subtypes):
        # Unrecognized type words still yield a decomposition
        types = [w.lower() for w in type_line.split(_TYPE_SEPARATOR)[0].split()[:1]]

    return ParsedTypes(supertypes=tuple(supertypes), types=tuple(types), subtypes=tuple(subtypes))


def _append_unique(values: list[str], value: str) -> None:
    if value not in values:
        values.append(value)


def parse_mana_cost(mana_cost: str | None) -> ParsedMana:
    """
    Parse a mana cost like "{2}{U}{U}".

    Hybrid symbols ("{W/U}", "{2/G}") contribute every color they mention.
    Variable symbols (X, Y, Z) count for nothing.
    """
    if not mana_cost:
        return ParsedMana()

    symbols: list[str] = []
    colors: set[str] = set()
    generic = 0
    colorless = 0

    for symbol in _MANA_SYMBOL.findall(mana_cost):
        symbols.append(symbol)
        if symbol.isdigit():
            generic += int(symbol)
        elif symbol == "C":
            colorless += 1
        elif symbol in COLORS:
            colors.add(symbol)
        elif "/" in symbol:
            colors.update(c for c in COLORS if c in symbol)

    return ParsedMana(
        symbols=tuple(symbols),
        colors=_ordered_colors(colors),
        generic=generic,
        colorless=colorless,
    )


def extract_keywords(oracle_text: str | None, declared: Iterable[str] = ()) -> tuple[str, ...]:
    """Declared keywords plus keywords found in rules text, lower-cased."""
    keywords: list[str] = []
    for keyword in declared:
        _append_unique(keywords, keyword.lower())

    if oracle_text:
        lower_text = oracle_text.lower()
        for keyword in KEYWORD_PATTERNS:
            if keyword in lower_text:
                _append_unique(keywords, keyword)

    return tuple(keywords)


def _ordered_colors(colors: Iterable[str]) -> tuple[str, ...]:
    """Keep only valid color letters, in WUBRG order."""
    wanted = {c.upper() for c in colors}
    return tuple(c for c in COLORS if c in wanted)


def _normalize_rarity(rarity: str | None) -> str:
    """Lower-case rarity, folding "mythic rare" into "mythic"."""
    if not rarity:
        return ""
    rarity = rarity.lower()
    # Unknown rarities ("special", "bonus") are kept for exact-match lookups
    return "mythic" if rarity == "mythic rare" else rarity


def _stat(value: Any) -> str | None:
    return None if value is None else str(value)


def normalize_face(face: dict[str, Any]) -> CardFace:
    """Normalize one entry of a card's `card_faces` list."""
    return CardFace(
        name=face.get("name", ""),
        type_line=face.get("type_line", "") or "",
        parsed_types=parse_type_line(face.get("type_line")),
        mana_cost=face.get("mana_cost", "") or "",
        oracle_text=face.get("oracle_text", "") or "",
        colors=_ordered_colors(face.get("colors") or []),
        power=_stat(face.get("power")),
        toughness=_stat(face.get("toughness")),
        loyalty=_stat(face.get("loyalty")),
    )


def normalize_card(card: dict[str, Any]) -> CardRecord:
    """
    Normalize a raw Scryfall card object.

    Multi-faced cards keep every face; their rules text is concatenated into
    `full_oracle_text` and, when the card itself lacks top-level colors or
    stats, the front face supplies them.

    Raises:
        KeyError: If the card has no id or name
    """
    faces = tuple(normalize_face(f) for f in card.get("card_faces") or [])
    front = faces[0] if faces else None

    oracle_text = card.get("oracle_text") or (front.oracle_text if front else "")
    if faces:
        full_oracle_text = _FACE_SEPARATOR.join(f.oracle_text for f in faces)
    else:
        full_oracle_text = oracle_text

    type_line = card.get("type_line") or _FACE_SEPARATOR.join(f.type_line for f in faces)
    mana_cost = card.get("mana_cost")
    if mana_cost is None and front is not None:
        mana_cost = front.mana_cost

    colors = card.get("colors")
    if colors is None:
        colors = sorted({c for f in faces for c in f.colors})

    legal_formats = {
        fmt.lower(): status in PLAYABLE_LEGALITIES
        for fmt, status in (card.get("legalities") or {}).items()
    }

    return CardRecord(
        id=str(card["id"]),
        name=card["name"],
        oracle_id=card.get("oracle_id"),
        released_at=card.get("released_at"),
        set_code=(card.get("set") or "").lower(),
        collector_number=str(card.get("collector_number") or ""),
        type_line=type_line,
        parsed_types=parse_type_line(type_line),
        mana_cost=mana_cost or "",
        mana_value=float(card.get("cmc") or 0),
        colors=_ordered_colors(colors),
        color_identity=_ordered_colors(card.get("color_identity") or []),
        oracle_text=oracle_text,
        full_oracle_text=full_oracle_text,
        keywords=extract_keywords(full_oracle_text, card.get("keywords") or []),
        power=_stat(card.get("power", front.power if front else None)),
        toughness=_stat(card.get("toughness", front.toughness if front else None)),
        rarity=_normalize_rarity(card.get("rarity")),
        legal_formats=legal_formats,
        artist=card.get("artist") or "",
        layout=card.get("layout") or "normal",
        faces=faces,
    )


def normalize_cards(cards: Iterable[dict[str, Any]]) -> list[CardRecord]:
    """Normalize a batch of raw card objects."""
    return [normalize_card(card) for card in cards]


async def normalize_cards_chunked(
    cards: Sequence[dict[str, Any]],
    chunk_size: int = 1000,
) -> AsyncIterator[list[CardRecord]]:
    """
    Normalize a large batch in chunks, yielding to the event loop in between.

    A full bulk file holds ~100k printings; normalizing it in one go would
    keep the loop busy for seconds.
    """
    chunk_size = max(1, chunk_size)
    for start in range(0, len(cards), chunk_size):
        yield normalize_cards(cards[start : start + chunk_size])
        logger.debug("Normalized %d/%d cards", min(start + chunk_size, len(cards)), len(cards))
        await asyncio.sleep(0)


def deduplicate_by_oracle(cards: Iterable[CardRecord]) -> list[CardRecord]:
    """
    Keep one printing per functional card (the most recent release).

    Cards without an oracle id are kept as-is.
    """
    latest: dict[str, CardRecord] = {}
    result: list[CardRecord] = []

    for card in cards:
        if card.oracle_id is None:
            result.append(card)
            continue
        current = latest.get(card.oracle_id)
        if current is None or (card.released_at or "") > (current.released_at or ""):
            latest[card.oracle_id] = card

    return result + list(latest.values())


def load_card_file(path: Path) -> list[dict[str, Any]]:
    """
    Load raw card objects from a local JSON file.

    Accepts either a bare list (Scryfall bulk-data layout) or a search
    response object with a "data" list.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Card data not found at {path}. "
            "Download a Scryfall bulk-data file (e.g. oracle-cards.json) first."
        )

    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    cards: list[dict[str, Any]] = payload["data"] if isinstance(payload, dict) else payload
    logger.info("Loaded %d raw cards from %s", len(cards), path)
    return cards

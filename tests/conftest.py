"""Shared card fixtures."""

import json
import random
from pathlib import Path
from typing import Any

import pytest

from deckforge.models.card import CardRecord
from deckforge.parsers.scryfall import normalize_cards
from deckforge.search.index import CardSearchIndex

COLOR_WORDS = {"W": "White", "U": "Blue", "B": "Black", "R": "Red", "G": "Green"}
BASIC_NAMES = {"W": "Plains", "U": "Island", "B": "Swamp", "R": "Mountain", "G": "Forest"}
RARITIES = ("common", "uncommon", "rare", "mythic")
NONLAND_TYPES = (
    "Creature — Human Soldier",
    "Instant",
    "Sorcery",
    "Enchantment",
    "Creature — Elf",
)


def raw_card(
    card_id: str,
    name: str,
    type_line: str,
    cmc: float = 0,
    colors: list[str] | None = None,
    color_identity: list[str] | None = None,
    oracle_text: str = "",
    **extra: Any,
) -> dict[str, Any]:
    """A Scryfall-shaped card object with sensible defaults."""
    colors = colors or []
    card: dict[str, Any] = {
        "id": card_id,
        "oracle_id": f"oracle-{card_id}",
        "name": name,
        "released_at": "2024-01-01",
        "set": "TST",
        "collector_number": card_id.rsplit("-", 1)[-1],
        "type_line": type_line,
        "mana_cost": "",
        "cmc": cmc,
        "colors": colors,
        "color_identity": color_identity if color_identity is not None else colors,
        "oracle_text": oracle_text,
        "keywords": [],
        "rarity": "common",
        "artist": "Test Artist",
        "legalities": {"standard": "legal", "modern": "legal", "commander": "legal"},
    }
    card.update(extra)
    return card


@pytest.fixture
def raw_three_cards() -> list[dict[str, Any]]:
    """Red 2-mana flyer, blue 1-mana cantrip instant, colorless land."""
    return [
        raw_card(
            "card-1",
            "Sky Raider",
            "Creature — Goblin Pilot",
            cmc=2,
            colors=["R"],
            oracle_text="Flying",
            mana_cost="{1}{R}",
            keywords=["Flying"],
            power="2",
            toughness="1",
            rarity="uncommon",
            artist="Jane Painter",
        ),
        raw_card(
            "card-2",
            "Quick Study",
            "Instant",
            cmc=1,
            colors=["U"],
            oracle_text="Draw a card.",
            mana_cost="{U}",
            rarity="common",
        ),
        raw_card(
            "card-3",
            "Barren Expanse",
            "Land",
            oracle_text="{T}: Add {C}.",
            rarity="rare",
            legalities={"standard": "not_legal", "modern": "legal", "commander": "legal"},
        ),
    ]


@pytest.fixture
def three_cards(raw_three_cards: list[dict[str, Any]]) -> list[CardRecord]:
    return normalize_cards(raw_three_cards)


@pytest.fixture
def three_card_index(three_cards: list[CardRecord]) -> CardSearchIndex:
    index = CardSearchIndex()
    index.build_index(three_cards)
    return index


@pytest.fixture
def raw_pool() -> list[dict[str, Any]]:
    """
    A 60-card-format pool: 40 non-lands across colors and curve slots,
    5 basic lands, 6 dual lands, and one card not legal in standard.
    """
    cards: list[dict[str, Any]] = []
    letters = list(COLOR_WORDS)

    for i in range(40):
        color = letters[i % 5]
        mana_value = 1 + i % 6
        type_line = NONLAND_TYPES[i % len(NONLAND_TYPES)]
        is_creature = type_line.startswith("Creature")
        cards.append(
            raw_card(
                f"pool-{i}",
                f"{COLOR_WORDS[color]} Card {i}",
                type_line,
                cmc=mana_value,
                colors=[color],
                oracle_text="Whenever this attacks, draw a card." if is_creature else "Scry 1.",
                rarity=RARITIES[i % 4],
                power=("*" if i == 0 else str(mana_value)) if is_creature else None,
                toughness=str(mana_value) if is_creature else None,
            )
        )

    for color, name in BASIC_NAMES.items():
        cards.append(
            raw_card(
                f"basic-{color.lower()}",
                name,
                f"Basic Land — {name}",
                color_identity=[color],
                oracle_text=f"({{T}}: Add {{{color}}}.)",
            )
        )

    for i, (first, second) in enumerate(["WU", "UB", "BR", "RG", "GW", "WB"]):
        cards.append(
            raw_card(
                f"dual-{i}",
                f"{COLOR_WORDS[first]}-{COLOR_WORDS[second]} Crossing",
                "Land",
                color_identity=[first, second],
                oracle_text=f"{{T}}: Add {{{first}}} or {{{second}}}.",
            )
        )

    cards.append(
        raw_card(
            "banned-1",
            "Forbidden Relic",
            "Artifact",
            cmc=2,
            legalities={"standard": "banned", "modern": "legal", "commander": "legal"},
        )
    )
    return cards


@pytest.fixture
def pool_cards(raw_pool: list[dict[str, Any]]) -> list[CardRecord]:
    return normalize_cards(raw_pool)


@pytest.fixture
def pool_index(pool_cards: list[CardRecord]) -> CardSearchIndex:
    index = CardSearchIndex()
    index.build_index(pool_cards)
    return index


@pytest.fixture
def raw_commander_pool() -> list[dict[str, Any]]:
    """
    A commander pool around a black-green commander: 70 in-identity
    non-lands, 45 in-identity lands, two out-of-identity cards and a second
    printing of the commander.
    """
    commander_fields = {
        "oracle_id": "oracle-gardener",
        "mana_cost": "{2}{B}{G}",
        "power": "4",
        "toughness": "4",
        "rarity": "mythic",
    }
    cards: list[dict[str, Any]] = [
        raw_card(
            "cmdr-1",
            "Grim Gardener",
            "Legendary Creature — Elf Druid",
            cmc=4,
            colors=["B", "G"],
            oracle_text="Whenever a creature you control dies, return it to your hand.",
            **commander_fields,
        ),
        raw_card(
            "cmdr-2",
            "Grim Gardener",
            "Legendary Creature — Elf Druid",
            cmc=4,
            colors=["B", "G"],
            oracle_text="Whenever a creature you control dies, return it to your hand.",
            released_at="2025-01-01",
            **commander_fields,
        ),
    ]

    identities = [["B"], ["G"], ["B", "G"], []]
    for i in range(70):
        identity = identities[i % 4]
        type_line = "Artifact" if not identity else NONLAND_TYPES[i % len(NONLAND_TYPES)]
        cards.append(
            raw_card(
                f"cmd-{i}",
                f"Grove Card {i}",
                type_line,
                cmc=1 + i % 7,
                colors=identity,
                oracle_text="Scry 1.",
            )
        )

    for i in range(45):
        cards.append(
            raw_card(
                f"cmdland-{i}",
                f"Bog Grove {i}",
                "Land",
                color_identity=[["B"], ["G"], ["B", "G"]][i % 3],
                oracle_text="{T}: Add {B} or {G}.",
            )
        )

    cards.append(raw_card("out-1", "Blue Intruder", "Instant", cmc=2, colors=["U"]))
    cards.append(
        raw_card("out-2", "Red Intruder", "Creature — Goblin", cmc=1, colors=["R"], power="1")
    )
    return cards


@pytest.fixture
def commander_index(raw_commander_pool: list[dict[str, Any]]) -> CardSearchIndex:
    index = CardSearchIndex()
    index.build_index(normalize_cards(raw_commander_pool))
    return index


@pytest.fixture
def card_file(tmp_path: Path, raw_pool: list[dict[str, Any]]) -> Path:
    """The pool written as a Scryfall bulk-data style JSON list."""
    path = tmp_path / "cards.json"
    path.write_text(json.dumps(raw_pool), encoding="utf-8")
    return path


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(42)

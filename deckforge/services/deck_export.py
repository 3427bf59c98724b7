"""
Deck export.

Renders a generated deck as text, CSV, JSON, MTGO or Arena import format.
Output only: decks are trusted to be complete, nothing is validated here.
"""

import csv
import io
import json

from deckforge.models.deck import CATEGORIES, Deck, DeckEntry
from deckforge.models.failure import FailureKind, KnownError
from deckforge.services.deck_stats import categorize_card

EXPORT_FORMATS: tuple[str, ...] = ("text", "csv", "json", "mtgo", "arena")


def export_deck(deck: Deck, export_format: str = "text") -> str:
    """
    Render a deck in one of EXPORT_FORMATS.

    Raises:
        KnownError: If the format is not supported
    """
    renderer = _RENDERERS.get(export_format.lower())
    if renderer is None:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=f"Unsupported export format: {export_format}",
            suggestion=f"Use one of: {', '.join(EXPORT_FORMATS)}",
        )
    return renderer(deck)


def _category_header(category: str) -> str:
    return f"// {category.capitalize()}s"


def export_text(deck: Deck) -> str:
    """
    Plain text grouped by category.

        // Lands
        20x Mountain

        // Creatures
        4x Goblin Guide
    """
    commanders = [e for e in deck.entries if e.is_commander]
    sideboard = deck.sideboard()
    main = [e for e in deck.mainboard() if not e.is_commander]

    groups: dict[str, list[DeckEntry]] = {category: [] for category in CATEGORIES}
    for entry in main:
        groups[categorize_card(entry.card)].append(entry)

    sections: list[tuple[str, list[DeckEntry]]] = [("// Commander", commanders)]
    sections += [(_category_header(category), entries) for category, entries in groups.items()]
    sections.append(("// Sideboard", sideboard))

    lines: list[str] = []
    for header, entries in sections:
        if not entries:
            continue
        lines.append(header)
        lines.extend(f"{entry.count}x {entry.card.name}" for entry in entries)
        lines.append("")
    return "\n".join(lines)


def export_csv(deck: Deck) -> str:
    """One row per entry: Count,Name,Type,CMC,Set (text columns quoted)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    buffer.write("Count,Name,Type,CMC,Set\n")
    for entry in deck.entries:
        card = entry.card
        mana_value = float(card.mana_value)
        cmc = int(mana_value) if mana_value.is_integer() else mana_value
        writer.writerow([entry.count, card.name, card.type_line, cmc, card.set_code])
    return buffer.getvalue().rstrip("\n")


def export_json(deck: Deck) -> str:
    return json.dumps(deck.to_dict(), indent=2)


def export_mtgo(deck: Deck) -> str:
    """MTGO list: mainboard lines, then a Sideboard block when there is one."""
    lines = [f"{entry.count} {entry.card.name}" for entry in deck.mainboard()]
    sideboard = deck.sideboard()
    if sideboard:
        lines.append("")
        lines.append("Sideboard")
        lines.extend(f"{entry.count} {entry.card.name}" for entry in sideboard)
    return "\n".join(lines)


def _arena_line(entry: DeckEntry) -> str:
    card = entry.card
    if not card.set_code:
        return f"{entry.count} {card.name}"
    return f"{entry.count} {card.name} ({card.set_code.upper()}) {card.collector_number}".rstrip()


def export_arena(deck: Deck) -> str:
    """Arena import text: optional Commander block, Deck, optional Sideboard."""
    commanders = [e for e in deck.entries if e.is_commander]
    lines: list[str] = []

    if commanders:
        lines.append("Commander")
        lines.extend(_arena_line(entry) for entry in commanders)
        lines.append("")

    lines.append("Deck")
    lines.extend(_arena_line(e) for e in deck.mainboard() if not e.is_commander)

    sideboard = deck.sideboard()
    if sideboard:
        lines.append("")
        lines.append("Sideboard")
        lines.extend(_arena_line(entry) for entry in sideboard)

    return "\n".join(lines)


_RENDERERS = {
    "text": export_text,
    "csv": export_csv,
    "json": export_json,
    "mtgo": export_mtgo,
    "arena": export_arena,
}

"""
Parser for plain deck lists.

Reads the line formats the exporter writes back into a name -> count map:

    4x Lightning Bolt              (text export)
    4 Lightning Bolt               (MTGO)
    4 Lightning Bolt (LEB) 163     (Arena)

Comment lines ("// Creatures"), section headers (Deck, Sideboard, Commander,
Companion) and blank lines are skipped. Counts for repeated names add up.
"""

import re

# Groups: (quantity, card_name, set_code, collector_number)
ARENA_LINE_PATTERN = re.compile(r"^(\d+)x?\s+(.+?)\s+\(([A-Za-z0-9]+)\)\s+(\S+)$")

# Groups: (quantity, card_name)
SIMPLE_LINE_PATTERN = re.compile(r"^(\d+)x?\s+(.+)$")

SECTION_HEADERS = frozenset({"deck", "sideboard", "commander", "companion"})


def parse_deck_list(text: str | None) -> dict[str, int]:
    """
    Parse deck list text into card name -> total copies.

    Returns an empty dict for empty input. Lines that match no known
    format are ignored.
    """
    counts: dict[str, int] = {}
    if not text or not text.strip():
        return counts

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("//") or line.lower() in SECTION_HEADERS:
            continue

        match = ARENA_LINE_PATTERN.match(line) or SIMPLE_LINE_PATTERN.match(line)
        if match is None:
            continue

        quantity, name = int(match.group(1)), match.group(2).strip()
        if quantity > 0:
            counts[name] = counts.get(name, 0) + quantity

    return counts


def parse_text_export(text: str | None) -> dict[str, int]:
    """Recover the name -> count multiset from a "text" deck export."""
    return parse_deck_list(text)

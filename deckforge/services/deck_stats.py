"""
Deck statistics.

Categorization, mana curve and aggregate stats over a deck's card multiset.
Lands are excluded from the curve and from the average mana value.
"""

from collections.abc import Iterable

from deckforge.models.card import COLORS, CardRecord
from deckforge.models.deck import CATEGORIES, DeckEntry, DeckStats


def categorize_card(card: CardRecord) -> str:
    """
    Primary category of a card.

    Checked in CATEGORIES order, so an artifact land is a land and an
    artifact creature is a creature.
    """
    types = card.parsed_types.types
    for category in CATEGORIES[:-1]:
        if category in types:
            return category
    return "other"


def mana_curve_slot(mana_value: float) -> str:
    """Curve bucket for a mana value: 0-1, 2, 3, 4, 5 or 6+."""
    if mana_value < 2:
        return "0-1"
    if mana_value >= 6:
        return "6+"
    # Fractional values (half-mana cards) round down into their bucket
    return str(int(mana_value))


def calculate_deck_stats(entries: Iterable[DeckEntry]) -> DeckStats:
    """Aggregate stats over deck entries (sideboard included)."""
    stats = DeckStats()
    names: set[str] = set()
    colors: set[str] = set()

    for entry in entries:
        card = entry.card
        count = entry.count

        stats.total_cards += count
        names.add(card.name)

        category = categorize_card(card)
        stats.by_category[category] = stats.by_category.get(category, 0) + count

        if category != "land":
            stats.mana_curve[mana_curve_slot(card.mana_value)] += count
            stats.total_mana_value += card.mana_value * count
            stats.non_land_count += count

        colors.update(card.color_identity)

    stats.unique_cards = len(names)
    stats.colors = [c for c in COLORS if c in colors]
    if stats.non_land_count:
        stats.avg_mana_value = round(stats.total_mana_value / stats.non_land_count, 2)
    return stats

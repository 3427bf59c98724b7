"""
Deck advisor.

Rule-based review of a deck's land count and mana curve. Findings are
advisory: the current rules emit warnings and info only, so a deck is
never demoted to invalid by this pass.
"""

from collections.abc import Iterable

from deckforge.models.deck import Deck, DeckAnalysis, DeckEntry, Suggestion
from deckforge.models.formats import Constraints, validate_constraints
from deckforge.services.deck_sampler import ConstraintInput
from deckforge.services.deck_stats import calculate_deck_stats

# Share of non-land cards that should cost 0-2 mana
MIN_LOW_CURVE_SHARE = 0.3

# Share of non-land cards above which 5+ mana cards make the curve top-heavy
MAX_TOP_END_SHARE = 0.25

MAX_AVG_MANA_VALUE = 3.5


def _check_lands(land_count: int, constraints: Constraints) -> list[Suggestion]:
    if land_count < constraints.min_lands:
        return [
            Suggestion(
                severity="warning",
                message=f"Land count ({land_count}) is below minimum ({constraints.min_lands})",
                action="Add more lands",
            )
        ]
    if land_count > constraints.max_lands:
        return [
            Suggestion(
                severity="warning",
                message=f"Land count ({land_count}) is above maximum ({constraints.max_lands})",
                action="Remove some lands",
            )
        ]
    return []


def suggest_improvements(
    deck: Deck | Iterable[DeckEntry],
    constraints: ConstraintInput = None,
) -> DeckAnalysis:
    """
    Review a deck and suggest changes.

    Args:
        deck: A Deck or a list of entries
        constraints: Bounds to check against; defaults to the deck's own
            constraints, or the standard format for a bare entry list

    Returns:
        DeckAnalysis with fresh stats and suggestions
    """
    if isinstance(deck, Deck):
        entries = deck.entries
        if constraints is None:
            constraints = deck.constraints
    else:
        entries = list(deck)
    resolved = validate_constraints(constraints)

    stats = calculate_deck_stats(entries)
    suggestions = _check_lands(stats.land_count, resolved)

    low_curve = stats.mana_curve["0-1"] + stats.mana_curve["2"]
    top_end = stats.mana_curve["5"] + stats.mana_curve["6+"]

    if low_curve < stats.non_land_count * MIN_LOW_CURVE_SHARE:
        suggestions.append(
            Suggestion(
                severity="info",
                message="Low early-game presence",
                action="Consider adding more 1-2 mana cards",
            )
        )

    if top_end > stats.non_land_count * MAX_TOP_END_SHARE:
        suggestions.append(
            Suggestion(
                severity="info",
                message="Heavy top-end curve",
                action="Consider reducing high-cost cards or adding ramp",
            )
        )

    if stats.avg_mana_value > MAX_AVG_MANA_VALUE:
        suggestions.append(
            Suggestion(
                severity="warning",
                message=f"High average mana value ({stats.avg_mana_value:.2f})",
                action="Consider lowering the curve",
            )
        )

    return DeckAnalysis(stats=stats, suggestions=suggestions)

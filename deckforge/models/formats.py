"""
Format defaults and deck constraints.

Every sampler run works from a fully populated Constraints value. Callers
supply ConstraintOverrides (all fields optional); validate_constraints fills
the gaps from the format table.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True, slots=True)
class FormatConfig:
    """Deck-building defaults for one format."""

    deck_size: int
    max_copies: int
    min_lands: int
    max_lands: int
    has_commander: bool = False
    # Card data carries a legality flag for this format
    tracks_legality: bool = True


DEFAULT_FORMAT = "standard"

FORMAT_CONFIGS: dict[str, FormatConfig] = {
    "standard": FormatConfig(deck_size=60, max_copies=4, min_lands=20, max_lands=26),
    "modern": FormatConfig(deck_size=60, max_copies=4, min_lands=20, max_lands=26),
    "pioneer": FormatConfig(deck_size=60, max_copies=4, min_lands=20, max_lands=26),
    "legacy": FormatConfig(deck_size=60, max_copies=4, min_lands=20, max_lands=26),
    "vintage": FormatConfig(deck_size=60, max_copies=4, min_lands=20, max_lands=26),
    "pauper": FormatConfig(deck_size=60, max_copies=4, min_lands=20, max_lands=26),
    "commander": FormatConfig(
        deck_size=100, max_copies=1, min_lands=35, max_lands=40, has_commander=True
    ),
    "brawl": FormatConfig(
        deck_size=60, max_copies=1, min_lands=22, max_lands=26, has_commander=True
    ),
    "limited": FormatConfig(
        deck_size=40, max_copies=99, min_lands=16, max_lands=18, tracks_legality=False
    ),
}


def get_format_config(format_name: str | None) -> FormatConfig:
    """Defaults for a format. Unknown formats fall back to 60-card standard."""
    if not format_name:
        return FORMAT_CONFIGS[DEFAULT_FORMAT]
    return FORMAT_CONFIGS.get(format_name.lower(), FORMAT_CONFIGS[DEFAULT_FORMAT])


@dataclass(frozen=True, slots=True)
class Constraints:
    """
    Fully resolved deck constraints.

    Attributes:
        format: Format name (lower-cased)
        deck_size: Target number of cards
        max_copies: Copy limit per card (basic lands exempt)
        min_lands / max_lands: Inclusive land count bounds
        has_commander: Format is built around a commander
        commander: Commander name, if any
        color_identity: Allowed color letters (e.g. "bg"); None = unrestricted
        max_mana_value: Mana value ceiling; None = unrestricted
        must_include: Card names seeded into every deck
        banned_cards: Card names never drawn
    """

    format: str
    deck_size: int
    max_copies: int
    min_lands: int
    max_lands: int
    has_commander: bool = False
    commander: str | None = None
    color_identity: str | None = None
    max_mana_value: float | None = None
    must_include: tuple[str, ...] = ()
    banned_cards: tuple[str, ...] = ()

    @property
    def allowed_colors(self) -> frozenset[str] | None:
        """Upper-case allowed color letters, or None when unrestricted."""
        if self.color_identity is None:
            return None
        return frozenset(self.color_identity.upper()) - {"C"}


class ConstraintOverrides(BaseModel):
    """Caller-supplied constraints; anything left out comes from the format table."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    format: str | None = None
    deck_size: int | None = Field(default=None, ge=1)
    max_copies: int | None = Field(default=None, ge=1)
    min_lands: int | None = Field(default=None, ge=0)
    max_lands: int | None = Field(default=None, ge=0)
    has_commander: bool | None = None
    commander: str | None = None
    color_identity: str | None = None
    max_mana_value: float | None = None
    must_include: list[str] = Field(default_factory=list)
    banned_cards: list[str] = Field(default_factory=list)


def validate_constraints(
    overrides: ConstraintOverrides | Mapping[str, Any] | Constraints | None = None,
) -> Constraints:
    """
    Resolve caller constraints against the format defaults.

    Always returns a fully populated Constraints value. Unknown formats
    keep their name but use the standard 60-card defaults.
    """
    if isinstance(overrides, Constraints):
        return overrides
    if overrides is None:
        overrides = ConstraintOverrides()
    elif not isinstance(overrides, ConstraintOverrides):
        overrides = ConstraintOverrides.model_validate(dict(overrides))

    format_name = (overrides.format or DEFAULT_FORMAT).lower()
    defaults = get_format_config(format_name)

    deck_size = overrides.deck_size or defaults.deck_size
    min_lands = overrides.min_lands if overrides.min_lands is not None else defaults.min_lands
    max_lands = overrides.max_lands if overrides.max_lands is not None else defaults.max_lands
    min_lands, max_lands = min(min_lands, deck_size), min(max_lands, deck_size)

    return Constraints(
        format=format_name,
        deck_size=deck_size,
        max_copies=(
            overrides.max_copies if overrides.max_copies is not None else defaults.max_copies
        ),
        min_lands=min(min_lands, max_lands),
        max_lands=max(min_lands, max_lands),
        has_commander=(
            overrides.has_commander
            if overrides.has_commander is not None
            else defaults.has_commander
        ),
        commander=overrides.commander,
        color_identity=overrides.color_identity.lower() if overrides.color_identity else None,
        max_mana_value=overrides.max_mana_value,
        must_include=tuple(overrides.must_include),
        banned_cards=tuple(overrides.banned_cards),
    )

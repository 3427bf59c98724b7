"""
Structured card queries.

CardQuery is the wire shape accepted by CardSearchIndex.search and the HTTP
API. Field names follow the JSON convention (camelCase aliases) and snake_case
works too. Unknown keys are dropped, and filter values that cannot be used
(a non-numeric mana value, an operator like "~") are treated as absent or as
"=" rather than rejected.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from deckforge.search.expressions import (
    COMPARISONS,
    AllOf,
    ColorMatch,
    Expression,
    FieldValue,
    NumericMatch,
    RarityMatch,
    TypeMatch,
    parse_color_string,
    tokens_all,
)
from deckforge.search.text_query import parse_text_query, tokenize

Operator = Literal["=", "<", ">", "<=", ">="]

_OPERATOR_ALIASES = {":": "=", "==": "=", "=<": "<=", "=>": ">="}

SORT_KEYS = frozenset({"name", "mana_value", "manaValue", "cmc", "rarity", "released", "color"})


class CardQuery(BaseModel):
    """
    A conjunctive card query. Every supplied filter must match.

    Attributes:
        text: Free text over name and rules text (supports and/or/not,
            parentheses, "quoted phrases")
        name: Name tokens, all required
        type: Type, subtype or supertype; a list requires every entry
        colors / color_identity: Color letters like "ub", compared with
            the matching operator
        mana_value / power / toughness: Numeric comparisons
        rarity: common < uncommon < rare < mythic
        set_code: Set code (JSON key "set")
        format: Cards legal in this format
        keyword: Keyword ability; a list requires every entry
        artist: Artist name tokens, all required
        sort_by: name, manaValue, rarity, released or color
        sort_order: asc or desc
        limit / offset: Pagination, applied after sorting
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    text: str | None = None
    name: str | None = None
    type: str | list[str] | None = None
    colors: str | None = None
    color_operator: Operator = "="
    color_identity: str | None = None
    color_identity_operator: Operator = "="
    mana_value: float | None = None
    mana_value_operator: Operator = "="
    power: float | None = None
    power_operator: Operator = "="
    toughness: float | None = None
    toughness_operator: Operator = "="
    rarity: str | None = None
    rarity_operator: Operator = "="
    set_code: str | None = Field(default=None, alias="set")
    format: str | None = None
    keyword: str | list[str] | None = None
    artist: str | None = None
    sort_by: str | None = None
    sort_order: Literal["asc", "desc"] = "asc"
    limit: int | None = None
    offset: int | None = None

    @field_validator(
        "color_operator",
        "color_identity_operator",
        "mana_value_operator",
        "power_operator",
        "toughness_operator",
        "rarity_operator",
        mode="before",
    )
    @classmethod
    def _normalize_operator(cls, value: Any) -> str:
        if not isinstance(value, str):
            return "="
        value = _OPERATOR_ALIASES.get(value.strip(), value.strip())
        return value if value in COMPARISONS else "="

    @field_validator("mana_value", "power", "toughness", mode="before")
    @classmethod
    def _numeric_or_none(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("limit", "offset", mode="before")
    @classmethod
    def _count_or_none(cls, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            count = int(value)
        except (TypeError, ValueError):
            return None
        return count if count >= 0 else None

    @field_validator("sort_order", mode="before")
    @classmethod
    def _normalize_order(cls, value: Any) -> str:
        return "desc" if isinstance(value, str) and value.lower() == "desc" else "asc"

    @field_validator("sort_by", mode="before")
    @classmethod
    def _known_sort_key(cls, value: Any) -> str | None:
        return value if isinstance(value, str) and value in SORT_KEYS else None

    @field_validator(
        "text",
        "name",
        "colors",
        "color_identity",
        "rarity",
        "set_code",
        "format",
        "artist",
        mode="before",
    )
    @classmethod
    def _string_or_none(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("type", "keyword", mode="before")
    @classmethod
    def _drop_blank_entries(cls, value: Any) -> str | list[str] | None:
        if isinstance(value, list):
            return [v for v in value if isinstance(v, str) and v.strip()] or None
        return value if isinstance(value, str) else None

    def types(self) -> list[str]:
        return _as_list(self.type)

    def keywords(self) -> list[str]:
        return _as_list(self.keyword)


def _as_list(value: str | list[str] | None) -> list[str]:
    if not value:
        return []
    return [value] if isinstance(value, str) else list(value)


def compile_query(query: CardQuery) -> Expression:
    """
    Compile a query into an expression tree.

    The result is always an AllOf of leaf predicates; a query without any
    filter compiles to AllOf(), which matches every card.
    """
    leaves: list[Expression] = []

    if query.text:
        leaves.append(parse_text_query(query.text))

    if query.name:
        leaves.append(tokens_all("name", tokenize(query.name)))

    leaves.extend(TypeMatch(type_name) for type_name in query.types())

    if query.colors:
        target = parse_color_string(query.colors)
        if target:
            leaves.append(ColorMatch(target, query.color_operator))

    if query.color_identity:
        target = parse_color_string(query.color_identity)
        if target:
            leaves.append(ColorMatch(target, query.color_identity_operator, identity=True))

    if query.mana_value is not None:
        leaves.append(NumericMatch("mana_value", query.mana_value, query.mana_value_operator))
    if query.power is not None:
        leaves.append(NumericMatch("power", query.power, query.power_operator))
    if query.toughness is not None:
        leaves.append(NumericMatch("toughness", query.toughness, query.toughness_operator))

    if query.rarity:
        leaves.append(RarityMatch(query.rarity, query.rarity_operator))

    if query.set_code:
        leaves.append(FieldValue("set", query.set_code.lower()))

    if query.format:
        leaves.append(FieldValue("format", query.format.lower()))

    leaves.extend(FieldValue("keyword", keyword.lower()) for keyword in query.keywords())

    if query.artist:
        leaves.append(tokens_all("artist", tokenize(query.artist)))

    return AllOf(tuple(leaves))

"""
Boolean query expressions.

A query is a tree of nodes evaluated into a set of card ids:

- leaves are typed predicates (a text token, a field value, a color or
  numeric comparison)
- AllOf intersects, AnyOf unions, Not subtracts from the full corpus

Index-backed leaves cost one dictionary lookup. Color and numeric leaves
scan every card (there is no range index).

INVARIANTS:
- Evaluation never mutates sets owned by the index
- AllOf() with no children matches every card; AnyOf() matches none
"""

import operator as op
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from deckforge.models.card import RARITY_ORDER

if TYPE_CHECKING:
    from deckforge.search.index import CardSearchIndex

COMPARISONS: dict[str, Callable[[float, float], bool]] = {
    "=": op.eq,
    "<": op.lt,
    ">": op.gt,
    "<=": op.le,
    ">=": op.ge,
}

COLOR_LETTERS = "wubrgc"


def parse_color_string(colors: str) -> frozenset[str]:
    """Lower-case color letters in a string like "UB" or "wubrg"; other characters are dropped."""
    return frozenset(c for c in colors.lower() if c in COLOR_LETTERS)


def compare_color_sets(card_colors: Iterable[str], target: frozenset[str], operator: str) -> bool:
    """
    Compare a card's colors against a target color set.

    Colorless cards compare as the singleton {"c"}.

    =   exact equality
    <=  card colors are a subset of the target
    >=  card colors contain every target color
    <   proper subset
    >   proper superset
    """
    actual = frozenset(c.lower() for c in card_colors) or frozenset({"c"})

    if operator == "=":
        return actual == target
    if operator == "<=":
        return actual <= target
    if operator == ">=":
        return actual >= target
    if operator == "<":
        return actual < target
    if operator == ">":
        return actual > target
    return False


class Expression:
    """Base class for query nodes."""

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class AllOf(Expression):
    """Intersection of every child. Empty = all cards."""

    children: tuple[Expression, ...] = ()

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        if not self.children:
            return index.ids()
        result: set[str] | None = None
        for child in self.children:
            ids = child.evaluate(index)
            result = set(ids) if result is None else result & ids
            if not result:
                break
        return result or set()


@dataclass(frozen=True)
class AnyOf(Expression):
    """Union of every child. Empty = no cards."""

    children: tuple[Expression, ...] = ()

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        result: set[str] = set()
        for child in self.children:
            result |= child.evaluate(index)
        return result


@dataclass(frozen=True)
class Not(Expression):
    """Every card the child does not match."""

    child: Expression

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        return index.ids() - self.child.evaluate(index)


@dataclass(frozen=True)
class Term(Expression):
    """A single full-text token (rules text of every face)."""

    token: str

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        return set(index.text_ids(self.token))


@dataclass(frozen=True)
class FieldValue(Expression):
    """Exact lookup in one field index (set, format, keyword, rarity, ...)."""

    field: str
    value: str

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        return set(index.field_ids(self.field, self.value))


@dataclass(frozen=True)
class TypeMatch(Expression):
    """A type, subtype or supertype ("creature", "elf", "legendary")."""

    type_name: str

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        value = self.type_name.lower()
        return (
            set(index.field_ids("type", value))
            | index.field_ids("subtype", value)
            | index.field_ids("supertype", value)
        )


@dataclass(frozen=True)
class ColorMatch(Expression):
    """Color or color-identity comparison. Scans every card."""

    colors: frozenset[str]
    operator: str = "="
    identity: bool = False

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        return {
            card.id
            for card in index.cards()
            if compare_color_sets(
                card.color_identity if self.identity else card.colors,
                self.colors,
                self.operator,
            )
        }


@dataclass(frozen=True)
class NumericMatch(Expression):
    """
    Numeric comparison on mana_value, power or toughness. Scans every card.

    Cards whose value is not numeric ("*") never match.
    """

    stat: str
    value: float
    operator: str = "="

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        compare = COMPARISONS.get(self.operator)
        if compare is None:
            return set()
        result: set[str] = set()
        for card in index.cards():
            card_value = card.numeric_stat(self.stat)
            if card_value is not None and compare(card_value, self.value):
                result.add(card.id)
        return result


@dataclass(frozen=True)
class RarityMatch(Expression):
    """
    Ordinal rarity comparison (common < uncommon < rare < mythic).

    Rarities outside that order ("special", "bonus") fall back to an exact
    index lookup.
    """

    rarity: str
    operator: str = "="

    def evaluate(self, index: "CardSearchIndex") -> set[str]:
        rarity = self.rarity.lower()
        if rarity not in RARITY_ORDER:
            return set(index.field_ids("rarity", rarity))

        compare = COMPARISONS.get(self.operator)
        if compare is None:
            return set()
        target = RARITY_ORDER.index(rarity)
        result: set[str] = set()
        for value in RARITY_ORDER:
            if compare(RARITY_ORDER.index(value), target):
                result |= index.field_ids("rarity", value)
        return result


def tokens_all(field: str, tokens: Iterable[str]) -> Expression:
    """AND of token lookups in one field index (name, artist). No tokens = no cards."""
    leaves = tuple(FieldValue(field, token) for token in tokens)
    return AllOf(leaves) if leaves else AnyOf()

"""
Card search.

Inverted-index search over normalized card records, driven by structured
queries compiled into boolean expression trees.
"""

from deckforge.search.expressions import (
    AllOf,
    AnyOf,
    ColorMatch,
    Expression,
    FieldValue,
    Not,
    NumericMatch,
    RarityMatch,
    Term,
    TypeMatch,
    compare_color_sets,
)
from deckforge.search.index import CardSearchIndex, IndexProgress, IndexStats
from deckforge.search.query import CardQuery, compile_query
from deckforge.search.text_query import parse_text_query, tokenize

__all__ = [
    "AllOf",
    "AnyOf",
    "CardQuery",
    "CardSearchIndex",
    "ColorMatch",
    "Expression",
    "FieldValue",
    "IndexProgress",
    "IndexStats",
    "Not",
    "NumericMatch",
    "RarityMatch",
    "Term",
    "TypeMatch",
    "compare_color_sets",
    "compile_query",
    "parse_text_query",
    "tokenize",
]

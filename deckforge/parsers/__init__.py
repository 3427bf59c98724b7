from deckforge.parsers.deck_list import parse_deck_list, parse_text_export
from deckforge.parsers.scryfall import (
    deduplicate_by_oracle,
    extract_keywords,
    load_card_file,
    normalize_card,
    normalize_cards,
    normalize_cards_chunked,
    parse_mana_cost,
    parse_type_line,
)

__all__ = [
    "deduplicate_by_oracle",
    "extract_keywords",
    "load_card_file",
    "normalize_card",
    "normalize_cards",
    "normalize_cards_chunked",
    "parse_deck_list",
    "parse_mana_cost",
    "parse_text_export",
    "parse_type_line",
]

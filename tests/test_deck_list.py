"""Tests for deck list parsing."""

from deckforge.parsers.deck_list import parse_deck_list


class TestParseDeckList:
    def test_text_export_lines(self) -> None:
        text = "// Creatures\n4x Goblin Guide\n\n// Lands\n20x Mountain\n"

        assert parse_deck_list(text) == {"Goblin Guide": 4, "Mountain": 20}

    def test_arena_lines_drop_set_and_number(self) -> None:
        text = "Deck\n4 Lightning Bolt (LEB) 163\n2 Fable of the Mirror-Breaker (NEO) 141\n"

        assert parse_deck_list(text) == {"Lightning Bolt": 4, "Fable of the Mirror-Breaker": 2}

    def test_sideboard_counts_add_up(self) -> None:
        text = "3 Duress\n\nSideboard\n1 Duress"

        assert parse_deck_list(text) == {"Duress": 4}

    def test_unparseable_and_zero_lines_ignored(self) -> None:
        assert parse_deck_list("Lightning Bolt\n0 Shock\n2 Opt") == {"Opt": 2}

    def test_empty(self) -> None:
        assert parse_deck_list(None) == {}
        assert parse_deck_list("   \n") == {}

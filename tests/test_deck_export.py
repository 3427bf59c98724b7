"""Tests for deck export formats."""

import csv
import io
import json
import random

import pytest

from deckforge.models.card import CardRecord
from deckforge.models.deck import Deck, DeckEntry
from deckforge.models.failure import FailureKind, KnownError
from deckforge.models.formats import validate_constraints
from deckforge.parsers.deck_list import parse_deck_list, parse_text_export
from deckforge.search.index import CardSearchIndex
from deckforge.services.deck_export import export_deck
from deckforge.services.deck_sampler import DeckSampler
from deckforge.services.deck_stats import calculate_deck_stats


def _deck(entries: list[DeckEntry]) -> Deck:
    return Deck(
        entries=entries,
        constraints=validate_constraints(),
        stats=calculate_deck_stats(entries),
        valid=True,
    )


@pytest.fixture
def small_deck(three_cards: list[CardRecord]) -> Deck:
    raider, study, land = three_cards
    return _deck(
        [
            DeckEntry(card=raider, count=4),
            DeckEntry(card=land, count=20),
            DeckEntry(card=study, count=3),
        ]
    )


@pytest.fixture
def deck_with_sideboard(three_cards: list[CardRecord]) -> Deck:
    raider, study, land = three_cards
    return _deck(
        [
            DeckEntry(card=raider, count=4),
            DeckEntry(card=land, count=20),
            DeckEntry(card=study, count=2, is_sideboard=True),
        ]
    )


class TestExportText:
    def test_grouped_by_category(self, small_deck: Deck) -> None:
        assert export_deck(small_deck, "text") == (
            "// Lands\n20x Barren Expanse\n\n"
            "// Creatures\n4x Sky Raider\n\n"
            "// Instants\n3x Quick Study\n"
        )

    def test_round_trips_card_counts(self, pool_index: CardSearchIndex) -> None:
        deck = DeckSampler(pool_index, rng=random.Random(5)).generate_random_deck(
            list(pool_index.cards())
        )

        assert parse_text_export(export_deck(deck, "text")) == deck.card_counts()

    def test_commander_and_sideboard_sections(
        self, deck_with_sideboard: Deck, commander_index: CardSearchIndex
    ) -> None:
        deck_with_sideboard.entries.insert(
            0, DeckEntry(card=commander_index.get("cmdr-1"), count=1, is_commander=True)
        )

        text = export_deck(deck_with_sideboard, "text")

        assert text.startswith("// Commander\n1x Grim Gardener\n\n// Lands")
        assert text.endswith("// Sideboard\n2x Quick Study\n")


class TestExportCsv:
    def test_header_and_rows(self, small_deck: Deck) -> None:
        lines = export_deck(small_deck, "csv").split("\n")

        assert lines[0] == "Count,Name,Type,CMC,Set"
        assert lines[1] == '4,"Sky Raider","Creature — Goblin Pilot",2,"tst"'
        assert len(lines) == 4

    def test_names_with_commas_are_quoted(self, small_deck: Deck) -> None:
        commander = CardRecord(id="x", name="Atraxa, Praetors' Voice", mana_value=4.0)
        small_deck.entries.append(DeckEntry(card=commander))

        rows = list(csv.reader(io.StringIO(export_deck(small_deck, "csv"))))

        assert rows[-1][:2] == ["1", "Atraxa, Praetors' Voice"]


class TestExportJson:
    def test_serializes_whole_deck(self, small_deck: Deck) -> None:
        data = json.loads(export_deck(small_deck, "json"))

        assert data["valid"] is True
        assert data["constraints"]["format"] == "standard"
        assert [e["count"] for e in data["entries"]] == [4, 20, 3]
        assert data["entries"][0]["card"]["name"] == "Sky Raider"
        assert data["stats"]["total_cards"] == 27


class TestExportMtgo:
    def test_mainboard_only(self, small_deck: Deck) -> None:
        assert export_deck(small_deck, "MTGO") == (
            "4 Sky Raider\n20 Barren Expanse\n3 Quick Study"
        )

    def test_sideboard_block(self, deck_with_sideboard: Deck) -> None:
        assert export_deck(deck_with_sideboard, "mtgo") == (
            "4 Sky Raider\n20 Barren Expanse\n\nSideboard\n2 Quick Study"
        )


class TestExportArena:
    def test_set_and_collector_number(self, deck_with_sideboard: Deck) -> None:
        assert export_deck(deck_with_sideboard, "arena") == (
            "Deck\n4 Sky Raider (TST) 1\n20 Barren Expanse (TST) 3\n\n"
            "Sideboard\n2 Quick Study (TST) 2"
        )

    def test_name_only_without_set(self) -> None:
        deck = _deck([DeckEntry(card=CardRecord(id="x", name="Homebrew Golem"), count=2)])

        assert export_deck(deck, "arena") == "Deck\n2 Homebrew Golem"

    def test_arena_output_parses_back(self, small_deck: Deck) -> None:
        assert parse_deck_list(export_deck(small_deck, "arena")) == small_deck.card_counts()


class TestUnsupportedFormat:
    def test_raises_known_error(self, small_deck: Deck) -> None:
        with pytest.raises(KnownError) as exc_info:
            export_deck(small_deck, "xml")

        assert exc_info.value.kind == FailureKind.INVALID_INPUT
        assert "xml" in exc_info.value.message

"""Tests for the free text query parser."""

from deckforge.search.expressions import AllOf, AnyOf, Not, Term
from deckforge.search.index import CardSearchIndex
from deckforge.search.text_query import parse_text_query, tokenize


class TestTokenize:
    def test_lowercases_and_splits(self) -> None:
        assert tokenize("Draw a Card.") == ["draw", "card"]

    def test_keeps_plus_minus_slash(self) -> None:
        assert tokenize("Put a +1/+1 counter; -2/-2 until end of turn") == [
            "put",
            "+1/+1",
            "counter",
            "-2/-2",
            "until",
            "end",
            "of",
            "turn",
        ]

    def test_drops_single_characters(self) -> None:
        assert tokenize("a b {T} x") == []

    def test_empty(self) -> None:
        assert tokenize("") == []
        assert tokenize(None) == []


class TestParseTextQuery:
    def test_single_term(self) -> None:
        assert parse_text_query("flying") == Term("flying")

    def test_adjacent_terms_are_anded(self) -> None:
        assert parse_text_query("draw card") == AllOf((Term("draw"), Term("card")))

    def test_or_unions(self) -> None:
        assert parse_text_query("flying OR reach") == AnyOf((Term("flying"), Term("reach")))

    def test_or_binds_looser_than_and(self) -> None:
        assert parse_text_query("draw card or discard") == AnyOf(
            (AllOf((Term("draw"), Term("card"))), Term("discard"))
        )

    def test_explicit_and_is_skipped(self) -> None:
        assert parse_text_query("draw and card") == AllOf((Term("draw"), Term("card")))

    def test_not(self) -> None:
        assert parse_text_query("creature not haste") == AllOf(
            (Term("creature"), Not(Term("haste")))
        )

    def test_parentheses_group(self) -> None:
        assert parse_text_query("(flying or reach) haste") == AllOf(
            (AnyOf((Term("flying"), Term("reach"))), Term("haste"))
        )

    def test_quoted_phrase_keeps_or_literal(self) -> None:
        assert parse_text_query('"this or that"') == AllOf(
            (Term("this"), Term("or"), Term("that"))
        )

    def test_unclosed_parenthesis_and_quote(self) -> None:
        assert parse_text_query("(flying") == Term("flying")
        assert parse_text_query('"draw') == Term("draw")

    def test_empty_text_matches_nothing(self) -> None:
        assert parse_text_query("") == AnyOf()
        assert parse_text_query("a ,") == AnyOf()


class TestTextQueryEvaluation:
    def test_or_over_index(self, three_card_index: CardSearchIndex) -> None:
        ids = parse_text_query("flying or draw").evaluate(three_card_index)

        assert ids == {"card-1", "card-2"}

    def test_not_over_index(self, three_card_index: CardSearchIndex) -> None:
        ids = parse_text_query("not flying").evaluate(three_card_index)

        assert ids == {"card-2", "card-3"}

    def test_literal_or_is_a_plain_term(self, pool_index: CardSearchIndex) -> None:
        """Only the dual lands have the word "or" in their rules text."""
        ids = parse_text_query('"or"').evaluate(pool_index)

        assert ids == {f"dual-{i}" for i in range(6)}

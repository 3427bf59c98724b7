"""
Generate random decks from a local card data file.

Example:
    deckforge-generate --cards oracle-cards.json --format pauper --colors r \
        --count 3 --seed 7 --export mtgo
"""

import argparse
import asyncio
import logging
import random
import sys
from collections.abc import Sequence
from pathlib import Path

from deckforge.config import settings
from deckforge.models.deck import Deck
from deckforge.models.failure import FailureKind, KnownError
from deckforge.models.formats import DEFAULT_FORMAT, FORMAT_CONFIGS, get_format_config
from deckforge.search.query import CardQuery
from deckforge.services.card_database import build_index_from_file
from deckforge.services.deck_export import EXPORT_FORMATS, export_deck
from deckforge.services.deck_sampler import DeckSampler

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate random decks from local card data")
    parser.add_argument(
        "--cards",
        type=Path,
        default=settings.card_data_path,
        required=settings.card_data_path is None,
        help="Local JSON file of card objects (default: DECKFORGE_CARD_DATA_PATH)",
    )
    parser.add_argument(
        "--format",
        default=DEFAULT_FORMAT,
        help=f"Deck format, e.g. {', '.join(sorted(FORMAT_CONFIGS))} (default: {DEFAULT_FORMAT})",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=settings.default_deck_count,
        help=f"Number of decks (default: {settings.default_deck_count})",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible decks")
    parser.add_argument("--export", choices=EXPORT_FORMATS, default="text", help="Output format")
    parser.add_argument("--commander", default=None, help="Build one commander deck around NAME")
    parser.add_argument("--type", action="append", default=None, help="Type filter (repeatable)")
    parser.add_argument("--colors", default=None, help="Cards within these colors, e.g. 'ub'")
    parser.add_argument("--color-identity", default=None, help="Color identity within, e.g. 'wg'")
    parser.add_argument("--text", default=None, help="Free text filter (supports and/or/not)")
    return parser


def build_query(args: argparse.Namespace) -> CardQuery:
    """
    Candidate pool query: the optional filters (colors as subsets) plus
    format legality for formats the card data tracks.
    """
    tracks_legality = get_format_config(args.format).tracks_legality
    return CardQuery(
        format=args.format if tracks_legality else None,
        type=args.type,
        colors=args.colors,
        color_operator="<=",
        color_identity=args.color_identity,
        color_identity_operator="<=",
        text=args.text,
    )


async def run_generation(args: argparse.Namespace) -> list[Deck]:
    """
    Index the card file and generate decks.

    Returns:
        Generated decks; empty when no card matches the query.

    Raises:
        KnownError: If --commander names an unknown card
        FileNotFoundError: If the card file doesn't exist
    """
    index = await build_index_from_file(args.cards)
    rng = random.Random(args.seed) if args.seed is not None else None
    sampler = DeckSampler(index, rng=rng)

    if args.commander:
        commander = index.find_by_name(args.commander)
        if commander is None:
            raise KnownError(
                kind=FailureKind.NOT_FOUND,
                message=f"Commander '{args.commander}' not found in {args.cards}",
                status_code=404,
            )
        return [sampler.generate_commander_deck(commander)]

    result = sampler.generate_multiple(build_query(args), {"format": args.format}, args.count)
    if result.error:
        logger.warning("%s", result.error)
        return []

    valid = sum(1 for deck in result.decks if deck.valid)
    logger.info("Generated %d decks (%d valid)", len(result.decks), valid)
    return result.decks


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    try:
        decks = asyncio.run(run_generation(args))
    except (KnownError, FileNotFoundError) as e:
        logger.error("Deck generation failed: %s", e)
        raise SystemExit(1) from e

    if not decks:
        raise SystemExit(1)

    outputs = [export_deck(deck, args.export) for deck in decks]
    sys.stdout.write("\n\n".join(outputs) + "\n")


if __name__ == "__main__":
    main()

"""
Match a decklist against a Helvault export from the command line.

Prints, per entry, the copies owned (by collection), the copies missing and
the alternate printings available.
"""

import argparse
import logging
import sys
from pathlib import Path

from bagofholding.analysis.matching import compute_matches
from bagofholding.config import settings
from bagofholding.models.deck import MatchResult
from bagofholding.models.failure import KnownError
from bagofholding.models.snapshot import HelvaultSnapshot
from bagofholding.parsers.decklist import format_deck_list_entry, parse_deck_list
from bagofholding.services.helvault_importer import load_helvault

logger = logging.getLogger(__name__)


def match_file(export: Path, decklist_text: str) -> tuple[HelvaultSnapshot, list[MatchResult]]:
    """Import an export and match decklist text against it."""
    snapshot = load_helvault(export)
    entries = parse_deck_list(decklist_text)
    logger.info("Matching %d entries against %s", len(entries), export)

    results = compute_matches(
        entries,
        snapshot.inventory,
        snapshot.cards,
        snapshot.collections,
    )
    return snapshot, results


def format_report(snapshot: HelvaultSnapshot, results: list[MatchResult]) -> str:
    """Render match results as a plain-text report."""
    names = {collection.id: collection.name for collection in snapshot.collections}
    lines: list[str] = []

    for result in results:
        status = "OK" if result.is_complete else f"MISSING {result.missing}"
        lines.append(f"{format_deck_list_entry(result.entry)}  [{status}]")

        for item in result.owned:
            collection = names.get(item.collection_id, item.collection_id)
            finish = "/".join(item.finishes)
            lines.append(
                f"    {item.copies} from {collection} "
                f"({item.set.upper()} {item.collector_number}, {finish})"
            )

        if result.bling:
            printings = ", ".join(
                f"{card.set.upper()} {card.collector_number}" for card in result.bling
            )
            lines.append(f"    bling: {printings}")

    missing = sum(result.missing for result in results)
    requested = sum(result.entry.qty for result in results)
    lines.append(f"{requested - missing}/{requested} cards owned")
    return "\n".join(lines)


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Match a decklist against a Helvault export")
    parser.add_argument("export", type=Path, help="Path to the .helvault file")
    parser.add_argument(
        "decklist",
        nargs="?",
        default="-",
        help="Decklist file, or - to read standard input (default: -)",
    )
    args = parser.parse_args()

    text = sys.stdin.read() if args.decklist == "-" else Path(args.decklist).read_text()

    try:
        snapshot, results = match_file(args.export, text)
    except KnownError as e:
        logger.error("%s: %s", e.message, e.detail)
        raise SystemExit(1) from e

    print(format_report(snapshot, results))


if __name__ == "__main__":
    main()

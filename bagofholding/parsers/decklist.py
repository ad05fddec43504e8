"""
Parser for free-form decklist text.

Format:
    <quantity>[x] <card name>[ (<set_code>)]

Example:
    // Burn
    4 Lightning Bolt
    1x Sol Ring (C21)

Blank lines and lines starting with "//" or "#" are ignored. Lines that do
not match, or that ask for zero copies, are dropped without complaint.
"""

import re

from bagofholding.models.deck import DeckListEntry

# Pattern: "4 Lightning Bolt", "4x Lightning Bolt" or "2 Lightning Bolt (M11)"
# Groups: (quantity, card_name, set_code)
DECKLIST_PATTERN = re.compile(r"^([0-9]+)x?\s+(.+?)(?:\s*\(([^)]+)\))?$", re.IGNORECASE)

COMMENT_PREFIXES = ("//", "#")


def parse_deck_list(text: str) -> list[DeckListEntry]:
    """
    Parse decklist text into entries.

    Args:
        text: Raw decklist (clipboard paste, file contents)

    Returns:
        One DeckListEntry per valid line, in input order.
    """
    entries: list[DeckListEntry] = []

    for line in text.split("\n"):
        line = line.strip()

        if not line or line.startswith(COMMENT_PREFIXES):
            continue

        match = DECKLIST_PATTERN.match(line)
        if not match:
            continue

        quantity, name, set_code = match.groups()
        qty = int(quantity)
        if qty <= 0:
            continue

        entries.append(
            DeckListEntry(
                name=name.strip(),
                qty=qty,
                set=set_code.strip() if set_code else None,
            )
        )

    return entries


def format_deck_list_entry(entry: DeckListEntry) -> str:
    """Render one entry back to decklist text."""
    result = f"{entry.qty} {entry.name}"
    if entry.set:
        result += f" ({entry.set})"
    return result


def format_deck_list(entries: list[DeckListEntry]) -> str:
    """Render entries back to decklist text, one per line."""
    return "\n".join(format_deck_list_entry(entry) for entry in entries)

"""
Decklist matching and allocation.

Resolves decklist entries against an imported inventory. Copies are drawn
from collections in priority order, so the lowest-priority binder satisfies a
request first and later binders only cover what is left.

The engine is a pure function of its inputs: it never mutates the inventory
and performs no I/O.
"""

from collections.abc import Sequence

from bagofholding.models.card import Card
from bagofholding.models.collection import Collection, sort_by_priority
from bagofholding.models.deck import DeckListEntry, MatchResult
from bagofholding.models.inventory import InventoryItem


def compute_matches(
    entries: Sequence[DeckListEntry],
    inventory: Sequence[InventoryItem],
    cards: Sequence[Card],
    collections: Sequence[Collection],
) -> list[MatchResult]:
    """
    Match every decklist entry against the inventory.

    Args:
        entries: Parsed decklist entries
        inventory: Inventory rows from the import
        cards: Known printings from the import
        collections: Collections from the import (any order)

    Returns:
        One MatchResult per entry, in entry order
    """
    card_map = {card.scryfall_id: card for card in cards}
    sorted_collections = sort_by_priority(list(collections))

    return [
        match_entry(entry, inventory, cards, card_map, sorted_collections) for entry in entries
    ]


def match_entry(
    entry: DeckListEntry,
    inventory: Sequence[InventoryItem],
    cards: Sequence[Card],
    card_map: dict[str, Card],
    sorted_collections: list[Collection],
) -> MatchResult:
    """Resolve one entry. Collections must already be in allocation order."""
    candidates = find_candidates(entry, inventory, card_map)
    owned = allocate(entry.qty, candidates, sorted_collections)
    allocated = sum(item.copies for item in owned)

    return MatchResult(
        entry=entry,
        owned=tuple(owned),
        missing=max(0, entry.qty - allocated),
        bling=tuple(find_bling(entry, cards, card_map)),
    )


def find_candidates(
    entry: DeckListEntry,
    inventory: Sequence[InventoryItem],
    card_map: dict[str, Card],
) -> list[InventoryItem]:
    """
    Inventory rows that can satisfy an entry.

    An explicit scryfall_id matches that identity only and skips name
    matching. Otherwise rows match on their card's name, narrowed by set when
    the entry names one.
    """
    if entry.scryfall_id:
        return [item for item in inventory if item.scryfall_id == entry.scryfall_id]

    candidates: list[InventoryItem] = []
    for item in inventory:
        card = card_map.get(item.scryfall_id)
        if card is None or card.name != entry.name:
            continue
        if entry.set and item.set != entry.set:
            continue
        candidates.append(item)

    return candidates


def allocate(
    needed: int,
    candidates: list[InventoryItem],
    sorted_collections: list[Collection],
) -> list[InventoryItem]:
    """
    Draw up to `needed` copies from candidates, collection by collection.

    Each returned row carries only the copies taken from it. Rows within a
    collection are used in their existing order.
    """
    owned: list[InventoryItem] = []

    for collection in sorted_collections:
        if needed <= 0:
            break

        for item in candidates:
            if needed <= 0:
                break
            if item.collection_id != collection.id:
                continue

            taken = min(item.copies, needed)
            if taken > 0:
                owned.append(item.with_copies(taken))
                needed -= taken

    return owned


def resolve_oracle_id(
    entry: DeckListEntry,
    cards: Sequence[Card],
    card_map: dict[str, Card],
) -> str | None:
    """
    Card identity for an entry.

    From the printing when the entry names one, else from the first card
    with the same name. Any printing of the name will do.
    """
    if entry.scryfall_id:
        card = card_map.get(entry.scryfall_id)
        return card.oracle_id if card else None

    for card in cards:
        if card.name == entry.name:
            return card.oracle_id

    return None


def find_bling(
    entry: DeckListEntry,
    cards: Sequence[Card],
    card_map: dict[str, Card],
) -> list[Card]:
    """
    Alternate printings of the entry's card.

    Every printing sharing the entry's oracle_id except the entry's own
    printing. Without an explicit printing nothing is excluded.
    """
    oracle_id = resolve_oracle_id(entry, cards, card_map)
    if not oracle_id:
        return []

    return [
        card
        for card in cards
        if card.oracle_id == oracle_id and card.scryfall_id != entry.scryfall_id
    ]

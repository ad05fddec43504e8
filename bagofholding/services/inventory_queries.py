"""
Read-only queries over an imported snapshot.

Card search (filtered, paged) and inventory listing per collection.
"""

from dataclasses import dataclass, field

from bagofholding.config import settings
from bagofholding.helvault.identifiers import normalize_binder_id
from bagofholding.models.card import Card
from bagofholding.models.inventory import InventoryItem
from bagofholding.models.snapshot import HelvaultSnapshot


@dataclass(frozen=True)
class CardFilters:
    """
    Card search filters. Empty filters match everything.

    Attributes:
        set: Set code, case-insensitive exact match
        name: Case-insensitive substring of the card name
        colors: Colour letters the card must all have
        types: Words the type line must all contain (case-insensitive)
    """

    set: str | None = None
    name: str | None = None
    colors: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)

    def matches(self, card: Card) -> bool:
        if self.set and card.set.lower() != self.set.lower():
            return False
        if self.name and self.name.lower() not in card.name.lower():
            return False
        if any(color.upper() not in card.colors for color in self.colors):
            return False
        type_line = card.type_line.lower()
        return all(card_type.lower() in type_line for card_type in self.types)


@dataclass
class CardPage:
    """One page of a card search."""

    cards: list[Card]
    total: int
    """Matches before paging."""


def query_cards(
    snapshot: HelvaultSnapshot,
    filters: CardFilters | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> CardPage:
    """
    Search the imported printings.

    Args:
        snapshot: Imported data
        filters: Optional filters
        limit: Page size (defaults to settings.default_query_limit)
        offset: Matches to skip

    Returns:
        CardPage with the requested slice and the total match count
    """
    if limit is None:
        limit = settings.default_query_limit
    offset = max(0, offset)
    limit = max(0, limit)

    matched = [card for card in snapshot.cards if filters is None or filters.matches(card)]

    return CardPage(cards=matched[offset : offset + limit], total=len(matched))


def query_inventory(
    snapshot: HelvaultSnapshot,
    collection_id: str | None = None,
) -> list[InventoryItem]:
    """
    Inventory rows, optionally limited to one collection.

    Raises:
        ValueError: If collection_id is not a valid encoded binder id
    """
    if collection_id is None:
        return list(snapshot.inventory)

    wanted = normalize_binder_id(collection_id)
    return [item for item in snapshot.inventory if item.collection_id == wanted]

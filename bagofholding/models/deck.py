from dataclasses import dataclass

from bagofholding.models.card import Card
from bagofholding.models.inventory import InventoryItem


@dataclass(frozen=True, slots=True)
class DeckListEntry:
    """
    A parsed decklist line.

    Attributes:
        name: Requested card name
        qty: Number of copies requested (always positive)
        set: Set code restricting the match, if given
        collector_number: Collector number, if given
        scryfall_id: Exact printing; bypasses name matching when present
    """

    name: str
    qty: int
    set: str | None = None
    collector_number: str | None = None
    scryfall_id: str | None = None


@dataclass(frozen=True, slots=True)
class MatchResult:
    """
    Resolution of one decklist entry against the inventory.

    INVARIANT: sum(item.copies for item in owned) + missing == entry.qty
    """

    entry: DeckListEntry
    owned: tuple[InventoryItem, ...]
    missing: int
    bling: tuple[Card, ...]

    @property
    def owned_count(self) -> int:
        """Copies allocated across all collections."""
        return sum(item.copies for item in self.owned)

    @property
    def is_complete(self) -> bool:
        """True if every requested copy is owned."""
        return self.missing == 0

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class InventoryItem:
    """
    One copy row: a printing in one finish, held in one collection.

    scryfall_id falls back to the card's oracle_id when the source row has
    no printing identity, so consumers must accept either value here.
    """

    scryfall_id: str
    set: str
    collector_number: str
    lang: str
    finishes: tuple[str, ...]
    collection_id: str
    copies: int

    def with_copies(self, copies: int) -> "InventoryItem":
        """Same row carrying a different copy count."""
        return replace(self, copies=copies)


@dataclass(frozen=True, slots=True)
class InventoryAggregate:
    """
    Copy rows grouped by printing, finish and collection name.

    Keyed on the collection's display name rather than its id, so two
    binders sharing a name are merged here.
    """

    scryfall_id: str
    set: str
    collector_number: str
    lang: str
    finishes: tuple[str, ...]
    collection: str
    copies: int

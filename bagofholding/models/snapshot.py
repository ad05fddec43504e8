"""
Normalized Helvault data set.

A snapshot is produced once per import and only ever read afterwards.
"""

from dataclasses import dataclass

from pydantic import BaseModel, Field

from bagofholding.models.card import Card
from bagofholding.models.collection import Collection
from bagofholding.models.inventory import InventoryAggregate, InventoryItem


class ImportSummary(BaseModel):
    """Shape returned to callers once an export has been imported."""

    inventory_rows: list[InventoryItem] = Field(default_factory=list)
    aggregates: list[InventoryAggregate] = Field(default_factory=list)
    collections: int = Field(default=0, description="Number of collections imported")
    cards: int = Field(default=0, description="Number of card printings imported")


@dataclass(frozen=True, slots=True)
class HelvaultSnapshot:
    """Everything one import produced."""

    collections: tuple[Collection, ...]
    cards: tuple[Card, ...]
    inventory: tuple[InventoryItem, ...]
    aggregates: tuple[InventoryAggregate, ...]
    skipped_rows: int = 0

    @property
    def collection_count(self) -> int:
        return len(self.collections)

    @property
    def card_count(self) -> int:
        return len(self.cards)

    def summary(self) -> ImportSummary:
        return ImportSummary(
            inventory_rows=list(self.inventory),
            aggregates=list(self.aggregates),
            collections=self.collection_count,
            cards=self.card_count,
        )

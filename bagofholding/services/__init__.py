"""
Bag of Holding services.

Import of Helvault exports and queries over the imported data.
"""

from bagofholding.services.helvault_importer import (
    import_helvault,
    load_aggregates,
    load_cards,
    load_collections,
    load_helvault,
    load_inventory,
)
from bagofholding.services.inventory_queries import (
    CardFilters,
    CardPage,
    query_cards,
    query_inventory,
)

__all__ = [
    "CardFilters",
    "CardPage",
    "import_helvault",
    "load_aggregates",
    "load_cards",
    "load_collections",
    "load_helvault",
    "load_inventory",
    "query_cards",
    "query_inventory",
]

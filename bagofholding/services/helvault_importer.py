"""
Helvault import and normalization.

Turns the relational Helvault export into one HelvaultSnapshot:

- Collections: one per binder, in allocation (priority) order
- Cards: one per printing row
- InventoryItems: one per copy row, joined to its card and binder
- InventoryAggregates: copy rows summed per printing, finish and binder name

INVARIANTS:
- Every collection id, including InventoryItem.collection_id, is produced by
  encode_binder_id
- A row with neither a printing identity nor a card identity is skipped with
  a warning, never raised
- Aggregates are a lossless regrouping of the inventory rows
"""

import logging
import re
from pathlib import Path

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import Session

from bagofholding.config import COLOR_ORDER, DEFAULT_FINISH
from bagofholding.helvault.database import open_helvault
from bagofholding.helvault.identifiers import encode_binder_id
from bagofholding.helvault.schema import PersistedBinderDB, PersistedCardDB, PersistedCopyDB
from bagofholding.models.card import Card
from bagofholding.models.collection import Collection
from bagofholding.models.inventory import InventoryAggregate, InventoryItem
from bagofholding.models.snapshot import HelvaultSnapshot

logger = logging.getLogger(__name__)

MANA_SYMBOL_PATTERN = re.compile(r"\{([^}]+)\}")

# Display order for finishes; unknown finishes sort after these
FINISH_RANK = {DEFAULT_FINISH: 0, "foil": 1, "etched": 2}


def _identity_expr() -> ColumnElement[str | None]:
    """Printing identity, falling back to card identity. Empty strings count as absent."""
    return func.coalesce(
        func.nullif(PersistedCardDB.scryfall_id, ""),
        func.nullif(PersistedCardDB.oracle_id, ""),
    )


def _finish_expr() -> ColumnElement[str]:
    return func.coalesce(func.nullif(PersistedCopyDB.finish, ""), DEFAULT_FINISH)


def resolve_identity(scryfall_id: str | None, oracle_id: str | None) -> str | None:
    """
    Identity used for a row: the printing id, else the card id.

    Returns None when the row carries neither.
    """
    return scryfall_id or oracle_id or None


def collection_id_for(binder_id: bytes | None, pk: int) -> str:
    """
    Collection id for a binder.

    Binders without a stored identifier are keyed on their primary key so
    two of them never share an id.
    """
    if binder_id:
        return encode_binder_id(binder_id)
    return encode_binder_id(str(pk))


def colors_from_mana_cost(mana_cost: str | None) -> tuple[str, ...]:
    """
    Colour letters present in a mana cost, in WUBRG order.

    Hybrid and Phyrexian symbols ("{W/U}", "{G/P}") count every colour they
    name.
    """
    if not mana_cost:
        return ()

    seen: set[str] = set()
    for symbol in MANA_SYMBOL_PATTERN.findall(mana_cost):
        seen.update(part for part in symbol.upper().split("/") if part in COLOR_ORDER)

    return tuple(color for color in COLOR_ORDER if color in seen)


def _sorted_finishes(finishes: set[str]) -> tuple[str, ...]:
    return tuple(sorted(finishes, key=lambda f: (FINISH_RANK.get(f, len(FINISH_RANK)), f)))


def load_collections(session: Session) -> list[Collection]:
    """One Collection per binder, ascending priority, ties in primary-key order."""
    stmt = select(PersistedBinderDB).order_by(
        func.coalesce(PersistedBinderDB.priority, 0),
        PersistedBinderDB.pk,
    )

    return [
        Collection(
            id=collection_id_for(binder.binder_id, binder.pk),
            name=binder.name or "",
            priority=binder.priority or 0,
        )
        for binder in session.scalars(stmt)
    ]


def load_cards(session: Session) -> list[Card]:
    """
    One Card per printing row.

    Finishes are the distinct finishes the printing is held in; a printing
    with no finish recorded is treated as nonfoil.
    """
    finish_stmt = select(PersistedCopyDB.card_pk, PersistedCopyDB.finish).distinct()
    finishes_by_card: dict[int, set[str]] = {}
    for card_pk, finish in session.execute(finish_stmt):
        if finish:
            finishes_by_card.setdefault(card_pk, set()).add(finish)

    cards: list[Card] = []
    for row in session.scalars(select(PersistedCardDB).order_by(PersistedCardDB.pk)):
        identity = resolve_identity(row.scryfall_id, row.oracle_id)
        if identity is None:
            logger.warning(
                "helvault_card_skipped",
                extra={"card_pk": row.pk, "reason": "no scryfall_id or oracle_id"},
            )
            continue

        cards.append(
            Card(
                scryfall_id=identity,
                oracle_id=row.oracle_id or "",
                name=row.name or "",
                set=row.set_code or "",
                collector_number=row.collector_number or "",
                lang=row.lang or "",
                finishes=_sorted_finishes(finishes_by_card.get(row.pk) or {DEFAULT_FINISH}),
                rarity=row.rarity or "",
                mana_cost=row.mana_cost or None,
                cmc=row.cmc or 0,
                colors=colors_from_mana_cost(row.mana_cost),
                type_line=row.type_line or "",
            )
        )

    return cards


def load_inventory(session: Session) -> tuple[list[InventoryItem], int]:
    """
    One InventoryItem per copy row.

    Returns:
        (items, skipped) where skipped counts rows dropped for carrying no
        identity at all
    """
    stmt = (
        select(
            PersistedCardDB.scryfall_id,
            PersistedCardDB.oracle_id,
            PersistedCardDB.set_code,
            PersistedCardDB.collector_number,
            PersistedCardDB.lang,
            PersistedCopyDB.finish,
            PersistedBinderDB.binder_id,
            PersistedBinderDB.pk,
            PersistedCopyDB.copies,
        )
        .join(PersistedCardDB, PersistedCopyDB.card_pk == PersistedCardDB.pk)
        .join(PersistedBinderDB, PersistedCopyDB.binder_pk == PersistedBinderDB.pk)
        .where(PersistedCopyDB.copies > 0)
        .order_by(PersistedCopyDB.pk)
    )

    items: list[InventoryItem] = []
    skipped = 0

    for row in session.execute(stmt):
        identity = resolve_identity(row.scryfall_id, row.oracle_id)
        if identity is None:
            logger.warning(
                "helvault_row_skipped",
                extra={"reason": "no scryfall_id or oracle_id"},
            )
            skipped += 1
            continue

        items.append(
            InventoryItem(
                scryfall_id=identity,
                set=row.set_code or "",
                collector_number=row.collector_number or "",
                lang=row.lang or "",
                finishes=(row.finish or DEFAULT_FINISH,),
                collection_id=collection_id_for(row.binder_id, row.pk),
                copies=row.copies,
            )
        )

    return items, skipped


def load_aggregates(session: Session) -> list[InventoryAggregate]:
    """
    Copy rows summed per (identity, set, collector number, lang, finish,
    binder name).

    Grouping is on the binder's display name, so binders that share a name
    are merged here even though their inventory rows keep distinct ids.
    """
    identity = _identity_expr().label("identity")
    finish = _finish_expr().label("finish")

    stmt = (
        select(
            identity,
            PersistedCardDB.set_code,
            PersistedCardDB.collector_number,
            PersistedCardDB.lang,
            finish,
            PersistedBinderDB.name,
            func.sum(PersistedCopyDB.copies).label("total_copies"),
        )
        .join(PersistedCardDB, PersistedCopyDB.card_pk == PersistedCardDB.pk)
        .join(PersistedBinderDB, PersistedCopyDB.binder_pk == PersistedBinderDB.pk)
        .where(PersistedCopyDB.copies > 0)
        .group_by(
            identity,
            PersistedCardDB.set_code,
            PersistedCardDB.collector_number,
            PersistedCardDB.lang,
            finish,
            PersistedBinderDB.name,
        )
        .order_by(
            PersistedBinderDB.name,
            identity,
            PersistedCardDB.set_code,
            PersistedCardDB.collector_number,
            PersistedCardDB.lang,
            finish,
        )
    )

    aggregates: list[InventoryAggregate] = []
    for row in session.execute(stmt):
        if row.identity is None:
            logger.warning(
                "helvault_aggregate_skipped",
                extra={
                    "set": row.set_code,
                    "collector_number": row.collector_number,
                    "collection": row.name,
                    "reason": "no scryfall_id or oracle_id",
                },
            )
            continue

        aggregates.append(
            InventoryAggregate(
                scryfall_id=row.identity,
                set=row.set_code or "",
                collector_number=row.collector_number or "",
                lang=row.lang or "",
                finishes=(row.finish,),
                collection=row.name or "",
                copies=int(row.total_copies),
            )
        )

    return aggregates


def import_helvault(session: Session) -> HelvaultSnapshot:
    """
    Normalize an open Helvault export into a snapshot.

    Args:
        session: Session over the export (see open_helvault)

    Returns:
        Complete HelvaultSnapshot. Row-level defects are logged and skipped.
    """
    collections = load_collections(session)
    cards = load_cards(session)
    inventory, skipped = load_inventory(session)
    aggregates = load_aggregates(session)

    logger.info(
        "helvault_imported",
        extra={
            "collections": len(collections),
            "cards": len(cards),
            "inventory_rows": len(inventory),
            "aggregates": len(aggregates),
            "skipped_rows": skipped,
        },
    )

    return HelvaultSnapshot(
        collections=tuple(collections),
        cards=tuple(cards),
        inventory=tuple(inventory),
        aggregates=tuple(aggregates),
        skipped_rows=skipped,
    )


def load_helvault(source: bytes | Path | str) -> HelvaultSnapshot:
    """
    Open and import an export in one step.

    Raises:
        HelvaultFormatError: If the data is not a Helvault export
    """
    with open_helvault(source) as session:
        return import_helvault(session)

"""
Build a sample Helvault export.

Writes a small .helvault SQLite database with the same Core Data tables a
real export has. Used by the tests and for trying the API locally.
"""

import argparse
import logging
from collections.abc import Iterable
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from bagofholding.helvault.schema import (
    Base,
    PersistedBinderDB,
    PersistedCardDB,
    PersistedCopyDB,
)

logger = logging.getLogger(__name__)


def write_helvault(path: Path, rows: Iterable[Base]) -> Path:
    """
    Write an export containing the given rows.

    Args:
        path: Destination file (replaced if it exists)
        rows: Binder, card and copy rows to store

    Returns:
        The written path
    """
    path.unlink(missing_ok=True)

    engine = create_engine(f"sqlite:///{path}")
    try:
        Base.metadata.create_all(engine)
        with Session(engine) as session:
            session.add_all(list(rows))
            session.commit()
    finally:
        engine.dispose()

    return path


def sample_rows() -> list[Base]:
    """
    Sample data: two binders, a reprinted card, and the identity edge cases.

    - "Main Collection" (priority 1) and "Foils" (priority 2)
    - Lightning Bolt printed in LEA and M11 (same oracle id)
    - Counterspell with no printing identity (oracle id only)
    - One card row with no identity at all
    """
    return [
        PersistedBinderDB(pk=1, binder_id=b"collection-1", name="Main Collection", priority=1),
        PersistedBinderDB(pk=2, binder_id=b"collection-2", name="Foils", priority=2),
        PersistedCardDB(
            pk=1,
            scryfall_id="scryfall-lightning-bolt",
            oracle_id="oracle-lightning-bolt",
            name="Lightning Bolt",
            set_code="lea",
            collector_number="161",
            lang="en",
            rarity="common",
            mana_cost="{R}",
            cmc=1,
            type_line="Instant",
        ),
        PersistedCardDB(
            pk=2,
            scryfall_id="scryfall-black-lotus",
            oracle_id="oracle-black-lotus",
            name="Black Lotus",
            set_code="lea",
            collector_number="232",
            lang="en",
            rarity="rare",
            mana_cost="{0}",
            cmc=0,
            type_line="Artifact",
        ),
        PersistedCardDB(
            pk=3,
            scryfall_id="scryfall-lightning-bolt-m11",
            oracle_id="oracle-lightning-bolt",
            name="Lightning Bolt",
            set_code="m11",
            collector_number="149",
            lang="en",
            rarity="common",
            mana_cost="{R}",
            cmc=1,
            type_line="Instant",
        ),
        PersistedCardDB(
            pk=4,
            scryfall_id=None,
            oracle_id="oracle-counterspell",
            name="Counterspell",
            set_code="lea",
            collector_number="54",
            lang="en",
            rarity="uncommon",
            mana_cost="{U}{U}",
            cmc=2,
            type_line="Instant",
        ),
        PersistedCardDB(
            pk=5,
            scryfall_id=None,
            oracle_id=None,
            name="Mystery Card",
            set_code="unk",
            collector_number="1",
            lang="en",
            rarity="common",
        ),
        PersistedCopyDB(pk=1, card_pk=1, binder_pk=1, finish="nonfoil", copies=4),
        PersistedCopyDB(pk=2, card_pk=2, binder_pk=1, finish="nonfoil", copies=1),
        PersistedCopyDB(pk=3, card_pk=1, binder_pk=2, finish="foil", copies=2),
        PersistedCopyDB(pk=4, card_pk=3, binder_pk=2, finish="nonfoil", copies=3),
        PersistedCopyDB(pk=5, card_pk=4, binder_pk=1, finish="nonfoil", copies=2),
        PersistedCopyDB(pk=6, card_pk=5, binder_pk=1, finish="nonfoil", copies=1),
    ]


def build_fixture(path: Path) -> Path:
    """Write the sample export to `path`."""
    return write_helvault(path, sample_rows())


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Write a sample .helvault export")
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=Path("test.helvault"),
        help="Destination file (default: test.helvault)",
    )
    args = parser.parse_args()

    path = build_fixture(args.output)
    logger.info("Created fixture database at %s (%d bytes)", path, path.stat().st_size)


if __name__ == "__main__":
    main()

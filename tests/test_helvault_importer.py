import logging
import sqlite3
from collections import Counter
from pathlib import Path

import pytest

from bagofholding.helvault.database import open_helvault
from bagofholding.helvault.identifiers import encode_binder_id
from bagofholding.helvault.schema import PersistedBinderDB, PersistedCardDB, PersistedCopyDB
from bagofholding.jobs.create_fixture import write_helvault
from bagofholding.models.failure import FailureKind, HelvaultFormatError
from bagofholding.models.snapshot import HelvaultSnapshot
from bagofholding.services.helvault_importer import (
    colors_from_mana_cost,
    import_helvault,
    load_aggregates,
    load_helvault,
)


def _card(pk: int, scryfall_id: str | None, oracle_id: str | None, name: str, **kwargs):
    fields = {
        "set_code": "lea",
        "collector_number": str(pk),
        "lang": "en",
        "rarity": "common",
    }
    fields.update(kwargs)
    return PersistedCardDB(
        pk=pk, scryfall_id=scryfall_id, oracle_id=oracle_id, name=name, **fields
    )


class TestCollections:
    def test_one_collection_per_binder(self, sample_snapshot: HelvaultSnapshot) -> None:
        assert sample_snapshot.collection_count == 2
        assert [c.name for c in sample_snapshot.collections] == ["Main Collection", "Foils"]

    def test_ids_are_encoded_binder_ids(self, sample_snapshot: HelvaultSnapshot) -> None:
        assert sample_snapshot.collections[0].id == encode_binder_id(b"collection-1")
        assert sample_snapshot.collections[1].id == encode_binder_id(b"collection-2")

    def test_ordered_by_priority(self, tmp_path: Path) -> None:
        path = write_helvault(
            tmp_path / "binders.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=b"low", name="Trade Binder", priority=5),
                PersistedBinderDB(pk=2, binder_id=b"high", name="Deck Box", priority=1),
                PersistedBinderDB(pk=3, binder_id=b"mid", name="Bulk", priority=3),
            ],
        )

        snapshot = load_helvault(path)

        assert [c.name for c in snapshot.collections] == ["Deck Box", "Bulk", "Trade Binder"]
        assert [c.priority for c in snapshot.collections] == [1, 3, 5]

    def test_binder_without_identifier_gets_distinct_id(self, tmp_path: Path) -> None:
        path = write_helvault(
            tmp_path / "noid.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=None, name="A", priority=1),
                PersistedBinderDB(pk=2, binder_id=None, name="B", priority=2),
            ],
        )

        snapshot = load_helvault(path)

        ids = [c.id for c in snapshot.collections]
        assert len(set(ids)) == 2


class TestCards:
    def test_one_card_per_printing(self, sample_snapshot: HelvaultSnapshot) -> None:
        # Five card rows, one of which has no identity at all
        assert sample_snapshot.card_count == 4

    def test_field_mapping(self, sample_snapshot: HelvaultSnapshot) -> None:
        bolt = next(c for c in sample_snapshot.cards if c.scryfall_id == "scryfall-lightning-bolt")

        assert bolt.oracle_id == "oracle-lightning-bolt"
        assert bolt.name == "Lightning Bolt"
        assert bolt.set == "lea"
        assert bolt.collector_number == "161"
        assert bolt.lang == "en"
        assert bolt.rarity == "common"
        assert bolt.mana_cost == "{R}"
        assert bolt.cmc == 1
        assert bolt.colors == ("R",)
        assert bolt.type_line == "Instant"

    def test_finishes_collected_from_copies(self, sample_snapshot: HelvaultSnapshot) -> None:
        bolt = next(c for c in sample_snapshot.cards if c.scryfall_id == "scryfall-lightning-bolt")
        assert bolt.finishes == ("nonfoil", "foil")

    def test_null_finish_defaults_to_nonfoil(self, tmp_path: Path) -> None:
        path = write_helvault(
            tmp_path / "finish.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=b"b1", name="Main", priority=1),
                _card(1, "s-1", "o-1", "Opt"),
                _card(2, "s-2", "o-2", "Shock"),
                PersistedCopyDB(pk=1, card_pk=1, binder_pk=1, finish=None, copies=1),
            ],
        )

        snapshot = load_helvault(path)

        assert [card.finishes for card in snapshot.cards] == [("nonfoil",), ("nonfoil",)]
        assert snapshot.inventory[0].finishes == ("nonfoil",)

    def test_card_without_printing_identity_uses_oracle_id(
        self, sample_snapshot: HelvaultSnapshot
    ) -> None:
        counterspell = next(c for c in sample_snapshot.cards if c.name == "Counterspell")
        assert counterspell.scryfall_id == "oracle-counterspell"


class TestInventoryRows:
    def test_one_row_per_copy(self, sample_snapshot: HelvaultSnapshot) -> None:
        # Six copy rows, one of which references a card with no identity
        assert len(sample_snapshot.inventory) == 5
        assert sample_snapshot.skipped_rows == 1

    def test_collection_id_matches_collection(self, sample_snapshot: HelvaultSnapshot) -> None:
        collection_ids = {c.id for c in sample_snapshot.collections}
        assert {item.collection_id for item in sample_snapshot.inventory} <= collection_ids

    def test_row_fields(self, sample_snapshot: HelvaultSnapshot) -> None:
        foil_bolt = next(item for item in sample_snapshot.inventory if item.finishes == ("foil",))

        assert foil_bolt.scryfall_id == "scryfall-lightning-bolt"
        assert foil_bolt.set == "lea"
        assert foil_bolt.collector_number == "161"
        assert foil_bolt.lang == "en"
        assert foil_bolt.collection_id == encode_binder_id(b"collection-2")
        assert foil_bolt.copies == 2

    def test_identity_fallback(self, tmp_path: Path) -> None:
        path = write_helvault(
            tmp_path / "fallback.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=b"b1", name="Main", priority=1),
                _card(1, None, "oracle-X", "Opt"),
                PersistedCopyDB(pk=1, card_pk=1, binder_pk=1, finish="nonfoil", copies=3),
            ],
        )

        snapshot = load_helvault(path)

        assert snapshot.inventory[0].scryfall_id == "oracle-X"
        assert snapshot.aggregates[0].scryfall_id == "oracle-X"

    def test_empty_string_identity_falls_back(self, tmp_path: Path) -> None:
        path = write_helvault(
            tmp_path / "empty.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=b"b1", name="Main", priority=1),
                _card(1, "", "oracle-Y", "Opt"),
                PersistedCopyDB(pk=1, card_pk=1, binder_pk=1, finish="nonfoil", copies=1),
            ],
        )

        snapshot = load_helvault(path)

        assert snapshot.inventory[0].scryfall_id == "oracle-Y"

    def test_rows_without_identity_are_skipped(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = write_helvault(
            tmp_path / "noid.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=b"b1", name="Main", priority=1),
                _card(1, None, None, "Nameless"),
                _card(2, "s-2", "o-2", "Shock"),
                PersistedCopyDB(pk=1, card_pk=1, binder_pk=1, finish="nonfoil", copies=5),
                PersistedCopyDB(pk=2, card_pk=2, binder_pk=1, finish="nonfoil", copies=1),
            ],
        )

        snapshot = load_helvault(path)

        assert [item.scryfall_id for item in snapshot.inventory] == ["s-2"]
        assert [agg.scryfall_id for agg in snapshot.aggregates] == ["s-2"]
        assert snapshot.skipped_rows == 1
        assert "helvault_row_skipped" in caplog.text

    def test_rows_without_copies_are_dropped(self, tmp_path: Path) -> None:
        path = write_helvault(
            tmp_path / "zero.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=b"b1", name="Main", priority=1),
                _card(1, "s-1", "o-1", "Opt"),
                PersistedCopyDB(pk=1, card_pk=1, binder_pk=1, finish="nonfoil", copies=0),
            ],
        )

        snapshot = load_helvault(path)

        assert snapshot.inventory == ()
        assert snapshot.aggregates == ()


class TestAggregates:
    def test_sums_rows_with_same_key(self, tmp_path: Path) -> None:
        path = write_helvault(
            tmp_path / "sum.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=b"b1", name="Main", priority=1),
                _card(1, "s-1", "o-1", "Opt"),
                PersistedCopyDB(pk=1, card_pk=1, binder_pk=1, finish="nonfoil", copies=2),
                PersistedCopyDB(pk=2, card_pk=1, binder_pk=1, finish="nonfoil", copies=3),
                PersistedCopyDB(pk=3, card_pk=1, binder_pk=1, finish="foil", copies=1),
            ],
        )

        snapshot = load_helvault(path)

        assert len(snapshot.inventory) == 3
        totals = {agg.finishes: agg.copies for agg in snapshot.aggregates}
        assert totals == {("nonfoil",): 5, ("foil",): 1}
        assert all(agg.collection == "Main" for agg in snapshot.aggregates)

    def test_lossless_regrouping(self, sample_snapshot: HelvaultSnapshot) -> None:
        names = {c.id: c.name for c in sample_snapshot.collections}

        raw: Counter[tuple[object, ...]] = Counter()
        for item in sample_snapshot.inventory:
            key = (
                item.scryfall_id,
                item.set,
                item.collector_number,
                item.lang,
                item.finishes,
                names[item.collection_id],
            )
            raw[key] += item.copies

        aggregated: Counter[tuple[object, ...]] = Counter()
        for agg in sample_snapshot.aggregates:
            key = (
                agg.scryfall_id,
                agg.set,
                agg.collector_number,
                agg.lang,
                agg.finishes,
                agg.collection,
            )
            aggregated[key] += agg.copies

        assert raw == aggregated

    def test_aggregation_skips_and_reports_rows_without_identity(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = write_helvault(
            tmp_path / "noid.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=b"b1", name="Main", priority=1),
                _card(1, None, None, "Nameless"),
                PersistedCopyDB(pk=1, card_pk=1, binder_pk=1, finish="nonfoil", copies=2),
            ],
        )

        with caplog.at_level(logging.WARNING), open_helvault(path) as session:
            aggregates = load_aggregates(session)

        assert aggregates == []
        messages = [
            r.getMessage()
            for r in caplog.records
            if r.name == "bagofholding.services.helvault_importer"
        ]
        assert messages == ["helvault_aggregate_skipped"]

    def test_binders_sharing_a_name_merge(self, tmp_path: Path) -> None:
        """Aggregates group on binder name, raw rows keep the binder id."""
        path = write_helvault(
            tmp_path / "samename.helvault",
            [
                PersistedBinderDB(pk=1, binder_id=b"b1", name="Binder", priority=1),
                PersistedBinderDB(pk=2, binder_id=b"b2", name="Binder", priority=2),
                _card(1, "s-1", "o-1", "Opt"),
                PersistedCopyDB(pk=1, card_pk=1, binder_pk=1, finish="nonfoil", copies=2),
                PersistedCopyDB(pk=2, card_pk=1, binder_pk=2, finish="nonfoil", copies=3),
            ],
        )

        snapshot = load_helvault(path)

        assert len({item.collection_id for item in snapshot.inventory}) == 2
        assert len(snapshot.aggregates) == 1
        assert snapshot.aggregates[0].copies == 5


class TestSummary:
    def test_summary_shape(self, sample_snapshot: HelvaultSnapshot) -> None:
        summary = sample_snapshot.summary()

        assert summary.collections == 2
        assert summary.cards == 4
        assert len(summary.inventory_rows) == 5
        assert sum(a.copies for a in summary.aggregates) == sum(
            i.copies for i in summary.inventory_rows
        )


class TestOpenHelvault:
    def test_opens_bytes(self, sample_export: Path) -> None:
        with open_helvault(sample_export.read_bytes()) as session:
            snapshot = import_helvault(session)

        assert snapshot.collection_count == 2

    def test_does_not_modify_source(self, sample_export: Path) -> None:
        before = sample_export.read_bytes()
        load_helvault(sample_export)
        assert sample_export.read_bytes() == before

    def test_rejects_non_sqlite_bytes(self) -> None:
        with pytest.raises(HelvaultFormatError) as exc_info:
            load_helvault(b"definitely not a sqlite database" * 10)

        assert exc_info.value.kind == FailureKind.INVALID_EXPORT

    def test_rejects_empty_bytes(self) -> None:
        with pytest.raises(HelvaultFormatError):
            load_helvault(b"")

    def test_rejects_database_without_helvault_tables(self, tmp_path: Path) -> None:
        path = write_helvault(tmp_path / "other.sqlite", [])
        conn = sqlite3.connect(path)
        conn.execute("DROP TABLE ZPERSISTEDCOPY")
        conn.commit()
        conn.close()

        with pytest.raises(HelvaultFormatError, match="Failed to load Helvault") as exc_info:
            load_helvault(path)

        assert "ZPERSISTEDCOPY" in (exc_info.value.detail or "")


class TestColorsFromManaCost:
    def test_single_color(self) -> None:
        assert colors_from_mana_cost("{1}{R}") == ("R",)

    def test_wubrg_order(self) -> None:
        assert colors_from_mana_cost("{G}{U}{W}") == ("W", "U", "G")

    def test_hybrid_and_phyrexian(self) -> None:
        assert colors_from_mana_cost("{W/U}{G/P}") == ("W", "U", "G")

    def test_colorless(self) -> None:
        assert colors_from_mana_cost("{0}") == ()
        assert colors_from_mana_cost(None) == ()

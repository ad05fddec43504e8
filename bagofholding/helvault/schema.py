"""
SQLAlchemy mapping of the Helvault export tables.

Helvault exports are Core Data SQLite stores, so table and column names use
the Z-prefixed Core Data naming. Only the columns the importer reads are
mapped.
"""

from sqlalchemy import Float, ForeignKey, Integer, LargeBinary, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for the Helvault tables."""

    pass


class PersistedBinderDB(Base):
    """
    A binder: a named, prioritized sub-collection.

    Maps to Collection.
    """

    __tablename__ = "ZPERSISTEDBINDER"

    pk: Mapped[int] = mapped_column("Z_PK", Integer, primary_key=True)
    binder_id: Mapped[bytes | None] = mapped_column("ZBINDERID", LargeBinary, nullable=True)
    name: Mapped[str | None] = mapped_column("ZNAME", String, nullable=True)
    priority: Mapped[int | None] = mapped_column("ZPRIORITY", Integer, nullable=True)

    copy_rows: Mapped[list["PersistedCopyDB"]] = relationship(back_populates="binder")

    def __repr__(self) -> str:
        return f"<PersistedBinderDB(pk={self.pk}, name={self.name})>"


class PersistedCardDB(Base):
    """One printing of a card."""

    __tablename__ = "ZPERSISTEDCARD"

    pk: Mapped[int] = mapped_column("Z_PK", Integer, primary_key=True)
    scryfall_id: Mapped[str | None] = mapped_column("ZSCRYFALLID", String, nullable=True)
    oracle_id: Mapped[str | None] = mapped_column("ZORACLEID", String, nullable=True)
    name: Mapped[str | None] = mapped_column("ZNAME", String, nullable=True)
    set_code: Mapped[str | None] = mapped_column("ZSET", String, nullable=True)
    collector_number: Mapped[str | None] = mapped_column("ZCOLLECTORNUMBER", String, nullable=True)
    lang: Mapped[str | None] = mapped_column("ZLANG", String, nullable=True)
    rarity: Mapped[str | None] = mapped_column("ZRARITY", String, nullable=True)
    mana_cost: Mapped[str | None] = mapped_column("ZMANACOST", String, nullable=True)
    cmc: Mapped[float | None] = mapped_column("ZCMC", Float, nullable=True)
    type_line: Mapped[str | None] = mapped_column("ZTYPELINE", String, nullable=True)

    copy_rows: Mapped[list["PersistedCopyDB"]] = relationship(back_populates="card")

    def __repr__(self) -> str:
        return f"<PersistedCardDB(pk={self.pk}, name={self.name}, set={self.set_code})>"


class PersistedCopyDB(Base):
    """
    Copies of one printing, in one finish, held in one binder.

    Many-to-one against both card and binder.
    """

    __tablename__ = "ZPERSISTEDCOPY"

    pk: Mapped[int] = mapped_column("Z_PK", Integer, primary_key=True)
    card_pk: Mapped[int] = mapped_column("ZCARD", Integer, ForeignKey("ZPERSISTEDCARD.Z_PK"))
    binder_pk: Mapped[int] = mapped_column("ZBINDER", Integer, ForeignKey("ZPERSISTEDBINDER.Z_PK"))
    finish: Mapped[str | None] = mapped_column("ZFINISH", String, nullable=True)
    copies: Mapped[int] = mapped_column("ZCOPIES", Integer, default=1)

    card: Mapped["PersistedCardDB"] = relationship(back_populates="copy_rows")
    binder: Mapped["PersistedBinderDB"] = relationship(back_populates="copy_rows")

    def __repr__(self) -> str:
        return f"<PersistedCopyDB(pk={self.pk}, card={self.card_pk}, copies={self.copies})>"


REQUIRED_TABLES = frozenset(
    {
        PersistedBinderDB.__tablename__,
        PersistedCardDB.__tablename__,
        PersistedCopyDB.__tablename__,
    }
)

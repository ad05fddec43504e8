"""
Helvault export access.

Opens an export (raw bytes or a file on disk) as a read-only SQLAlchemy
session. The export is loaded into an in-memory SQLite database, so the
source file is never written to.
"""

import logging
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import Engine, create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from bagofholding.config import settings
from bagofholding.helvault.schema import REQUIRED_TABLES
from bagofholding.models.failure import HelvaultFormatError

logger = logging.getLogger(__name__)


def create_export_engine(data: bytes) -> Engine:
    """
    Create an engine over an in-memory copy of the export.

    The single connection is shared (StaticPool) because every connection to
    ":memory:" would otherwise be a fresh, empty database.
    """

    def connect() -> sqlite3.Connection:
        conn = sqlite3.connect(":memory:", check_same_thread=False)
        conn.deserialize(data)
        return conn

    return create_engine(
        "sqlite://",
        creator=connect,
        poolclass=StaticPool,
        echo=settings.debug,
    )


def _check_tables(engine: Engine) -> None:
    try:
        tables = set(inspect(engine).get_table_names())
    except (SQLAlchemyError, sqlite3.Error) as e:
        raise HelvaultFormatError(f"Not a SQLite database: {e}") from e

    missing = REQUIRED_TABLES - tables
    if missing:
        raise HelvaultFormatError(f"Missing tables: {', '.join(sorted(missing))}")


@contextmanager
def open_helvault(source: bytes | Path | str) -> Generator[Session, None, None]:
    """
    Open a Helvault export as a session.

    Usage:
        with open_helvault(path) as session:
            snapshot = import_helvault(session)

    Args:
        source: Export bytes, or a path to a .helvault file

    Raises:
        HelvaultFormatError: If the data is not a Helvault export
    """
    data = source if isinstance(source, bytes) else Path(source).read_bytes()
    if not data:
        raise HelvaultFormatError("Export is empty")
    logger.debug("Opening Helvault export (%d bytes)", len(data))

    try:
        engine = create_export_engine(data)
    except (SQLAlchemyError, sqlite3.Error) as e:
        raise HelvaultFormatError(f"Not a SQLite database: {e}") from e

    try:
        _check_tables(engine)
        with Session(engine) as session:
            yield session
    finally:
        engine.dispose()

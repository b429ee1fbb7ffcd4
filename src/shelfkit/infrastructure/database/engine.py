"""Database engine setup for SQLite with WAL mode.

The DB is stored at {root}/shelfkit.db and holds a single key-value
``blobs`` table. SQLAlchemy Core (not ORM) is used because the store
only ever reads or overwrites whole values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from shelfkit.infrastructure.database.schema import metadata

DB_FILENAME = "shelfkit.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(root: Path) -> Engine:
    """Initialize the database at ``{root}/shelfkit.db``.

    Creates *root* and all tables from :data:`schema.metadata`.
    Idempotent — safe to call on an existing database.
    """
    root.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(root / DB_FILENAME)
    metadata.create_all(engine)
    return engine

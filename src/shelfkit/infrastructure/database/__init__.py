"""SQLite database engine and blob table via SQLAlchemy Core."""

from shelfkit.infrastructure.database.engine import create_db_engine, init_database
from shelfkit.infrastructure.database.schema import blobs, metadata

__all__ = [
    "blobs",
    "create_db_engine",
    "init_database",
    "metadata",
]

"""Key-value blob stores.

The catalog persists one JSON string under one key. Anything with
``get(key)`` and ``set(key, value)`` satisfies :class:`BlobStore`:

- :class:`MemoryStore`: dict-backed, for tests and embedding.
- :class:`FileStore`: one ``<key>.json`` file per key under a directory.
- :class:`SqlStore`: a ``blobs`` table in SQLite via SQLAlchemy Core.

Every ``set`` is a full overwrite. An absent key reads as ``None``.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert

from shelfkit.infrastructure.database.engine import init_database
from shelfkit.infrastructure.database.schema import blobs

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "file", "sqlite")

_KEY_PATTERN = re.compile(r"^[\w.-]+$")


@runtime_checkable
class BlobStore(Protocol):
    """Minimal key-value contract used by the catalog service."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store. Contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FileStore:
    """Store each key as ``{root}/{key}.json``.

    Writes go to a temporary file in the same directory and are renamed
    into place, so a failed write never leaves a truncated file behind.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            msg = f"Invalid storage key: {key!r}"
            raise ValueError(msg)
        return self.root / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self.root.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, path)
        except OSError:
            logger.warning("Failed to write %s", path)
            Path(tmp_name).unlink(missing_ok=True)
            raise


class SqlStore:
    """Store keys as rows of the SQLite ``blobs`` table."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def get(self, key: str) -> str | None:
        with self.engine.connect() as conn:
            row = conn.execute(select(blobs.c.value).where(blobs.c.key == key)).first()
        return None if row is None else row.value

    def set(self, key: str, value: str) -> None:
        modified = datetime.now(UTC).isoformat()
        stmt = insert(blobs).values(key=key, value=value, modified=modified)
        stmt = stmt.on_conflict_do_update(
            index_elements=[blobs.c.key],
            set_={"value": stmt.excluded["value"], "modified": stmt.excluded["modified"]},
        )
        with self.engine.begin() as conn:
            conn.execute(stmt)

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self.engine.dispose()


def open_store(backend: str, root: Path) -> BlobStore:
    """Build the store for *backend* rooted at *root*.

    Raises:
        ValueError: If *backend* is not one of :data:`BACKENDS`.
    """
    if backend == "memory":
        return MemoryStore()
    if backend == "file":
        return FileStore(root)
    if backend == "sqlite":
        return SqlStore(init_database(root))
    msg = f"Unknown storage backend: {backend!r}. Expected one of {list(BACKENDS)}"
    raise ValueError(msg)

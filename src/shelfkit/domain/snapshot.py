"""Snapshot records — the persisted JSON form of the catalog.

The stored value is a JSON array of collections::

    [{"name": "Uncategorized",
      "items": [{"code": 1, "title": "Dune", "author": "Frank Herbert",
                 "year": 1965, "category": "Science"}]}]

Snapshots are always full: every write serializes the entire
collection/book graph.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from shelfkit.domain.catalog import Book, Collection


class SnapshotError(ValueError):
    """Stored catalog data could not be parsed."""


class BookRecord(BaseModel):
    """One book inside a stored collection."""

    code: int
    title: str | None = None
    author: str | None = None
    year: int | None = None
    category: str | None = None


class CollectionRecord(BaseModel):
    """One stored collection with its books in insertion order."""

    name: str
    items: list[BookRecord] = Field(default_factory=list)


_SNAPSHOT = TypeAdapter(list[CollectionRecord])


def dump_snapshot(collections: Iterable[Collection]) -> str:
    """Serialize *collections* and their books to a JSON string."""
    records = [
        CollectionRecord(
            name=c.name,
            items=[BookRecord.model_validate(b.model_dump()) for b in c.list_books()],
        )
        for c in collections
    ]
    return _SNAPSHOT.dump_json(records).decode("utf-8")


def load_snapshot(raw: str | None) -> list[Collection]:
    """Rebuild collections from a stored JSON string.

    ``None`` (absent key) and the empty string load as an empty catalog.

    Raises:
        SnapshotError: If *raw* is not a valid snapshot.
    """
    if not raw:
        return []
    try:
        records = _SNAPSHOT.validate_json(raw)
    except ValidationError as exc:
        msg = f"Invalid catalog snapshot: {exc.error_count()} error(s)"
        raise SnapshotError(msg) from exc
    return [
        Collection(r.name, [Book(**item.model_dump()) for item in r.items]) for r in records
    ]

"""Composite catalog structure — Library → Collection → Book.

Every node exposes the same capability set so callers can search or
mutate "everything" with a single polymorphic call:

- ``list_books()``: the books at or below this node.
- ``update(code, fields)``: replace writable fields on the matching book.
- ``delete(code)``: detach the matching book from its owner.

``update`` and ``delete`` return ``False`` when nothing matches. Not found
is a normal outcome, never an exception.

INVARIANT: A book's code never changes after construction.
INVARIANT: Removal is always the parent's job; a book never removes itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, Field

from shelfkit.domain.ids import CodeGenerator

# ---------------------------------------------------------------------------
# Capability set
# ---------------------------------------------------------------------------


class CatalogItem(ABC):
    """Abstract node of the catalog tree.

    Cannot be instantiated directly; concrete nodes are :class:`Book`,
    :class:`Collection`, and :class:`Library`.
    """

    @abstractmethod
    def list_books(self) -> list[Book]:
        """Books held at or below this node, in insertion order."""
        ...

    @abstractmethod
    def update(self, code: int, fields: Mapping[str, Any]) -> bool:
        """Apply *fields* to the book with *code*. True if one matched."""
        ...

    @abstractmethod
    def delete(self, code: int) -> bool:
        """Remove the book with *code*. True if one matched."""
        ...


# ---------------------------------------------------------------------------
# Leaf
# ---------------------------------------------------------------------------


class BookFields(BaseModel):
    """The writable part of a book record.

    Every field is optional at the model level; admission rules live in
    :mod:`shelfkit.domain.validation`, not here.
    """

    title: str | None = None
    author: str | None = None
    year: int | None = None
    category: str | None = None


class Book(BookFields, CatalogItem):
    """Leaf catalog record with a unique, immutable code."""

    WRITABLE: ClassVar[frozenset[str]] = frozenset(BookFields.model_fields)

    code: int = Field(frozen=True)

    def list_books(self) -> list[Book]:
        return [self]

    def update(self, code: int, fields: Mapping[str, Any]) -> bool:
        """Replace the provided writable fields if *code* matches.

        ``code`` and unknown keys in *fields* are ignored. The merged record
        is validated before anything is assigned, so a bad value leaves the
        book untouched (raises :class:`pydantic.ValidationError`).
        """
        if self.code != code:
            return False
        changes = {k: v for k, v in fields.items() if k in self.WRITABLE}
        merged = BookFields.model_validate({**self.fields(), **changes})
        for name in changes:
            setattr(self, name, getattr(merged, name))
        return True

    def delete(self, code: int) -> bool:
        return self.code == code

    def fields(self) -> dict[str, Any]:
        """The writable fields as a plain dict."""
        return self.model_dump(include=set(self.WRITABLE))


# ---------------------------------------------------------------------------
# Composites
# ---------------------------------------------------------------------------


class Collection(CatalogItem):
    """Named, ordered group of books."""

    def __init__(self, name: str, books: list[Book] | None = None) -> None:
        self.name = name
        self._books: list[Book] = list(books or [])

    def add(self, book: Book) -> None:
        """Append *book*, preserving insertion order."""
        self._books.append(book)

    def insert(self, index: int, book: Book) -> None:
        """Put *book* back at *index* (used to undo a delete)."""
        self._books.insert(index, book)

    def list_books(self) -> list[Book]:
        return list(self._books)

    def update(self, code: int, fields: Mapping[str, Any]) -> bool:
        return any(book.update(code, fields) for book in self._books)

    def delete(self, code: int) -> bool:
        for index, book in enumerate(self._books):
            if book.delete(code):
                del self._books[index]
                return True
        return False

    def find(self, code: int) -> Book | None:
        """First book with *code*, or None."""
        return next((b for b in self._books if b.code == code), None)

    def position(self, code: int) -> int | None:
        """Index of the first book with *code*, or None."""
        return next((i for i, b in enumerate(self._books) if b.code == code), None)

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self._books)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return self.name == other.name and self._books == other._books

    def __repr__(self) -> str:
        return f"Collection(name={self.name!r}, books={len(self._books)})"


class Library(CatalogItem):
    """Root container of all collections.

    Owns the single :class:`CodeGenerator` used to mint book codes.
    """

    def __init__(self, codes: CodeGenerator | None = None) -> None:
        self._items: list[Collection] = []
        self.codes = codes or CodeGenerator()

    @property
    def collections(self) -> tuple[Collection, ...]:
        """Registered collections, in registration order."""
        return tuple(self._items)

    def add(self, collection: Collection) -> None:
        """Register *collection* at the end of the library."""
        self._items.append(collection)

    def remove(self, collection: Collection) -> None:
        """Unregister *collection* (identity match)."""
        self._items = [c for c in self._items if c is not collection]

    def list_books(self) -> list[Book]:
        return [book for collection in self._items for book in collection.list_books()]

    def update(self, code: int, fields: Mapping[str, Any]) -> bool:
        return any(collection.update(code, fields) for collection in self._items)

    def delete(self, code: int) -> bool:
        return any(collection.delete(code) for collection in self._items)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_collection(self, name: str) -> Collection | None:
        """First collection named exactly *name*, or None."""
        return next((c for c in self._items if c.name == name), None)

    def find_book(self, code: int) -> Book | None:
        for collection in self._items:
            book = collection.find(code)
            if book is not None:
                return book
        return None

    def has_title(self, title: str | None) -> bool:
        """Whether any book carries exactly *title* (case-sensitive)."""
        return any(book.title == title for book in self.list_books())

    # ------------------------------------------------------------------
    # Codes
    # ------------------------------------------------------------------

    def next_code(self) -> int:
        return self.codes.next_code()

    def reseed_codes(self) -> None:
        """Restart the code counter above every code currently held."""
        self.codes.reseed(book.code for book in self.list_books())

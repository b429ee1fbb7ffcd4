"""CatalogService — the catalog controller.

Owns the single :class:`Library` and keeps it in sync with the blob store.

Creation pipeline: GUARD → VALIDATE → MINT → RESOLVE → INSERT → PERSIST → NOTIFY

Every mutating operation persists a full snapshot and reports its outcome
both as a :class:`ServiceResult` and through the notifier. If persisting
raises, the in-memory change is undone before the exception propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from shelfkit.config.logging import bind_catalog_context, configure_logging
from shelfkit.config.models import CatalogConfig
from shelfkit.domain.catalog import Book, BookFields, Collection, Library
from shelfkit.domain.snapshot import dump_snapshot, load_snapshot
from shelfkit.domain.validation import ValidationChain, build_default_chain
from shelfkit.infrastructure.storage import open_store
from shelfkit.services.base import ERROR, SUCCESS, BaseService, Notifier
from shelfkit.services.result import ServiceResult

if TYPE_CHECKING:
    from shelfkit.config.settings import ShelfSettings
    from shelfkit.infrastructure.storage import BlobStore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "library"


class CatalogService(BaseService):
    """Create, list, update, and delete books across collections.

    The constructor loads any previously stored catalog, so a new
    instance is immediately consistent with the store.
    """

    def __init__(
        self,
        store: BlobStore,
        notifier: Notifier | None = None,
        *,
        config: CatalogConfig | None = None,
        key: str = DEFAULT_KEY,
        current_year: Callable[[], int] | None = None,
    ) -> None:
        super().__init__(store, notifier)
        self._config = config or CatalogConfig()
        self._key = key
        self._chain: ValidationChain = build_default_chain(
            self._config.categories, current_year=current_year
        )
        self.library = Library()
        self._uncategorized = Collection(self._config.uncategorized)
        self.load()

    @classmethod
    def from_settings(
        cls, settings: ShelfSettings, notifier: Notifier | None = None
    ) -> CatalogService:
        """Open the configured store and return a loaded service.

        Also applies the logging settings and binds the catalog key and
        backend to every subsequent log record.
        """
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        bind_catalog_context(key=settings.storage.key, backend=settings.storage.backend)
        store = open_store(settings.storage.backend, settings.storage_root)
        return cls(store, notifier, config=settings.catalog, key=settings.storage.key)

    @property
    def uncategorized(self) -> Collection:
        """The collection that receives books created without a collection name."""
        return self._uncategorized

    @property
    def chain(self) -> ValidationChain:
        return self._chain

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_book(
        self,
        title: str | None,
        author: str | None,
        year: int | None,
        category: str | None,
        collection_name: str = "",
    ) -> ServiceResult:
        """Validate, code, and file a new book.

        An empty *collection_name* files the book under the uncategorized
        collection; an unknown name creates that collection.
        """
        op = "create_book"

        # ── GUARD ────────────────────────────────────────────────
        if self.library.has_title(title):
            return self._reject(
                op, "DUPLICATE_TITLE", f'A book titled "{title}" already exists!', title=title
            )

        # Legacy ordering: a validation rejection still consumes this code.
        code = self.library.next_code() if self._config.allocate_before_validation else None

        # ── VALIDATE ─────────────────────────────────────────────
        try:
            candidate = BookFields(title=title, author=author, year=year, category=category)
        except ValidationError as exc:
            field = str(exc.errors()[0]["loc"][0])
            return self._reject(op, "VALIDATION_FAILED", f"Invalid {field}!", rule=field)

        vr = self._chain.validate(candidate)
        if not vr.valid:
            return self._reject(op, "VALIDATION_FAILED", vr.errors[0], rule=vr.rule)

        # ── MINT ─────────────────────────────────────────────────
        if code is None:
            code = self.library.next_code()
        book = Book(code=code, **candidate.model_dump())

        # ── RESOLVE → INSERT → PERSIST ───────────────────────────
        collection, created = self._resolve_collection(collection_name)
        collection.add(book)

        def undo() -> None:
            collection.delete(book.code)
            if created:
                self.library.remove(collection)

        self._commit(undo)

        logger.info("Created book %d in %r", book.code, collection.name)
        self._notify(f'Book "{book.title}" added to "{collection.name}"', SUCCESS)
        return ServiceResult(
            ok=True, op=op, data={**book.model_dump(), "collection": collection.name}
        )

    def create_collection(self, name: str) -> ServiceResult:
        """Register an empty collection named *name*.

        Names must be non-blank and unique within the library.
        """
        op = "create_collection"
        if not name or not name.strip():
            return self._reject(op, "INVALID_NAME", "Collection name cannot be empty!")
        if self.library.find_collection(name) is not None:
            return self._reject(
                op, "DUPLICATE_COLLECTION", f'Collection "{name}" already exists!', name=name
            )

        collection = Collection(name)
        self._register(collection)
        self._commit(lambda: self.library.remove(collection))
        self._notify(f'Collection "{name}" created', SUCCESS)
        return ServiceResult(ok=True, op=op, data={"name": name})

    def list_books(self) -> list[Collection]:
        """All collections, each exposing its books, for read-only display."""
        return list(self.library.collections)

    def update_book(self, code: int, fields: Mapping[str, Any]) -> ServiceResult:
        """Overwrite writable fields on the book with *code*.

        The code itself is never changed, whatever *fields* contains.
        """
        op = "update_book"
        book = self.library.find_book(code)
        before = book.fields() if book is not None else {}
        try:
            updated = self.library.update(code, fields)
        except ValidationError as exc:
            field = str(exc.errors()[0]["loc"][0])
            return self._reject(
                op, "VALIDATION_FAILED", f"Invalid {field}!", rule=field, code=code
            )

        if not updated or book is None:
            return self._reject(op, "NOT_FOUND", "Book not found!", code=code)

        self._commit(lambda: book.update(code, before))
        logger.info("Updated book %d", code)
        self._notify("Book updated!", SUCCESS)
        return ServiceResult(ok=True, op=op, data=book.model_dump())

    def delete_book(self, code: int) -> ServiceResult:
        """Detach the book with *code* from its collection."""
        op = "delete_book"
        owner = next((c for c in self.library.collections if c.find(code) is not None), None)
        if owner is None:
            return self._reject(op, "NOT_FOUND", "Book not found!", code=code)

        position = owner.position(code)
        book = owner.find(code)
        owner.delete(code)
        self._commit(lambda: owner.insert(position, book))  # type: ignore[arg-type]
        logger.info("Deleted book %d", code)
        self._notify("Book deleted!", SUCCESS)
        return ServiceResult(ok=True, op=op, data={"code": code})

    def find_book(self, code: int) -> Book | None:
        return self.library.find_book(code)

    def find_collection(self, name: str) -> Collection | None:
        return self.library.find_collection(name)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Rebuild the library from the store.

        Ensures the uncategorized collection exists (reusing a stored one
        with the same name) and reseeds the code counter above the highest
        loaded code.

        Raises:
            SnapshotError: If the stored value is not a valid snapshot.
        """
        self.library = Library()
        for collection in load_snapshot(self._store.get(self._key)):
            self.library.add(collection)

        existing = self.library.find_collection(self._config.uncategorized)
        if existing is None:
            self._uncategorized = Collection(self._config.uncategorized)
            self._register(self._uncategorized)
            self.save()
        else:
            self._uncategorized = existing

        self.library.reseed_codes()
        logger.debug(
            "Loaded %d collection(s), next code %d",
            len(self.library.collections),
            self.library.codes.peek,
        )

    def save(self) -> None:
        """Write a full snapshot of every collection to the store."""
        raw = dump_snapshot(self.library.collections)
        try:
            self._store.set(self._key, raw)
        except Exception:
            logger.warning("Failed to persist catalog under %r", self._key, exc_info=True)
            raise

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _register(self, collection: Collection) -> None:
        self.library.add(collection)
        logger.debug("Registered collection %r", collection.name)

    def _resolve_collection(self, name: str) -> tuple[Collection, bool]:
        """The collection for *name* and whether it was created just now.

        Blank names (empty or whitespace only) resolve to the uncategorized
        collection.
        """
        if not name or not name.strip():
            return self._uncategorized, False
        collection = self.library.find_collection(name)
        if collection is not None:
            return collection, False
        collection = Collection(name)
        self._register(collection)
        return collection, True

    def _commit(self, undo: Callable[[], None]) -> None:
        """Persist, or run *undo* and re-raise if persisting fails.

        Keeps the in-memory catalog equal to the last stored snapshot.
        """
        try:
            self.save()
        except Exception:
            undo()
            raise

    def _reject(
        self, op: str, error_code: str, message: str, **detail: Any
    ) -> ServiceResult:
        logger.info("%s rejected: %s", op, error_code)
        self._notify(message, ERROR)
        return ServiceResult.fail(op, error_code, message, **detail)

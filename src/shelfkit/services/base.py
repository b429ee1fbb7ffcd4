"""BaseService — shared foundation for shelfkit services.

Every service receives a :class:`BlobStore` and an optional
:class:`Notifier` at construction time. The notifier is the only channel
for user-visible messages; it never influences control flow.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from shelfkit.infrastructure.storage import BlobStore

logger = logging.getLogger(__name__)

SUCCESS = "green"
ERROR = "red"


class Notifier(Protocol):
    """Sink for user-visible messages: ``(message, style_hint)``."""

    def __call__(self, message: str, style: str | None = None) -> None: ...


def silent(message: str, style: str | None = None) -> None:
    """Notifier that discards every message."""


class BaseService:
    """Base for service-layer classes.

    Usage::

        class CatalogService(BaseService):
            def create_book(self, title: str, ...) -> ServiceResult:
                ...
                self._notify(f'Book "{title}" added', SUCCESS)
    """

    def __init__(self, store: BlobStore, notifier: Notifier | None = None) -> None:
        self._store = store
        self._notifier: Notifier = notifier or silent

    @property
    def store(self) -> BlobStore:
        return self._store

    def _notify(self, message: str, style: str | None = None) -> None:
        """Send *message* to the notifier.

        INVARIANT: Notifier failures are logged, never raised.
        """
        try:
            self._notifier(message, style)
        except Exception:
            logger.debug("Notifier failed for %r", message, exc_info=True)

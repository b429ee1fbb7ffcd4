"""Shared pytest fixtures for shelfkit tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine

from shelfkit.infrastructure.database.engine import init_database
from shelfkit.infrastructure.storage import MemoryStore
from shelfkit.services.catalog import CatalogService

CURRENT_YEAR = 2025


class RecordingNotifier:
    """Notifier that keeps every ``(message, style)`` it receives."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str | None]] = []

    def __call__(self, message: str, style: str | None = None) -> None:
        self.messages.append((message, style))

    @property
    def last(self) -> str:
        return self.messages[-1][0]


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(store: MemoryStore, notifier: RecordingNotifier) -> CatalogService:
    """Loaded catalog service on an empty memory store, clock pinned to 2025."""
    return CatalogService(store, notifier, current_year=lambda: CURRENT_YEAR)

"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, shelfkit.toml only contains
overrides. An empty or missing file yields a working file-backed catalog.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from shelfkit.domain.types import DEFAULT_CATEGORIES, UNCATEGORIZED


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    backend: Literal["memory", "file", "sqlite"] = "file"
    path: str = ".shelfkit"
    key: str = "library"


class CatalogConfig(BaseModel):
    """[catalog] section."""

    model_config = {"frozen": True}

    uncategorized: str = UNCATEGORIZED
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    # Mint codes before validation (legacy behavior: rejections leave gaps).
    allocate_before_validation: bool = False


class ShelfConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    storage: StorageConfig = Field(default_factory=StorageConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)

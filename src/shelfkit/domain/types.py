"""Category enum and well-known collection names."""

from __future__ import annotations

from enum import StrEnum

UNCATEGORIZED = "Uncategorized"


class Category(StrEnum):
    """The closed set of book categories accepted by default."""

    FANTASY = "Fantasy"
    ROMANCE = "Romance"
    DYSTOPIA = "Dystopia"
    SCIENCE = "Science"
    HISTORY = "History"
    TECHNOLOGY = "Technology"


DEFAULT_CATEGORIES: tuple[str, ...] = tuple(c.value for c in Category)

"""Admission rules for new books.

A :class:`ValidationChain` is an immutable, ordered tuple of
:class:`Rule` objects. Rules run in order and the first failure stops
the chain, so only one reason is ever reported per rejection.

The default order is fixed: title, then year, then category. A book with
an empty title and an unknown category therefore always reports the
title error.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date

from shelfkit.domain.catalog import BookFields
from shelfkit.domain.types import DEFAULT_CATEGORIES

TITLE_INVALID = "Invalid title!"
YEAR_INVALID = "Invalid year! Books from the future cannot be registered."
CATEGORY_INVALID = "Invalid category! Use: {allowed}"


@dataclass(frozen=True)
class ValidationResult:
    """Result of running a chain over one candidate book."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    rule: str | None = None


@dataclass(frozen=True)
class Rule:
    """A named predicate paired with the reason reported when it fails."""

    name: str
    check: Callable[[BookFields], bool]
    message: str

    def __call__(self, book: BookFields) -> bool:
        return self.check(book)


@dataclass(frozen=True)
class ValidationChain:
    """Ordered rules evaluated with early exit on the first failure."""

    rules: tuple[Rule, ...] = ()

    def validate(self, book: BookFields) -> ValidationResult:
        for rule in self.rules:
            if not rule(book):
                return ValidationResult(valid=False, errors=[rule.message], rule=rule.name)
        return ValidationResult(valid=True)

    @property
    def names(self) -> list[str]:
        return [r.name for r in self.rules]


# ---------------------------------------------------------------------------
# Default rules
# ---------------------------------------------------------------------------


def _current_year() -> int:
    return date.today().year


def title_rule() -> Rule:
    return Rule(
        name="title",
        check=lambda book: bool(book.title and book.title.strip()),
        message=TITLE_INVALID,
    )


def year_rule(current_year: Callable[[], int] = _current_year) -> Rule:
    """Reject missing years and years after *current_year()*.

    The year is read at validation time, not when the rule is built.
    """
    return Rule(
        name="year",
        check=lambda book: bool(book.year) and book.year <= current_year(),
        message=YEAR_INVALID,
    )


def category_rule(categories: Iterable[str]) -> Rule:
    allowed = tuple(categories)
    return Rule(
        name="category",
        check=lambda book: book.category in allowed,
        message=CATEGORY_INVALID.format(allowed=", ".join(allowed)),
    )


def build_default_chain(
    categories: Iterable[str] = DEFAULT_CATEGORIES,
    *,
    current_year: Callable[[], int] | None = None,
) -> ValidationChain:
    """Build the title → year → category chain.

    Args:
        categories: The closed set of accepted category labels.
        current_year: Clock override for the year rule (tests pin it).
    """
    return ValidationChain(
        rules=(
            title_rule(),
            year_rule(current_year or _current_year),
            category_rule(categories),
        )
    )

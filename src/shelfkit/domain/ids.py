"""Book code generation.

Codes are plain integers issued by a monotonic counter starting at 1.

INVARIANT: Codes are permanent. Once assigned, a code never changes.
INVARIANT: The counter is always strictly greater than every code held
by the library, so restored state never produces colliding codes.
"""

from __future__ import annotations

from collections.abc import Iterable

FIRST_CODE = 1


class CodeGenerator:
    """Monotonic counter issuing unique book codes."""

    def __init__(self, start: int = FIRST_CODE) -> None:
        self._next = start

    @property
    def peek(self) -> int:
        """The code the next call to :meth:`next_code` will return."""
        return self._next

    def next_code(self) -> int:
        """Return the current counter value, then advance it."""
        code = self._next
        self._next += 1
        return code

    def reseed(self, codes: Iterable[int]) -> None:
        """Restart the counter above the highest code in *codes*.

        An empty iterable resets the counter to :data:`FIRST_CODE`.
        """
        self._next = max(codes, default=FIRST_CODE - 1) + 1

    def __repr__(self) -> str:
        return f"CodeGenerator(next={self._next})"

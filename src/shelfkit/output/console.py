"""Rich Console factory, theme, and notifier for shelfkit messages.

Creates Console instances that render to a StringIO buffer by default.
In non-TTY environments (tests, pipes) Rich automatically disables
color codes.
"""

from __future__ import annotations

from io import StringIO
from typing import TextIO

from rich.console import Console
from rich.theme import Theme

SHELF_THEME = Theme(
    {
        "shelf.ok": "bold green",
        "shelf.error": "bold red",
        "shelf.info": "cyan",
    }
)

# Style hints sent by services, mapped onto theme styles.
_HINT_STYLES: dict[str, str] = {
    "green": "shelf.ok",
    "red": "shelf.error",
}


def create_console(
    *, file: TextIO | None = None, no_color: bool = False, width: int | None = None
) -> Console:
    """Create a Console with the shelfkit theme.

    Args:
        file: Output stream; a fresh StringIO buffer when omitted.
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=file if file is not None else StringIO(),
        theme=SHELF_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console.

    Raises:
        TypeError: If the console writes somewhere other than a StringIO.
    """
    if not isinstance(console.file, StringIO):
        msg = f"Console output is not buffered: {type(console.file).__name__}"
        raise TypeError(msg)
    return console.file.getvalue()


def style_for_hint(hint: str | None) -> str:
    """Return the Rich style for a notifier style hint.

    No hint means an error message. Unknown hints are passed through
    as raw Rich styles.
    """
    if hint is None:
        return "shelf.error"
    return _HINT_STYLES.get(hint, hint)


class ConsoleNotifier:
    """Notifier that prints each message on a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or create_console()

    def __call__(self, message: str, style: str | None = None) -> None:
        self.console.print(message, style=style_for_hint(style), markup=False)

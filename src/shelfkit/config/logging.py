"""structlog setup for shelfkit log records.

The catalog modules log through plain ``logging.getLogger(__name__)``;
records are rendered by a structlog ``ProcessorFormatter`` so they come
out either as colored console lines or as one JSON object per line.

:func:`bind_catalog_context` attaches the catalog key and storage backend
to every record emitted afterwards in the current context.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


class _ShelfHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Marker type so reconfiguration replaces only our own handler."""


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route shelfkit log records through structlog.

    Calling this again swaps the previous shelfkit handler instead of
    stacking a new one. Handlers installed by anything else are kept.

    Args:
        verbose: Let ``shelfkit.*`` DEBUG and INFO records through.
            Otherwise only WARNING and above are shown.
        log_json: Render JSON lines instead of console lines.
        stream: Destination; stderr when omitted.
    """
    out = stream if stream is not None else sys.stderr
    shared = _shared_processors()

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=out.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = _ShelfHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not isinstance(h, _ShelfHandler)]
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("shelfkit").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


def bind_catalog_context(*, key: str, backend: str) -> None:
    """Tag subsequent log records with the catalog *key* and storage *backend*."""
    structlog.contextvars.bind_contextvars(catalog_key=key, storage_backend=backend)

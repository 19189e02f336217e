"""Logging setup for the ``streamroute`` logger tree."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_HANDLER_NAME = "streamroute-rich"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a ``RichHandler`` to the ``streamroute`` logger.

    Calling this again only updates the level.
    """
    root = logging.getLogger("streamroute")
    root.setLevel(level.upper() if isinstance(level, str) else level)

    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(handler)
        root.propagate = False

    return root

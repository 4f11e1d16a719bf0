"""Plain-text logging setup shared by the stage scripts."""

from __future__ import annotations

import logging

from windaep.config import LOGGING_CONFIG


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger with a single stream handler."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or LOGGING_CONFIG["level"]).upper()))

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(LOGGING_CONFIG["format"], datefmt=LOGGING_CONFIG["datefmt"])
    )

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()
    root.addHandler(handler)

    # Quiet noisy libraries
    logging.getLogger("matplotlib").setLevel(logging.WARNING)

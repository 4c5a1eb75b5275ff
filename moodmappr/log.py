"""Logging for Mood-O-Mappr; ``main.py`` calls :func:`setup_logging` once."""

import logging
import sys

_configured = False


def setup_logging(level: str = "INFO") -> None:
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Module logger under the ``moodmappr`` namespace."""
    if not name.startswith("moodmappr"):
        name = f"moodmappr.{name}"
    return logging.getLogger(name)

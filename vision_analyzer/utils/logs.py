"""Logging setup for command line use."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s]: %(message)s"


def configure_logging(level: str = "info") -> None:
    """Send package logs to stderr at ``level``; stdout is reserved for results."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    root = logging.getLogger("vision_analyzer")
    root.setLevel(numeric)
    if not any(getattr(handler, "_vision_analyzer", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._vision_analyzer = True  # type: ignore[attr-defined]
        root.addHandler(handler)

"""
Logging setup for applications embedding tiercart.

Library modules only call logging.getLogger(__name__); nothing is
configured on import.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Root handler with the tiercart format. Safe to call more than once."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("tiercart").setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = (
    "LOG_FORMAT",
    "configure_logging",
)

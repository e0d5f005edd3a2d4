"""Logging setup for the BlogOnSpot API."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once at application startup.

    Args:
        level: Root log level name (e.g. "INFO", "DEBUG").
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("blogonspot").setLevel(level)

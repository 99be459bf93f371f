"""Logging setup for the API process and the CLI."""

import logging
import sys

from journal.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the ``journal`` logger: console handler, level from settings.

    Safe to call more than once; existing handlers are replaced.
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    root = logging.getLogger("journal")
    root.setLevel(log_level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console)
    return root

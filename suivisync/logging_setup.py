"""Logging configuration for suivisync entry points."""

import logging
import sys
from typing import Optional

from suivisync.config import LOG_LEVEL


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging with a single stderr handler.

    Call this once, early, from an entry point (library code only
    creates module loggers).
    """
    root = logging.getLogger()
    root.setLevel((level or LOG_LEVEL).upper())

    # Remove any pre-existing handlers to avoid duplicates.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)

    logging.captureWarnings(True)

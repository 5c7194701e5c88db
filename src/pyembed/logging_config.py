"""Logging setup shared by the pyembed command line tools."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

_DEFAULT_LEVEL = os.getenv("PYEMBED_LOG_LEVEL", "WARNING").upper()
_DEFAULT_FORMAT = os.getenv("PYEMBED_LOG_FORMAT", "%(levelname)s | %(name)s | %(message)s")
_configured = False


def configure_logging(level: Optional[Union[str, int]] = None) -> Union[str, int]:
    """Configure the ``pyembed`` logger once with a stderr handler.

    Environment overrides:
    - `PYEMBED_LOG_LEVEL`
    - `PYEMBED_LOG_FORMAT`
    """
    global _configured

    if level is None:
        level = _DEFAULT_LEVEL
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger("pyembed")
    logger.setLevel(level)
    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)
        _configured = True
    return level


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``pyembed`` namespace."""
    return logging.getLogger(name)

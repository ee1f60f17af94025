"""Shared logger factory for provider, pipeline and storage modules."""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LOGGER: Optional[logging.Logger] = None


def get_logger(name: str = "fx_lira") -> logging.Logger:
    """Return ``name``'s logger, installing the INFO root handler on first use.

    Later calls reuse the root configuration, so modules can bind
    ``LOGGER = get_logger(__name__)`` at import time in any order.
    """
    global _LOGGER
    if _LOGGER is None:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        _LOGGER = logging.getLogger(name)
    return logging.getLogger(name)

"""
Logging setup for the ``fhe_web3`` logger tree.

Library modules only call ``logging.getLogger(__name__)``; the CLI calls
:func:`configure_logging` once with the level from ``--verbose`` or
``FHE_WEB3_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Optional, TextIO, Union

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def configure_logging(level: Union[int, str] = "WARNING", stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Set the ``fhe_web3`` log level and attach one stream handler.

    Args:
        level: Level name (case-insensitive) or number. Unknown names fall
            back to WARNING.
        stream: Handler stream (default: stderr). Only used when the logger
            has no handler yet.

    Returns:
        The ``fhe_web3`` logger
    """
    logger = logging.getLogger("fhe_web3")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        formatter = logging.Formatter(fmt=FORMAT, datefmt=DATE_FORMAT)
        formatter.converter = time.gmtime
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger

"""Logging setup for the blob server and scripts."""
from __future__ import annotations

import logging
import sys
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route the 'blobs' loggers to stdout, and to `log_file` when given.

    `level` may be a number or a name such as "DEBUG". Calling this again
    replaces the handlers installed by the previous call.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level {level!r}")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    logger = logging.getLogger("blobs")
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    # uvicorn configures the root logger; keep our records out of it
    logger.propagate = False

    logger.debug("Logging to %s", ", ".join(type(h).__name__ for h in handlers))
    return logger

# SPDX-License-Identifier: MIT

"""Application logging setup."""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from jotter import configuration

LOGGER_NAME = "jotter"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Configure a rotating log file in the user log directory.

    Calling it again only adjusts the level; handlers are installed once.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler: Optional[RotatingFileHandler] = None
    try:
        configuration.LOG_PATH.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            configuration.LOG_FILE_PATH,
            maxBytes=1_048_576,
            backupCount=5,
            encoding="utf-8",
        )
    except OSError:
        # read-only home, keep going with stderr only
        file_handler = None

    if file_handler is not None:
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.WARNING)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if file_handler is not None:
        logger.debug(
            "Logger initialised; logs available at %s", file_handler.baseFilename
        )
    else:
        logger.warning("Log directory %s is not writable", configuration.LOG_PATH)
    return logger

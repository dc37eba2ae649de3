"""Console logging for the service and its database engine."""

from __future__ import annotations

import logging

from mappins.config import Config, config

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def app_log_level(settings: Config = config) -> int:
    """``LOG_LEVEL`` if it names a level, otherwise DEBUG or INFO."""
    if settings.LOG_LEVEL:
        level = logging.getLevelNamesMapping().get(settings.LOG_LEVEL.upper())
        if level is not None:
            return level
    return logging.DEBUG if settings.DEBUG else logging.INFO


def configure_logging(settings: Config = config) -> None:
    """Send ``mappins.*`` and SQL engine records to stderr.

    uvicorn configures its own loggers and is left alone. Statements are
    echoed only in debug mode.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    levels = {
        "mappins": app_log_level(settings),
        "sqlalchemy.engine": logging.INFO if settings.DEBUG else logging.WARNING,
    }
    for name, level in levels.items():
        logger = logging.getLogger(name)
        if not logger.handlers:
            logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False

"""Logging setup for the moderation service.

Configures the ``moderation`` logger hierarchy once at startup. Modules
obtain their loggers with ``logging.getLogger(__name__)`` and inherit
this configuration.
"""

import logging
import logging.handlers
import os
from typing import Optional

ROOT_LOGGER_NAME = "moderation"
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
MAX_LOG_BYTES = 10485760  # 10MB
LOG_BACKUP_COUNT = 5


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str = "INFO",
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """Attach a console handler, and a rotating file handler in ``log_dir`` if given.

    Calling it again for a configured logger only updates the level.
    """
    level_upper = level.upper()
    if level_upper not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level_upper))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
        ))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def configure_from_settings(settings) -> logging.Logger:
    """Configure the package logger from application settings."""
    return setup_logger(
        ROOT_LOGGER_NAME,
        level=settings.log_level,
        log_dir=settings.log_dir if settings.log_to_file else None,
    )

"""
Logging configuration for the monitor.

Console output plus a rotating file per logger tree. The audio callback runs
on its own thread, so records carry the thread name.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Iterable, List, Optional

from .config import Config, config as default_config

LOG_FORMAT = "%(asctime)s - %(name)s [%(threadName)s] - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_TREES = ("magnetophon", "service")


def _file_handler(path: Path) -> logging.Handler:
    return logging.handlers.RotatingFileHandler(
        path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
    )


def setup_logging(
    logger_names: Iterable[str] = LOGGER_TREES,
    settings: Optional[Config] = None,
) -> List[logging.Logger]:
    """
    Attach console and rotating file handlers to each logger tree root.

    Module loggers are created with getLogger(__name__) and propagate to
    these roots. Loggers that already have handlers are left untouched.

    Args:
        logger_names: Root logger names to configure
        settings: Configuration to read level and log directory from

    Returns:
        The configured loggers, in the order given
    """
    settings = settings or default_config
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    loggers = []
    for name in logger_names:
        logger = logging.getLogger(name)
        loggers.append(logger)
        if logger.handlers:
            continue

        logger.setLevel(settings.log_level)
        for handler in (logging.StreamHandler(), _file_handler(settings.logs_dir / f"{name}.log")):
            handler.setLevel(settings.log_level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    return loggers

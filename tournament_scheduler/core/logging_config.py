"""
Logging setup for the scheduler services, the API server, Celery workers and the CLI.
"""

import logging
import sys

from tournament_scheduler.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers kept quieter than the scheduler's own
LIBRARY_LEVELS = {
    "uvicorn": logging.WARNING,
    "fastapi": logging.WARNING,
    "celery": logging.INFO,
    "kombu": logging.WARNING,
    "amqp": logging.WARNING,
}


def setup_logging(log_level=None):
    """
    Route all log records to stdout.

    Args:
        log_level: Level for the root and `tournament_scheduler` loggers
            (defaults to SCHEDULER_LOG_LEVEL). DEBUG logs every placement.

    Returns:
        The configured root logger
    """
    if log_level is None:
        log_level = getattr(logging, LOG_LEVEL, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    logging.getLogger("tournament_scheduler").setLevel(log_level)
    for name, level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)

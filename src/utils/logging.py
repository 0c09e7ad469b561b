"""
Logging configuration for Halvback.

All module loggers live under the "halvback" namespace so a single call to
setup_logging() controls console and file output for the whole pipeline.
"""

import logging
import sys
from pathlib import Path

LOGGER_NAMESPACE = "halvback"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(levelname)-8s | %(message)s"


def _make_handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, LOG_DATE_FORMAT))
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Configure the halvback logger.

    Args:
        level: Console logging level (default: INFO)
        log_file: Optional path to a log file, which always receives DEBUG
        verbose: If True, use DEBUG level and the detailed console format

    Returns:
        The configured namespace logger
    """
    if verbose:
        level = logging.DEBUG

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    root_logger.setLevel(logging.DEBUG if log_file else level)
    root_logger.handlers.clear()

    root_logger.addHandler(
        _make_handler(
            logging.StreamHandler(sys.stdout),
            level,
            LOG_FORMAT if verbose else CONSOLE_FORMAT,
        )
    )

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(
            _make_handler(
                logging.FileHandler(log_file, encoding="utf-8"),
                logging.DEBUG,
                LOG_FORMAT,
            )
        )

    # The HTTP stack is chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Usage:
        from utils.logging import get_logger
        logger = get_logger(__name__)

        logger.info("Loaded %d price points", len(prices))
        logger.error("Failed to load prices: %s", error)

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger under the halvback namespace
    """
    if name != LOGGER_NAMESPACE and not name.startswith(f"{LOGGER_NAMESPACE}."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)

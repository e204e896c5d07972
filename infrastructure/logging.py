"""
Logging infrastructure setup.

This module installs colored console logging for the crawler.
"""

import logging
import os

import coloredlogs  # type: ignore

# Get logger for this module
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

LEVEL_STYLES = {
    "debug": {"color": "cyan"},
    "info": {"color": "green"},
    "warning": {"color": "yellow"},
    "error": {"color": "red"},
    "critical": {"color": "red", "bold": True},
}


def get_log_level(verbose: bool = False) -> int:
    """
    Resolve the logging level.

    Args:
        verbose: Force DEBUG regardless of the environment

    Returns:
        DEBUG when verbose, otherwise the LOG_LEVEL environment variable
        (defaults to logging.INFO if not set or invalid)
    """
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(verbose: bool = False) -> None:
    """Configure colored logging on the root logger."""
    log_level = get_log_level(verbose)
    coloredlogs.install(level=log_level, fmt=LOG_FORMAT, level_styles=LEVEL_STYLES)
    # Selenium and urllib3 are chatty at DEBUG
    for name in ("selenium", "urllib3"):
        logging.getLogger(name).setLevel(max(log_level, logging.INFO))
    logger.debug("log level: %s", logging.getLevelName(log_level))

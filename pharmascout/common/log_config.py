"""
Logging Configuration

Configures logging for the pharmascout package and its CLI scripts.
Output goes to stderr so stdout stays free for reports and CSV output.
"""

import logging
import sys

PACKAGE_LOGGER = "pharmascout"

# Chatty HTTP client libraries, only shown at DEBUG
NOISY_LOGGERS = ("urllib3", "httpx", "openai")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the package logger.

    Args:
        verbose: If True, set level to DEBUG and let HTTP client logs through
        quiet: If True, set level to WARNING
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-8s %(name)s: %(message)s"))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

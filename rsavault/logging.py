"""Logging utilities for rsavault modules."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger that inherits from the root logger.

    The level is left unset and records propagate, so whatever level and
    handlers the application gives the root logger (for example through
    logging.basicConfig()) apply to rsavault output too.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def configure(verbose: bool = False) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

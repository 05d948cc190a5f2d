"""Logging setup."""

import logging

from rich.logging import RichHandler

from .config import LoggingConfig


def setup_logging(cfg: LoggingConfig) -> logging.Logger:
    """Attach a Rich console handler to the package logger."""
    logger = logging.getLogger("udnews")
    logger.setLevel(cfg.level)
    logger.handlers = []
    logger.propagate = False

    if cfg.console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
        console_handler.setLevel(cfg.level)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)
    else:
        logger.addHandler(logging.NullHandler())

    return logger

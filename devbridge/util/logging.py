"""Logging setup for devbridge.

Module loggers are children of the ``devbridge`` logger, so one call to
``setup_logging`` configures the whole package.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "devbridge"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    # the file keeps everything, whatever the console shows
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: Optional[Console] = None
) -> logging.Logger:
    """Route package logs to a Rich console and, optionally, a log file.

    Calling it again replaces the handlers installed by the previous call.
    """
    console_level = getattr(logging, level.upper())

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(console_level)
    rich_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    logger.addHandler(rich_handler)

    if log_file:
        logger.addHandler(_file_handler(log_file))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)

"""
Logging configuration for the sphfluid package.

Library modules only create module-level loggers; handlers are installed by
the CLI entry point through setup_logging().
"""

from __future__ import annotations

import logging
import sys


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """
    Configure the 'sphfluid' logger namespace.

    Args:
        level: logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: optional path that receives a copy of the log.
    """
    logger = logging.getLogger("sphfluid")
    logger.setLevel(level)

    # Re-running the CLI in one interpreter must not duplicate lines
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")

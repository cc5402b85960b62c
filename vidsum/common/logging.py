# vidsum/common/logging.py
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str = "vidsum", level: int | str | None = None) -> logging.Logger:
    """
    Return a project logger.
    If no handlers are set anywhere, we add a basicConfig once.
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    if level is not None:
        logger.setLevel(level)
    return logger


def configure_logging(level: int | str) -> None:
    """Set the level for every `vidsum.*` logger (used by the CLI)."""
    if isinstance(level, str):
        level = level.upper()
    get_logger("vidsum", level)

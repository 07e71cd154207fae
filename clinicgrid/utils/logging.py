"""Logging setup shared by the CLI and the web adapter."""

import logging

from clinicgrid.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | int | None = None) -> None:
    """Configure the root logger once.

    Args:
        level: Level name or number; defaults to CLINICGRID_LOG_LEVEL
    """
    level = level if level is not None else LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("clinicgrid").setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

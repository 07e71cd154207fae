"""Utility functions for logging."""

from clinicgrid.utils.logging import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
]

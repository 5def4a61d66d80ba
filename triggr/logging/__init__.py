"""Logging module for Triggr.

Stdlib logging setup plus a Rich console trace for agent runs.
"""

from triggr.logging.logger import LogLevel, TriggrLogger
from triggr.logging.config import configure_logging, get_logger, setup_logging

__all__ = [
    "LogLevel",
    "TriggrLogger",
    "configure_logging",
    "get_logger",
    "setup_logging",
]

"""Global logging configuration."""

from __future__ import annotations

import logging.config
from typing import Any

from triggr.config import Settings, get_settings
from triggr.logging.logger import LogLevel, TriggrLogger


# Global console logger instance
_logger: TriggrLogger | None = None


def get_logger() -> TriggrLogger:
    """Get the global console logger, creating a default one if needed."""
    global _logger
    if _logger is None:
        _logger = TriggrLogger()
    return _logger


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    enabled: bool = True,
    show_timestamps: bool = True,
    show_level: bool = True,
    **kwargs: Any,
) -> TriggrLogger:
    """Configure the global console logger.

    Example:
        >>> configure_logging(level="debug", show_timestamps=False)
        >>> get_logger().info("Hello")
    """
    global _logger

    if isinstance(level, str):
        level = LogLevel(level.lower())

    _logger = TriggrLogger(
        level=level,
        enabled=enabled,
        show_timestamps=show_timestamps,
        show_level=show_level,
        **kwargs,
    )

    return _logger


def setup_logging(settings: Settings | None = None) -> None:
    """Configure stdlib logging for the ``triggr`` package from settings."""
    settings = settings or get_settings()
    level = settings.log_level.upper()

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "format": '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
                "datefmt": "%Y-%m-%dT%H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": settings.log_format if settings.log_format in ("text", "json") else "text",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "httpx": {"level": "WARNING"},
            "sqlalchemy.engine": {"level": "WARNING"},
            "triggr": {"level": level},
        },
    }

    logging.config.dictConfig(config)

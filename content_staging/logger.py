"""
Logging setup for hosts embedding the repositories.

Module loggers live under the ``content_staging`` package; the engine's SQL
logging is tied to ``settings.database.echo``.
"""

from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any

from .config import Settings, get_settings

_LOGGER_CONFIGURED = False


def _resolve_log_level(level_name: str) -> int:
    """Return a logging level constant from a case-insensitive string."""

    numeric_level = logging.getLevelName(level_name.upper())
    if isinstance(numeric_level, int):
        return numeric_level
    raise ValueError(f"Unsupported log level: {level_name}")


def effective_level(settings: Settings) -> int:
    """Configured level, lowered to DEBUG when ``app.debug`` is set."""

    if settings.app.debug:
        return logging.DEBUG
    return _resolve_log_level(settings.logging.level)


def _build_logging_config(settings: Settings) -> dict[str, Any]:
    log_settings = settings.logging
    log_settings.directory.mkdir(parents=True, exist_ok=True)
    level = effective_level(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": log_settings.format}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "standard",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": "standard",
                "filename": str(log_settings.directory / log_settings.file_name),
                "encoding": "utf-8",
                "maxBytes": log_settings.max_bytes,
                "backupCount": log_settings.backup_count,
            },
        },
        "loggers": {
            settings.app.name: {"level": level},
            # INFO is the level at which SQLAlchemy logs statements
            "sqlalchemy.engine": {
                "level": logging.INFO if settings.database.echo else logging.WARNING,
            },
        },
        "root": {"level": level, "handlers": ["console", "file"]},
    }


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """
    Configure logging once and return the logger named by ``app.name``.

    Later calls leave the handlers alone and only return the logger.
    """

    global _LOGGER_CONFIGURED

    runtime_settings = settings or get_settings()

    if not _LOGGER_CONFIGURED:
        dictConfig(_build_logging_config(runtime_settings))
        _LOGGER_CONFIGURED = True

    return logging.getLogger(runtime_settings.app.name)


__all__ = ["effective_level", "setup_logging"]

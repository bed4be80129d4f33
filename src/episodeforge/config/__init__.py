"""episodeforge configuration module."""

from __future__ import annotations

from typing import Any

from episodeforge.config.logging import configure_logging
from episodeforge.config.logging import get_logger as _get_logger
from episodeforge.config.settings import (
    EpisodeForgeSettings,
    clear_settings_cache,
    get_settings,
    get_settings_for_cli,
    set_settings,
)

__all__ = [
    "EpisodeForgeSettings",
    "clear_settings_cache",
    "configure_logging",
    "get_logger",
    "get_settings",
    "get_settings_for_cli",
    "reset_logging",
    "set_settings",
]

_logging_initialized = False
_logger_cache: dict[str, Any] = {}


def _ensure_logging_configured() -> None:
    """Configure logging from the global settings on first use."""
    global _logging_initialized
    if not _logging_initialized:
        configure_logging(get_settings())
        _logging_initialized = True


def get_logger(name: str) -> Any:
    """Get a configured logger instance.

    Loggers are cached locally so hot paths skip the configuration check.

    Args:
        name: Logger name (usually __name__).

    Returns:
        Configured structlog logger.
    """
    if name in _logger_cache:
        return _logger_cache[name]

    _ensure_logging_configured()

    logger = _get_logger(name)
    _logger_cache[name] = logger
    return logger


def reset_logging() -> None:
    """Reset settings and the logger cache so the next lookup reconfigures."""
    global _logging_initialized
    clear_settings_cache()
    _logging_initialized = False
    _logger_cache.clear()

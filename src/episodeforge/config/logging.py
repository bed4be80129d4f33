"""structlog setup for episodeforge.

Events from structlog loggers and from plain ``logging`` records both go
through one :class:`structlog.stdlib.ProcessorFormatter`, so the console, the
optional log file and pytest's ``caplog`` all see the same rendering.

The configured level applies to the ``episodeforge`` logger hierarchy. Other
libraries stay at ``WARNING`` unless a more verbose level is configured for
them elsewhere.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import (
    CallsiteParameter,
    CallsiteParameterAdder,
    TimeStamper,
    add_log_level,
    dict_tracebacks,
    format_exc_info,
)
from structlog.stdlib import ProcessorFormatter, add_logger_name, filter_by_level

from episodeforge.config.settings import EpisodeForgeSettings

PACKAGE_LOGGER = "episodeforge"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 3


def _event_metadata() -> list[Any]:
    return [add_log_level, add_logger_name, TimeStamper(fmt="iso")]


def _render_chain(log_format: str) -> list[Any]:
    """Final processors turning an event dict into a line of text."""
    if log_format == "json":
        return [dict_tracebacks, structlog.processors.JSONRenderer()]
    if log_format == "structured":
        return [
            format_exc_info,
            structlog.processors.KeyValueRenderer(
                key_order=["timestamp", "level", "logger", "event"],
                drop_missing=True,
            ),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.rich_traceback,
        )
    ]


def _handlers(settings: EpisodeForgeSettings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                settings.log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUP_COUNT,
                encoding="utf-8",
            )
        )
    formatter = ProcessorFormatter(
        processors=[
            ProcessorFormatter.remove_processors_meta,
            *_render_chain(settings.log_format),
        ],
        foreign_pre_chain=_event_metadata(),
    )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(settings: EpisodeForgeSettings) -> None:
    """Configure structlog and the stdlib handlers from ``settings``.

    Safe to call repeatedly; each call replaces the previous handlers.
    """
    level = logging.getLevelNamesMapping()[settings.log_level]

    logging.basicConfig(
        level=max(level, logging.WARNING), handlers=_handlers(settings), force=True
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)

    processors: list[Any] = [merge_contextvars, filter_by_level, *_event_metadata()]
    if settings.debug:
        processors.append(
            CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.MODULE,
                    CallsiteParameter.FUNC_NAME,
                    CallsiteParameter.LINENO,
                ]
            )
        )
    processors.append(ProcessorFormatter.wrap_for_formatter)

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return the structlog logger for ``name`` without configuring anything."""
    return structlog.get_logger(name)

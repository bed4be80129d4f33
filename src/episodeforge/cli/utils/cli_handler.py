"""Error and success reporting shared by the CLI commands."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

import pydantic
import typer
from rich.console import Console
from rich.markup import escape

from episodeforge.cli.formatters.json_formatter import JsonFormatter
from episodeforge.config import get_logger
from episodeforge.exceptions import (
    CollaboratorLoadError,
    ConfigurationError,
    EpisodeForgeError,
    GenerationError,
    NotFoundError,
    ValidationError,
)

logger = get_logger(__name__)

# Checked in order, so subclasses come before their bases
ERROR_LABELS: tuple[tuple[type[Exception], str], ...] = (
    (CollaboratorLoadError, "Collaborator Error"),
    (ConfigurationError, "Configuration Error"),
    (NotFoundError, "Not Found"),
    (ValidationError, "Validation Error"),
    (GenerationError, "Generation Error"),
    (pydantic.ValidationError, "Invalid Data"),
)

INTERRUPTED_EXIT_CODE = 130


def error_label(error: Exception) -> str:
    """Heading shown in front of an error message."""
    for error_type, label in ERROR_LABELS:
        if isinstance(error, error_type):
            return label
    return "Error"


class CLIHandler:
    """Prints command outcomes as rich text or as JSON responses."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.json_formatter = JsonFormatter()

    def _describe(self, error: Exception) -> tuple[str, str | None]:
        if isinstance(error, EpisodeForgeError):
            return error.message, error.hint
        if isinstance(error, pydantic.ValidationError):
            first = error.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or error.title
            return (
                f"{error.error_count()} problem(s) in {error.title}; "
                f"{location}: {first['msg']}",
                "Check the field names and types of the input file",
            )
        return str(error), None

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> None:
        """Report ``error`` and leave the command with ``exit_code``.

        Raises:
            typer.Exit: Always
        """
        logger.error(
            "Command failed",
            error=str(error),
            error_type=type(error).__name__,
            exc_info=error,
        )
        message, hint = self._describe(error)

        if json_output:
            typer.echo(self.json_formatter.format_error_response(error, exit_code))
        else:
            self.console.print(f"[red]{error_label(error)}: {escape(message)}[/red]")
            if hint:
                self.console.print(f"[yellow]Hint: {escape(hint)}[/yellow]")

        raise typer.Exit(exit_code)

    def handle_success(
        self, message: str, data: Any = None, json_output: bool = False
    ) -> None:
        """Print a success line, or a JSON success response carrying ``data``."""
        if json_output:
            typer.echo(self.json_formatter.format_success(message, data))
        else:
            self.console.print(f"[green]{message}[/green]")


def cli_command(func: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a command so failures go through :class:`CLIHandler`.

    Coroutine functions are run with :func:`asyncio.run`. The command's
    ``json_output`` keyword decides the error format.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        json_output = kwargs.get("json_output", False)
        try:
            if inspect.iscoroutinefunction(func):
                return asyncio.run(func(*args, **kwargs))
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except KeyboardInterrupt:
            logger.warning("Command interrupted", command=func.__name__)
            raise typer.Exit(INTERRUPTED_EXIT_CODE) from None
        except Exception as e:
            CLIHandler().handle_error(e, json_output)

    return wrapper

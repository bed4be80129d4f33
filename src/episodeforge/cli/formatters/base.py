"""Shared rendering for the report formatters."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Generic, TypeVar

from rich.console import Console, RenderableType

from episodeforge.cli.formatters.json_formatter import JsonFormatter

ReportT = TypeVar("ReportT")


class OutputFormat(str, Enum):
    """How a report is written to the terminal."""

    TABLE = "table"
    JSON = "json"


class OutputFormatter(ABC, Generic[ReportT]):
    """Renders a report as rich tables, or as JSON on request.

    Subclasses only build the renderables; the JSON view goes through
    :class:`JsonFormatter` using :meth:`payload`.
    """

    # Columns of the uncoloured text render
    render_width = 120

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    @abstractmethod
    def renderables(self, report: ReportT) -> list[RenderableType]:
        """Build the rich tables for ``report``."""

    def payload(self, report: ReportT) -> Any:
        """Object dumped in JSON mode."""
        return report

    def format(
        self, data: ReportT, format_type: OutputFormat = OutputFormat.TABLE
    ) -> str:
        """Return the report as uncoloured table text or a JSON document."""
        if format_type is OutputFormat.JSON:
            return JsonFormatter().format(self.payload(data))
        buffer = io.StringIO()
        Console(file=buffer, width=self.render_width, color_system=None).print(
            *self.renderables(data)
        )
        return buffer.getvalue()

    def print(
        self, data: ReportT, format_type: OutputFormat = OutputFormat.TABLE
    ) -> None:
        """Write the report to the console."""
        if format_type is OutputFormat.JSON:
            self.console.print_json(self.format(data, format_type))
            return
        self.console.print(*self.renderables(data))

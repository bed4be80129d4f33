"""Output formatters for CLI."""

from episodeforge.cli.formatters.base import OutputFormat, OutputFormatter
from episodeforge.cli.formatters.json_formatter import JsonFormatter
from episodeforge.cli.formatters.report_formatter import (
    BatchReportFormatter,
    EpisodeReportFormatter,
)

__all__ = [
    "BatchReportFormatter",
    "EpisodeReportFormatter",
    "JsonFormatter",
    "OutputFormat",
    "OutputFormatter",
]

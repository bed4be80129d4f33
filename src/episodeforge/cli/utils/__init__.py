"""CLI utilities."""

from episodeforge.cli.utils.cli_handler import CLIHandler, cli_command, error_label
from episodeforge.cli.utils.loader import load_collaborator, load_data_file

__all__ = [
    "CLIHandler",
    "cli_command",
    "error_label",
    "load_collaborator",
    "load_data_file",
]

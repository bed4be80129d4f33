"""CLI command for episodeforge analyze."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.text import Text

from episodeforge.analyzers import BUILTIN_ANALYZERS, analyze_episode
from episodeforge.cli.formatters import EpisodeReportFormatter, JsonFormatter
from episodeforge.cli.utils import cli_command, load_data_file
from episodeforge.config import get_logger
from episodeforge.models import Character, Episode

logger = get_logger(__name__)
console = Console()


def load_characters(path: Path) -> list[Character]:
    """Read characters from a list or a ``{"characters": [...]}`` document."""
    data: Any = load_data_file(path)
    if isinstance(data, dict):
        data = data.get("characters", [])
    return [Character.model_validate(entry) for entry in data or []]


@cli_command
def analyze_command(
    episode_file: Annotated[
        Path, typer.Argument(help="Episode JSON or YAML file to analyze")
    ],
    characters: Annotated[
        Path | None,
        typer.Option(
            "--characters",
            help="Channel characters file, used by the consistency checker",
        ),
    ] = None,
    analyzer: Annotated[
        list[str] | None,
        typer.Option(
            "--analyzer",
            "-a",
            help=(
                "Analyzer to run (can be specified multiple times): "
                f"{', '.join(BUILTIN_ANALYZERS)}"
            ),
        ),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Report quality, host consistency and duration statistics for an episode.

    Warnings are advisory; the command never modifies the episode.

    Examples:
        episodeforge analyze episode.json --characters characters.yaml
        episodeforge analyze episode.json -a quality --json
    """
    episode = Episode.model_validate(load_data_file(episode_file))
    cast = load_characters(characters) if characters else []
    report = analyze_episode(episode, cast, analyzer or None)
    logger.debug(
        "Analyzed episode", episode_id=episode.id, warnings=report.warning_count
    )

    if json_output:
        typer.echo(JsonFormatter().format(report))
    else:
        console.print(Text(episode.title, style="bold cyan"))
        EpisodeReportFormatter(console).print(report)

"""Main CLI entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from episodeforge import __version__
from episodeforge.cli.commands import analyze_command, bulk_command, scenes_app
from episodeforge.cli.formatters import JsonFormatter
from episodeforge.cli.utils import CLIHandler
from episodeforge.config import (
    configure_logging,
    get_logger,
    get_settings_for_cli,
    set_settings,
)

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="episodeforge",
    help="Scene ordering, content checks and bulk generation for video episodes",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="analyze")(analyze_command)
app.command(name="bulk")(bulk_command)
app.add_typer(scenes_app, name="scenes")


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show episodeforge version."""
    if json_output:
        typer.echo(
            JsonFormatter().format({"name": "episodeforge", "version": __version__})
        )
    else:
        console.print(f"episodeforge v{__version__}")


@app.callback()
def main_callback(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (YAML, TOML, or JSON)",
            envvar="EPISODEFORGE_CONFIG",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure global options."""
    overrides: dict[str, Any] = {}
    if debug:
        overrides = {"debug": True, "log_level": "DEBUG"}
    elif verbose:
        overrides = {"log_level": "INFO"}

    if config is None and not overrides:
        return

    try:
        settings = get_settings_for_cli(config, overrides or None)
        set_settings(settings)
        configure_logging(settings)
    except Exception as e:
        CLIHandler(console).handle_error(e)
    logger.debug("Settings loaded", config=str(config) if config else None)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()

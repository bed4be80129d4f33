"""Scene ordering commands operating on an episode file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from episodeforge.cli.formatters import JsonFormatter
from episodeforge.cli.utils import (
    CLIHandler,
    cli_command,
    load_collaborator,
    load_data_file,
)
from episodeforge.config import get_logger
from episodeforge.models import Episode, Scene
from episodeforge.ordering import END, SceneEditor
from episodeforge.storage import InMemoryEpisodeStore

logger = get_logger(__name__)
console = Console()

scenes_app = typer.Typer(
    name="scenes",
    help="Reorder, insert and remove scenes of an episode file",
    pretty_exceptions_enable=False,
    add_completion=False,
)

WriteOption = Annotated[
    bool, typer.Option("--write", "-w", help="Write the result back to the file")
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


def _load(episode_file: Path) -> tuple[InMemoryEpisodeStore, Episode]:
    episode = Episode.model_validate(load_data_file(episode_file))
    return InMemoryEpisodeStore(episodes=[episode]), episode


def _save(episode_file: Path, episode: Episode) -> None:
    with episode_file.open("w", encoding="utf-8") as f:
        json.dump(episode.to_payload(), f, indent=2, ensure_ascii=False)
    logger.info("Wrote episode", path=str(episode_file), episode_id=episode.id)


def _show(
    episode: Episode, message: str, write: bool, json_output: bool, path: Path
) -> None:
    handler = CLIHandler(console)
    if json_output:
        typer.echo(JsonFormatter().format_success(message, episode))
        return

    handler.handle_success(message)
    table = Table(title=episode.title, header_style="bold magenta")
    table.add_column("Order", justify="right", style="cyan")
    table.add_column("Id")
    table.add_column("Title")
    table.add_column("Duration", justify="right")
    for scene in episode.ordered_scenes():
        duration = "-"
        if scene.duration_seconds is not None:
            duration = f"{scene.duration_seconds:g}s"
        table.add_row(str(scene.order), scene.id, Text(scene.title or ""), duration)
    console.print(table)
    if not write:
        console.print(f"[dim]Dry run: use --write to update {path.name}[/dim]")


@scenes_app.command(name="reorder")
@cli_command
async def reorder_scene(
    episode_file: Annotated[Path, typer.Argument(help="Episode JSON or YAML file")],
    moved: Annotated[str, typer.Argument(help="Id of the scene to move")],
    target: Annotated[
        str | None,
        typer.Argument(help="Id of the scene it should precede; omit to append"),
    ] = None,
    write: WriteOption = False,
    json_output: JsonOption = False,
) -> None:
    """Move a scene so it sits right before another scene.

    Examples:
        episodeforge scenes reorder episode.json S3 S1 --write
        episodeforge scenes reorder episode.json S1
    """
    store, episode = _load(episode_file)
    await SceneEditor(store).reorder(
        episode.id, moved, END if target is None else target
    )
    updated = await store.fetch_episode(episode.id)
    if write:
        _save(episode_file, updated)
    _show(updated, f"Moved scene {moved}", write, json_output, episode_file)


@scenes_app.command(name="insert")
@cli_command
async def insert_scene(
    episode_file: Annotated[Path, typer.Argument(help="Episode JSON or YAML file")],
    prompt: Annotated[
        str,
        typer.Option(
            "--prompt",
            "-p",
            help="Scene prompt text (instructions when --generator is given)",
        ),
    ],
    title: Annotated[
        str | None, typer.Option("--title", "-t", help="Scene title")
    ] = None,
    duration: Annotated[
        float | None,
        typer.Option("--duration", "-d", min=0, help="Duration in seconds"),
    ] = None,
    before: Annotated[
        int | None,
        typer.Option(
            "--before", "-b", min=1, help="Insert before the scene at this order"
        ),
    ] = None,
    generator: Annotated[
        str | None,
        typer.Option(
            "--generator",
            "-g",
            help="Script generator (module:attr) writing the scene from --prompt",
        ),
    ] = None,
    write: WriteOption = False,
    json_output: JsonOption = False,
) -> None:
    """Insert a scene, shifting later scenes down; appends without --before.

    Examples:
        episodeforge scenes insert episode.json -p "[VOICEOVER: ...]" -b 2
        episodeforge scenes insert episode.json -p "a cold open" -g my.gen:Gen
    """
    store, episode = _load(episode_file)
    if generator:
        editor = SceneEditor(store, load_collaborator(generator))
        updated = await editor.insert_generated(episode.id, prompt, before)
    else:
        scene = Scene(title=title, prompt_text=prompt, duration_seconds=duration)
        updated = await SceneEditor(store).insert(episode.id, scene, before)
    if write:
        _save(episode_file, updated)
    position = f"before scene {before}" if before else "at the end"
    _show(updated, f"Inserted scene {position}", write, json_output, episode_file)


@scenes_app.command(name="remove")
@cli_command
async def remove_scene(
    episode_file: Annotated[Path, typer.Argument(help="Episode JSON or YAML file")],
    scene_id: Annotated[str, typer.Argument(help="Id of the scene to remove")],
    write: WriteOption = False,
    json_output: JsonOption = False,
) -> None:
    """Remove a scene and close the gap in the scene order."""
    store, episode = _load(episode_file)
    updated = await SceneEditor(store).remove(episode.id, scene_id)
    if write:
        _save(episode_file, updated)
    _show(updated, f"Removed scene {scene_id}", write, json_output, episode_file)

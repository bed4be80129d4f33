"""CLI command for episodeforge bulk."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
)

from episodeforge.batch import BulkGenerationOrchestrator
from episodeforge.cli.formatters import BatchReportFormatter, JsonFormatter
from episodeforge.cli.utils import CLIHandler, load_collaborator, load_data_file
from episodeforge.config import get_logger
from episodeforge.exceptions import ValidationError
from episodeforge.models import BulkItem, GenerationRequest
from episodeforge.storage import InMemoryEpisodeStore

logger = get_logger(__name__)
console = Console()


def load_items(path: Path) -> list[BulkItem]:
    """Read batch items.

    Accepts a list of descriptions, a list of ``{description, categoryId}``
    objects, or either of those under an ``items`` key.
    """
    data: Any = load_data_file(path)
    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise ValidationError(
            f"{path.name} must contain a list of items",
            hint="Use a list of descriptions or {description, categoryId} objects",
        )
    return [
        BulkItem(description=entry)
        if isinstance(entry, str)
        else BulkItem.model_validate(entry)
        for entry in data
    ]


async def _generate(
    orchestrator: BulkGenerationOrchestrator,
    items: list[BulkItem],
    request: GenerationRequest,
    auto: tuple[str, int, str | None] | None,
    show_progress: bool,
) -> None:
    """Run the optional idea pre-step, then the batch with a progress bar."""
    if auto is not None:
        topic, count, category = auto
        items = await orchestrator.prepare_auto_items(topic, count, category, items)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        disable=not show_progress,
    ) as progress:
        task = progress.add_task("Generating episodes...", total=len(items))
        async for event in orchestrator.run(items, request):
            status = "done" if event.result.succeeded else "failed"
            progress.update(
                task,
                completed=event.current,
                description=f"Episode {event.current}/{event.total} {status}",
            )


def bulk_command(
    generator: Annotated[
        str,
        typer.Option(
            "--generator",
            "-g",
            help="Script generator as module:attr (class, factory or instance)",
        ),
    ],
    items_file: Annotated[
        Path | None,
        typer.Argument(help="JSON or YAML file with the episodes to generate"),
    ] = None,
    ideas: Annotated[
        str | None,
        typer.Option("--ideas", help="Idea generator as module:attr, for --topic"),
    ] = None,
    store_path: Annotated[
        Path | None,
        typer.Option(
            "--store",
            "-s",
            help="Episode collection file; created when missing, saved afterwards",
        ),
    ] = None,
    topic: Annotated[
        str | None,
        typer.Option("--topic", help="Generate descriptions about this topic"),
    ] = None,
    count: Annotated[
        int, typer.Option("--count", "-n", min=1, help="Number of ideas for --topic")
    ] = 5,
    category: Annotated[
        str | None,
        typer.Option(
            "--category", help="Name of the category created for --topic items"
        ),
    ] = None,
    request_file: Annotated[
        Path | None,
        typer.Option("--request", "-r", help="Generation options file"),
    ] = None,
    delay: Annotated[
        float | None,
        typer.Option("--delay", min=0, help="Seconds to wait between episodes"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Generate many episodes one after another.

    A failing episode is reported and the batch moves on. Press Ctrl+C to
    stop; episodes finished so far are kept.

    Examples:
        episodeforge bulk ideas.yaml -g mychannel.gen:Generator -s episodes.json
        episodeforge bulk -g mychannel.gen:Generator --ideas mychannel.gen:Ideas \\
            --topic "street food" -n 10
    """
    handler = CLIHandler(console)
    try:
        if items_file is None and topic is None:
            raise ValidationError(
                "Nothing to generate",
                hint="Pass an items file, --topic, or both",
            )
        items = load_items(items_file) if items_file else []
        request = (
            GenerationRequest.model_validate(load_data_file(request_file))
            if request_file
            else GenerationRequest()
        )
        store = (
            InMemoryEpisodeStore.from_file(store_path)
            if store_path
            else InMemoryEpisodeStore()
        )
        orchestrator = BulkGenerationOrchestrator(
            store,
            load_collaborator(generator),
            idea_generator=load_collaborator(ideas) if ideas else None,
            item_delay=delay,
        )
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    auto = (topic, count, category) if topic is not None else None
    try:
        asyncio.run(_generate(orchestrator, items, request, auto, not json_output))
    except KeyboardInterrupt:
        console.print("[yellow]Batch interrupted[/yellow]")
    except Exception as e:
        handler.handle_error(e, json_output)

    if store_path:
        store.save()

    report = orchestrator.report
    if json_output:
        typer.echo(JsonFormatter().format(report.to_dict()))
    else:
        BatchReportFormatter(console).print(report)
        if store_path:
            console.print(f"[dim]Saved episodes to {store_path}[/dim]")

    if report.total_items and report.failed_items == report.total_items:
        raise typer.Exit(1)

"""Rich table formatters for episode and batch reports."""

from __future__ import annotations

from typing import Any

from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from episodeforge.batch import BulkBatchReport
from episodeforge.cli.formatters.base import OutputFormatter
from episodeforge.models import AnalyticsReport, EpisodeReport, SceneDuration


def _scene_label(scene: SceneDuration | None) -> str:
    if scene is None:
        return "-"
    title = f" {scene.title}" if scene.title else ""
    return f"#{scene.order}{title} ({scene.duration_seconds:g}s)"


class EpisodeReportFormatter(OutputFormatter[EpisodeReport]):
    """Formats the advisory report of one episode."""

    def renderables(self, report: EpisodeReport) -> list[RenderableType]:
        """Build the rich renderables for a report."""
        items: list[RenderableType] = []
        if report.analytics is not None:
            items.append(self._analytics_table(report.analytics))

        if report.quality:
            table = Table(title="Quality Warnings", header_style="bold magenta")
            table.add_column("Kind", style="yellow")
            table.add_column("Scenes", style="cyan")
            table.add_column("Message")
            for warning in report.quality:
                table.add_row(
                    warning.kind.value,
                    ", ".join(warning.scene_ids),
                    Text(warning.message),
                )
            items.append(table)
        else:
            items.append(Text("No quality warnings", style="green"))

        if report.consistency:
            table = Table(title="Consistency Warnings", header_style="bold magenta")
            table.add_column("Scene", justify="right", style="cyan")
            table.add_column("Kind", style="yellow")
            table.add_column("Message")
            for warning in report.consistency:
                table.add_row(
                    str(warning.scene_order),
                    warning.kind.value,
                    Text(warning.message),
                )
            items.append(table)
        else:
            items.append(Text("No consistency warnings", style="green"))
        return items

    def _analytics_table(self, analytics: AnalyticsReport) -> Table:
        table = Table(title="Episode Analytics", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="bold")

        structure = analytics.structure
        table.add_row("Total Scenes", str(analytics.total_scenes))
        table.add_row(
            "Estimated Duration", f"{analytics.estimated_duration_seconds:g}s"
        )
        table.add_row("Average Scene Duration", f"{analytics.avg_scene_duration:g}s")
        for label, segment in (
            ("Intro", structure.intro),
            ("Content", structure.content),
            ("CTA", structure.cta),
        ):
            table.add_row(label, f"{segment.count} ({segment.percent}%)")
        table.add_row("Longest Scene", Text(_scene_label(analytics.longest_scene)))
        table.add_row("Shortest Scene", Text(_scene_label(analytics.shortest_scene)))
        return table


class BatchReportFormatter(OutputFormatter[BulkBatchReport]):
    """Formats the outcome of a bulk generation batch."""

    def payload(self, report: BulkBatchReport) -> dict[str, Any]:
        """Dump the batch report in its dictionary form."""
        return report.to_dict()

    def renderables(self, report: BulkBatchReport) -> list[RenderableType]:
        """Build the summary and per-item tables."""
        summary = Table(title="Bulk Generation Summary", show_header=False)
        summary.add_column("Metric", style="cyan")
        summary.add_column("Value", justify="right", style="bold")
        rows: dict[str, Any] = {
            "State": report.state.value,
            "Items": report.total_items,
            "Processed": report.processed_items,
            "Succeeded": report.successful_items,
            "Failed": report.failed_items,
            "Duration": f"{report.duration_seconds:.1f}s",
        }
        for key, value in rows.items():
            summary.add_row(key, str(value))

        results = Table(title="Items", header_style="bold magenta")
        results.add_column("#", justify="right", style="cyan")
        results.add_column("Description")
        results.add_column("Status")
        results.add_column("Episode / Error")
        for result in report.results:
            if result.succeeded:
                status = Text("ok", style="green")
                outcome = Text(result.episode_title or result.episode_ref or "")
            else:
                status = Text("failed", style="red")
                outcome = Text(result.error or "", style="red")
            results.add_row(
                str(result.index + 1), Text(result.description), status, outcome
            )
        return [summary, results]

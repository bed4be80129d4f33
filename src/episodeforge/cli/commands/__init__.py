"""episodeforge CLI commands."""

from __future__ import annotations

from episodeforge.cli.commands.analyze import analyze_command
from episodeforge.cli.commands.bulk import bulk_command
from episodeforge.cli.commands.scenes import scenes_app

__all__ = ["analyze_command", "bulk_command", "scenes_app"]

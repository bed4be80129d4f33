"""Built-in episode analyzers and the combined episode report."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from episodeforge.config import EpisodeForgeSettings
from episodeforge.exceptions import ValidationError
from episodeforge.models import Character, Episode, EpisodeReport

from .analytics import EpisodeAnalytics
from .base import BaseEpisodeAnalyzer
from .consistency import CharacterConsistencyChecker
from .quality import QualityAnalyzer

# Registry of built-in analyzers
BUILTIN_ANALYZERS: dict[str, type[BaseEpisodeAnalyzer]] = {
    "quality": QualityAnalyzer,
    "consistency": CharacterConsistencyChecker,
    "analytics": EpisodeAnalytics,
}


def analyze_episode(
    episode: Episode,
    characters: Sequence[Character] = (),
    names: Iterable[str] | None = None,
    settings: EpisodeForgeSettings | None = None,
) -> EpisodeReport:
    """Run the selected analyzers over one episode.

    Args:
        episode: Episode to analyze
        characters: Channel characters for the consistency checker
        names: Analyzer names to run; all built-in analyzers when omitted
        settings: Optional settings passed to every analyzer

    Returns:
        Combined advisory report

    Raises:
        ValidationError: If an analyzer name is unknown
    """
    selected = list(names) if names else list(BUILTIN_ANALYZERS)
    unknown = [name for name in selected if name not in BUILTIN_ANALYZERS]
    if unknown:
        raise ValidationError(
            f"Unknown analyzer: {', '.join(unknown)}",
            hint=f"Available analyzers: {', '.join(BUILTIN_ANALYZERS)}",
        )

    scenes = episode.ordered_scenes()
    report = EpisodeReport(episode_id=episode.id)
    for name in selected:
        analyzer = BUILTIN_ANALYZERS[name](settings)
        result = analyzer.analyze(scenes, characters)
        if name == "quality":
            report.quality = result
        elif name == "consistency":
            report.consistency = result
        else:
            report.analytics = result
    return report

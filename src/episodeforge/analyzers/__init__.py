"""Advisory episode analyzers."""

from __future__ import annotations

from .analytics import EpisodeAnalytics
from .base import BaseEpisodeAnalyzer
from .builtin import BUILTIN_ANALYZERS, analyze_episode
from .consistency import CharacterConsistencyChecker
from .quality import QualityAnalyzer, extract_narration

__all__ = [
    "BUILTIN_ANALYZERS",
    "BaseEpisodeAnalyzer",
    "CharacterConsistencyChecker",
    "EpisodeAnalytics",
    "QualityAnalyzer",
    "analyze_episode",
    "extract_narration",
]

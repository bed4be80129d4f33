"""Base classes for episode analyzers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from episodeforge.config import EpisodeForgeSettings, get_settings
from episodeforge.models import Character, Scene


class BaseEpisodeAnalyzer(ABC):
    """Base class for advisory episode analyzers.

    Analyzers are pure: they derive their output from the scenes they are
    given, hold no state between calls, and never raise on well-typed input.
    """

    def __init__(self, settings: EpisodeForgeSettings | None = None):
        """Initialize analyzer.

        Args:
            settings: Optional settings; the global settings are used otherwise
        """
        self.settings = settings or get_settings()

    @abstractmethod
    def analyze(
        self,
        scenes: Sequence[Scene],
        characters: Sequence[Character] = (),
    ) -> Any:
        """Analyze the scenes of one episode.

        Args:
            scenes: Scenes of the episode, in any order
            characters: Channel characters, for analyzers that need them

        Returns:
            Analyzer specific report (warnings list or statistics model)
        """
        pass  # pragma: no cover

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this analyzer."""
        pass  # pragma: no cover

    @property
    def version(self) -> str:
        """Version of this analyzer."""
        return "1.0.0"

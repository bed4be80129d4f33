"""Duration and structure statistics for an episode."""

from __future__ import annotations

import math
from collections.abc import Sequence

from episodeforge.models import (
    AnalyticsReport,
    Character,
    Scene,
    SceneDuration,
    StructureBreakdown,
    StructureSegment,
)

from .base import BaseEpisodeAnalyzer

# Intro and call-to-action each take 15% of the scenes, at most two scenes
SECTION_SHARE_PERCENT = 15
SECTION_MAX_SCENES = 2


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a person would (2.5 -> 3), unlike the built-in round()."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _section_size(total: int) -> int:
    # ceil(total * 15 / 100) in integer arithmetic
    return min(SECTION_MAX_SCENES, -(-total * SECTION_SHARE_PERCENT // 100))


class EpisodeAnalytics(BaseEpisodeAnalyzer):
    """Aggregates scene durations and the intro/content/CTA split."""

    @property
    def name(self) -> str:
        """Analyzer name."""
        return "analytics"

    def duration_of(self, scene: Scene) -> float:
        """Scene duration, falling back to the configured default."""
        if scene.duration_seconds is None:
            return float(self.settings.default_scene_duration)
        return float(scene.duration_seconds)

    def _describe(self, scene: Scene) -> SceneDuration:
        return SceneDuration(
            scene_id=scene.id,
            order=scene.order,
            title=scene.title,
            duration_seconds=self.duration_of(scene),
        )

    def structure(self, total: int) -> StructureBreakdown:
        """Split ``total`` scenes into intro, content and CTA sections."""
        if total <= 0:
            return StructureBreakdown()
        intro = _section_size(total)
        cta = min(_section_size(total), total - intro)
        content = total - intro - cta

        def segment(count: int) -> StructureSegment:
            return StructureSegment(
                count=count, percent=int(round_half_up(100 * count / total))
            )

        return StructureBreakdown(
            intro=segment(intro), content=segment(content), cta=segment(cta)
        )

    def analyze(
        self,
        scenes: Sequence[Scene],
        characters: Sequence[Character] = (),  # noqa: ARG002
    ) -> AnalyticsReport:
        """Compute the analytics report.

        Args:
            scenes: Scenes of one episode, in input order
            characters: Unused

        Returns:
            Report; all zeros for an episode without scenes
        """
        total = len(scenes)
        if total == 0:
            return AnalyticsReport()

        durations = [self.duration_of(scene) for scene in scenes]
        estimated = sum(durations)

        # max()/min() return the first extreme element, so ties go to input order
        longest = max(range(total), key=lambda i: durations[i])
        shortest = min(range(total), key=lambda i: durations[i])

        return AnalyticsReport(
            total_scenes=total,
            estimated_duration_seconds=estimated,
            avg_scene_duration=round_half_up(estimated / total, 1),
            structure=self.structure(total),
            longest_scene=self._describe(scenes[longest]),
            shortest_scene=self._describe(scenes[shortest]),
        )

"""Quality heuristics for generated scene text.

Three independent checks, all recomputed from the current scenes on every
call:

- duplicate narration: two scenes speaking the same voice-over line
- oversized prompt: prompt text past the configured length
- filler phrase: stock phrases that add nothing ("as mentioned", "in summary")
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from itertools import combinations
from typing import ClassVar

from episodeforge.models import (
    Character,
    QualityWarning,
    QualityWarningKind,
    Scene,
)

from .base import BaseEpisodeAnalyzer

# [VOICEOVER: ...], [Voice-over in Vietnamese: ...], [voice over: ...]
NARRATION_PATTERN = re.compile(
    r"\[\s*voice[\s-]?over\b[^:\]]*:\s*(?P<text>[^\]]*)\]",
    re.IGNORECASE,
)

FILLER_PHRASES: tuple[str, ...] = (
    # Vietnamese stock phrases
    "như đã nói",
    "như đã đề cập",
    "như chúng ta đã biết",
    "tóm lại",
    "nói tóm lại",
    "tổng kết lại",
    "nói chung là",
    # English equivalents
    "as mentioned before",
    "as already mentioned",
    "as we said",
    "in summary",
    "to summarize",
    "in conclusion",
)


def extract_narration(prompt_text: str) -> str:
    """Return the normalized voice-over text of a scene, or an empty string."""
    segments = [
        m.group("text").strip() for m in NARRATION_PATTERN.finditer(prompt_text)
    ]
    return " ".join(s for s in segments if s).lower().strip()


class QualityAnalyzer(BaseEpisodeAnalyzer):
    """Flags duplicate, oversized and filler scene content."""

    DEFAULT_FILLER_PHRASES: ClassVar[tuple[str, ...]] = FILLER_PHRASES

    @property
    def name(self) -> str:
        """Analyzer name."""
        return "quality"

    @property
    def filler_phrases(self) -> tuple[str, ...]:
        """Filler phrases in effect (settings override the built-in list)."""
        phrases = self.settings.quality_filler_phrases
        if phrases is None:
            phrases = list(self.DEFAULT_FILLER_PHRASES)
        return tuple(p.strip().lower() for p in phrases if p.strip())

    def analyze(
        self,
        scenes: Sequence[Scene],
        characters: Sequence[Character] = (),  # noqa: ARG002
    ) -> list[QualityWarning]:
        """Run all quality checks.

        Args:
            scenes: Scenes of one episode
            characters: Unused

        Returns:
            Quality warnings; order is not significant
        """
        ordered = sorted(scenes, key=lambda s: s.order)
        warnings: list[QualityWarning] = []
        warnings.extend(self.find_duplicates(ordered))
        warnings.extend(self.find_oversized(ordered))
        warnings.extend(self.find_filler(ordered))
        return warnings

    def find_duplicates(self, scenes: Sequence[Scene]) -> list[QualityWarning]:
        """One warning per pair of scenes sharing the same narration."""
        min_length = self.settings.quality_min_narration_length
        narrations = [(s, extract_narration(s.prompt_text)) for s in scenes]
        candidates = [(s, n) for s, n in narrations if n and len(n) >= min_length]

        warnings = []
        for (first, text_a), (second, text_b) in combinations(candidates, 2):
            if first.id != second.id and text_a == text_b:
                warnings.append(
                    QualityWarning(
                        kind=QualityWarningKind.DUPLICATE,
                        scene_ids=[first.id, second.id],
                        message=(
                            f"Scenes {first.order} and {second.order} "
                            "repeat the same narration"
                        ),
                    )
                )
        return warnings

    def find_oversized(self, scenes: Sequence[Scene]) -> list[QualityWarning]:
        """Warn about prompt texts longer than the configured threshold."""
        threshold = self.settings.quality_oversized_threshold
        return [
            QualityWarning(
                kind=QualityWarningKind.OVERSIZED,
                scene_ids=[scene.id],
                message=(
                    f"Scene {scene.order} prompt is {len(scene.prompt_text)} "
                    f"characters (limit {threshold}); it may contain repeated "
                    "generated text"
                ),
            )
            for scene in scenes
            if len(scene.prompt_text) > threshold
        ]

    def find_filler(self, scenes: Sequence[Scene]) -> list[QualityWarning]:
        """Warn about scenes using a known filler phrase."""
        phrases = self.filler_phrases
        warnings = []
        for scene in scenes:
            text = scene.prompt_text.lower()
            phrase = next((p for p in phrases if p in text), None)
            if phrase:
                warnings.append(
                    QualityWarning(
                        kind=QualityWarningKind.FILLER,
                        scene_ids=[scene.id],
                        message=f"Scene {scene.order} uses filler phrase '{phrase}'",
                    )
                )
        return warnings

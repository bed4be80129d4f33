"""Host continuity checks across the scenes of an episode.

A scene that mentions the host and describes clothing or hair/face should
repeat at least one of the host's own keyword tokens; otherwise a warning is
raised. Matching is by whole words, not by meaning.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import ClassVar

from episodeforge.models import (
    Character,
    ConsistencyWarning,
    ConsistencyWarningKind,
    Scene,
)

from .base import BaseEpisodeAnalyzer

_TOKEN_SPLIT = re.compile(r"[\s,;/|.()]+")


def _term_pattern(terms: Iterable[str]) -> re.Pattern[str]:
    """Compile a case-insensitive whole-word alternation of ``terms``."""
    alternatives = "|".join(re.escape(term) for term in terms)
    return re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)", re.IGNORECASE)


class CharacterConsistencyChecker(BaseEpisodeAnalyzer):
    """Flags host outfit and appearance drift between scenes."""

    HOST_TERMS: ClassVar[tuple[str, ...]] = (
        "host",
        "presenter",
        "mc",
        "người dẫn",
        "người dẫn chương trình",
    )
    WEARING_CUES: ClassVar[tuple[str, ...]] = (
        "wearing",
        "wears",
        "dressed in",
        "outfit",
        "mặc",
        "trang phục",
    )
    APPEARANCE_CUES: ClassVar[tuple[str, ...]] = (
        "hair",
        "hairstyle",
        "face",
        "facial",
        "tóc",
        "khuôn mặt",
        "gương mặt",
    )
    STOP_WORDS: ClassVar[frozenset[str]] = frozenset(
        {"and", "with", "the", "for", "very", "của", "với", "và"}
    )

    # Cue words describe what a scene talks about, never which outfit it is
    CUE_WORDS: ClassVar[frozenset[str]] = frozenset(WEARING_CUES + APPEARANCE_CUES)

    _host_terms = _term_pattern(HOST_TERMS)
    _wearing_cues = _term_pattern(WEARING_CUES)
    _appearance_cues = _term_pattern(APPEARANCE_CUES)

    @property
    def name(self) -> str:
        """Analyzer name."""
        return "consistency"

    @staticmethod
    def find_host(characters: Sequence[Character]) -> Character | None:
        """Return the first main character whose role is host."""
        return next(
            (
                c
                for c in characters
                if c.is_main and c.role.strip().lower() == "host"
            ),
            None,
        )

    def keyword_tokens(self, keywords: str | None) -> set[str]:
        """Split a keyword string into comparable lowercase tokens.

        Returns an empty set when the keyword string is too short to be
        meaningful.
        """
        if not keywords:
            return set()
        stripped = keywords.strip()
        if len(stripped) <= self.settings.consistency_min_keyword_length:
            return set()
        return {
            token
            for token in _TOKEN_SPLIT.split(stripped.lower())
            if len(token) >= 3
            and token not in self.STOP_WORDS
            and token not in self.CUE_WORDS
        }

    def references_host(self, text: str, host: Character) -> bool:
        """Whether the scene text mentions the host by name or role."""
        if _term_pattern([host.name]).search(text):
            return True
        return bool(self._host_terms.search(text))

    def analyze(
        self,
        scenes: Sequence[Scene],
        characters: Sequence[Character] = (),
    ) -> list[ConsistencyWarning]:
        """Analyzer entry point; see :meth:`check`."""
        return self.check(scenes, characters)

    def check(
        self,
        scenes: Sequence[Scene],
        characters: Sequence[Character],
    ) -> list[ConsistencyWarning]:
        """Check every scene referencing the host.

        Args:
            scenes: Scenes of one episode
            characters: Channel characters; the main host is selected from them

        Returns:
            Warnings ordered by scene order; empty when there is no main host
        """
        host = self.find_host(characters)
        if host is None:
            return []

        clothing = self.keyword_tokens(host.clothing_keywords)
        appearance = self.keyword_tokens(host.appearance_keywords)
        if not clothing and not appearance:
            return []
        clothing_terms = _term_pattern(sorted(clothing))
        appearance_terms = _term_pattern(sorted(appearance))

        warnings: list[ConsistencyWarning] = []
        for scene in sorted(scenes, key=lambda s: s.order):
            text = scene.prompt_text
            if not self.references_host(text, host):
                continue

            if (
                clothing
                and self._wearing_cues.search(text)
                and not clothing_terms.search(text)
            ):
                warnings.append(
                    ConsistencyWarning(
                        scene_id=scene.id,
                        scene_order=scene.order,
                        kind=ConsistencyWarningKind.OUTFIT_CHANGE,
                        message=(
                            f"Scene {scene.order} describes an outfit for "
                            f"{host.name} without their usual clothing"
                        ),
                    )
                )

            if (
                appearance
                and self._appearance_cues.search(text)
                and not appearance_terms.search(text)
            ):
                warnings.append(
                    ConsistencyWarning(
                        scene_id=scene.id,
                        scene_order=scene.order,
                        kind=ConsistencyWarningKind.APPEARANCE_MISMATCH,
                        message=(
                            f"Scene {scene.order} describes {host.name}'s "
                            "hair or face without their usual appearance"
                        ),
                    )
                )
        return warnings

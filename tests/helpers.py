"""Shared builders for test data."""

from episodeforge.models import Scene


def make_scenes(*ids: str, durations: list[float | None] | None = None) -> list[Scene]:
    """Build scenes with orders 1..N from ids."""
    durations = durations or [None] * len(ids)
    return [
        Scene(id=scene_id, order=order, title=f"Scene {scene_id}", duration_seconds=d)
        for order, (scene_id, d) in enumerate(zip(ids, durations, strict=True), 1)
    ]


def narration(text: str) -> str:
    """Wrap text in a voice-over marker the way generated prompts do."""
    return f"Wide shot of the market. [VOICEOVER in Vietnamese: {text}]"

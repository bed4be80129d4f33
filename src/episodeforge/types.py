"""Common type definitions and collaborator protocols for episodeforge."""

from collections.abc import Sequence
from typing import Protocol, TypeAlias, runtime_checkable

from episodeforge.models import (
    Category,
    Episode,
    EpisodeGenerationParams,
    Scene,
    SceneGenerationContext,
)

SceneID: TypeAlias = str
EpisodeID: TypeAlias = str
CategoryID: TypeAlias = str


@runtime_checkable
class EpisodeStore(Protocol):
    """Persistence collaborator owning episodes, scenes and categories.

    Every method is a single atomic write (or read). Implementations must assign
    episode numbers themselves instead of trusting a client-side count.
    """

    async def fetch_episode(self, episode_id: EpisodeID) -> Episode:
        """Return the episode or raise NotFoundError."""
        ...

    async def create_episode(self, episode: Episode) -> Episode:
        """Persist a generated episode and return the stored copy."""
        ...

    async def update_scene_order(
        self, episode_id: EpisodeID, ordered_scenes: Sequence[Scene]
    ) -> None:
        """Replace the scene order of an episode in one write."""
        ...

    async def add_scene(
        self, episode_id: EpisodeID, scene: Scene, before_order: int | None = None
    ) -> Episode:
        """Insert a scene and renumber in one write."""
        ...

    async def delete_scene(self, episode_id: EpisodeID, scene_id: SceneID) -> Episode:
        """Delete a scene and close the gap in one write."""
        ...

    async def create_category(self, name: str) -> Category:
        """Create a named category."""
        ...


@runtime_checkable
class ScriptGenerator(Protocol):
    """Black-box text generator producing episodes and scenes."""

    async def generate_episode(self, params: EpisodeGenerationParams) -> Episode:
        """Generate a complete episode."""
        ...

    async def generate_scene(self, context: SceneGenerationContext) -> Scene:
        """Generate a single scene fitting between its neighbours."""
        ...


@runtime_checkable
class BulkIdeaGenerator(Protocol):
    """Produces episode descriptions for a topic."""

    async def generate_ideas(self, topic: str, count: int) -> Sequence[str]:
        """Return up to ``count`` episode descriptions."""
        ...

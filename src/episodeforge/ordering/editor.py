"""Apply scene ordering operations to an episode store.

Each operation reads the episode once, computes the complete renumbered list
with the pure primitives, and performs exactly one write. A failure before the
write leaves the stored episode untouched.
"""

from __future__ import annotations

from episodeforge.config import get_logger, get_settings
from episodeforge.exceptions import GenerationError, NotFoundError
from episodeforge.models import Episode, Scene, SceneGenerationContext
from episodeforge.types import EpisodeStore, ScriptGenerator

from . import scene_order

logger = get_logger(__name__)


class SceneEditor:
    """Reorders, inserts and removes scenes of stored episodes."""

    def __init__(
        self, store: EpisodeStore, generator: ScriptGenerator | None = None
    ) -> None:
        """Initialize the editor.

        Args:
            store: Episode store receiving the writes
            generator: Optional script generator used by ``insert_generated``
        """
        self.store = store
        self.generator = generator

    async def reorder(
        self, episode_id: str, moved_id: str, target_id: str | scene_order.Placement
    ) -> list[Scene]:
        """Move a scene before another one (or to ``scene_order.END``)."""
        episode = await self.store.fetch_episode(episode_id)
        scenes = scene_order.reorder(episode.scenes, moved_id, target_id)
        if moved_id == target_id:
            return episode.ordered_scenes()

        await self.store.update_scene_order(episode_id, scenes)
        logger.info(
            "Reordered scene",
            episode_id=episode_id,
            scene_id=moved_id,
            target=target_id,
        )
        return scenes

    async def insert(
        self, episode_id: str, scene: Scene, before_order: int | None = None
    ) -> Episode:
        """Insert a scene, appending when ``before_order`` is empty."""
        episode = await self.store.fetch_episode(episode_id)
        # Validate against the current state before touching the store
        scene_order.insert_at(episode.scenes, scene, before_order)
        updated = await self.store.add_scene(episode_id, scene, before_order)
        logger.info(
            "Inserted scene",
            episode_id=episode_id,
            scene_id=scene.id,
            before_order=before_order,
        )
        return updated

    async def insert_generated(
        self, episode_id: str, instructions: str, before_order: int | None = None
    ) -> Episode:
        """Ask the script generator for a scene fitting its neighbours, then insert it.

        Raises:
            GenerationError: If no generator is configured or generation fails.
        """
        if self.generator is None:
            raise GenerationError(
                "Scene generation requested but no script generator is configured",
                collaborator="script_generator",
            )

        episode = await self.store.fetch_episode(episode_id)
        ordered = episode.ordered_scenes()
        position = before_order or len(ordered) + 1
        if before_order and not any(s.order == before_order for s in ordered):
            raise NotFoundError(
                f"No scene holds order {before_order}",
                entity="scene_order",
                entity_id=str(before_order),
            )

        context = SceneGenerationContext(
            episode_id=episode.id,
            episode_title=episode.title,
            insert_position=position,
            instructions=instructions,
            previous_scene=next((s for s in ordered if s.order == position - 1), None),
            next_scene=next((s for s in ordered if s.order == position), None),
        )
        try:
            scene = await self.generator.generate_scene(context)
        except Exception as e:
            logger.error("Scene generation failed", episode_id=episode_id, error=str(e))
            raise GenerationError(
                "Scene generation failed",
                collaborator="script_generator",
                original_error=e,
            ) from e

        if scene.duration_seconds is None:
            scene = scene.model_copy(
                update={"duration_seconds": get_settings().default_scene_duration}
            )
        return await self.insert(episode_id, scene, before_order)

    async def remove(self, episode_id: str, scene_id: str) -> Episode:
        """Delete a scene and close the order gap."""
        episode = await self.store.fetch_episode(episode_id)
        scene_order.remove_and_renumber(episode.scenes, scene_id)
        updated = await self.store.delete_scene(episode_id, scene_id)
        logger.info("Removed scene", episode_id=episode_id, scene_id=scene_id)
        return updated

"""In-memory episode store with optional JSON file persistence.

Reference implementation of the ``EpisodeStore`` protocol. Every write runs
under one asyncio lock, and episode numbers are assigned inside that lock, so
concurrent batch runs against the same store never hand out the same number.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from episodeforge.config import get_logger
from episodeforge.exceptions import NotFoundError, ValidationError
from episodeforge.models import Category, Episode, EpisodeStatus, Scene
from episodeforge.ordering import scene_order

logger = get_logger(__name__)


class InMemoryEpisodeStore:
    """Dictionary-backed store of episodes and categories."""

    def __init__(
        self,
        episodes: Sequence[Episode] | None = None,
        categories: Sequence[Category] | None = None,
        path: Path | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            episodes: Episodes to seed the store with
            categories: Categories to seed the store with
            path: Optional JSON file written by ``save``
        """
        self._episodes: dict[str, Episode] = {e.id: e for e in episodes or []}
        self._categories: dict[str, Category] = {c.id: c for c in categories or []}
        self._lock = asyncio.Lock()
        self.path = path

    # Persistence
    @classmethod
    def from_file(cls, path: Path) -> InMemoryEpisodeStore:
        """Load a store from a JSON collection file; a missing file is empty."""
        if not path.exists():
            return cls(path=path)
        with path.open(encoding="utf-8") as f:
            data: dict[str, Any] = json.load(f)
        return cls(
            episodes=[Episode.model_validate(e) for e in data.get("episodes", [])],
            categories=[
                Category.model_validate(c) for c in data.get("categories", [])
            ],
            path=path,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the whole collection."""
        return {
            "episodes": [e.to_payload() for e in self._episodes.values()],
            "categories": [c.to_payload() for c in self._categories.values()],
        }

    def save(self, path: Path | None = None) -> Path:
        """Write the collection to ``path`` (or the path it was loaded from)."""
        target = path or self.path
        if target is None:
            raise ValidationError(
                "No file path given for saving the episode store",
                hint="Pass a path or load the store with from_file()",
            )
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.debug("Saved episode store", path=str(target))
        return target

    # Reads
    @property
    def episodes(self) -> list[Episode]:
        """All episodes ordered by episode number."""
        return sorted(
            self._episodes.values(), key=lambda e: (e.episode_number or 0, e.title)
        )

    @property
    def categories(self) -> list[Category]:
        """All categories in creation order."""
        return list(self._categories.values())

    def _get(self, episode_id: str) -> Episode:
        try:
            return self._episodes[episode_id]
        except KeyError:
            raise NotFoundError(
                f"Episode '{episode_id}' not found",
                entity="episode",
                entity_id=episode_id,
            ) from None

    async def fetch_episode(self, episode_id: str) -> Episode:
        """Return the episode with its scenes in order."""
        episode = self._get(episode_id)
        return episode.model_copy(update={"scenes": episode.ordered_scenes()})

    # Writes
    async def create_episode(self, episode: Episode) -> Episode:
        """Persist a generated episode, assigning the next episode number."""
        if episode.category_id and episode.category_id not in self._categories:
            raise NotFoundError(
                f"Category '{episode.category_id}' not found",
                entity="category",
                entity_id=episode.category_id,
            )
        scenes = scene_order.renumber(episode.ordered_scenes())
        async with self._lock:
            if episode.id in self._episodes:
                raise ValidationError(
                    f"Episode '{episode.id}' already exists",
                    details={"episode_id": episode.id},
                )
            number = max(
                (e.episode_number or 0 for e in self._episodes.values()), default=0
            )
            stored = episode.model_copy(
                update={
                    "episode_number": number + 1,
                    "scenes": scenes,
                    "status": (
                        EpisodeStatus.COMPLETED if scenes else EpisodeStatus.DRAFT
                    ),
                }
            )
            self._episodes[stored.id] = stored
        logger.info(
            "Created episode",
            episode_id=stored.id,
            episode_number=stored.episode_number,
            scenes=len(scenes),
        )
        return stored

    async def update_scene_order(
        self, episode_id: str, ordered_scenes: Sequence[Scene]
    ) -> None:
        """Replace the scene list in one write after validating the order."""
        scene_order.validate_order(ordered_scenes)
        async with self._lock:
            episode = self._get(episode_id)
            current_ids = {s.id for s in episode.scenes}
            new_ids = {s.id for s in ordered_scenes}
            if current_ids != new_ids:
                raise ValidationError(
                    "Scene order update must contain exactly the episode's scenes",
                    details={
                        "missing": sorted(current_ids - new_ids),
                        "unexpected": sorted(new_ids - current_ids),
                    },
                )
            self._episodes[episode_id] = episode.model_copy(
                update={"scenes": sorted(ordered_scenes, key=lambda s: s.order)}
            )

    async def add_scene(
        self, episode_id: str, scene: Scene, before_order: int | None = None
    ) -> Episode:
        """Insert a scene and renumber in one write."""
        async with self._lock:
            episode = self._get(episode_id)
            scenes = scene_order.insert_at(episode.scenes, scene, before_order)
            updated = episode.model_copy(update={"scenes": scenes})
            self._episodes[episode_id] = updated
        return updated

    async def delete_scene(self, episode_id: str, scene_id: str) -> Episode:
        """Delete a scene and close the gap in one write."""
        async with self._lock:
            episode = self._get(episode_id)
            scenes = scene_order.remove_and_renumber(episode.scenes, scene_id)
            updated = episode.model_copy(update={"scenes": scenes})
            self._episodes[episode_id] = updated
        return updated

    async def create_category(self, name: str) -> Category:
        """Create a category; blank names are rejected."""
        if not name or not name.strip():
            raise ValidationError("Category name cannot be empty")
        async with self._lock:
            category = Category(name=name.strip())
            self._categories[category.id] = category
        logger.info("Created category", category_id=category.id, name=category.name)
        return category

"""Pure reindexing primitives keeping scene orders contiguous.

Every function takes the current scene list, never mutates it, and returns a
complete new list whose ``order`` values are exactly ``1..N``. Callers must
write that list to the store in one update so readers never observe a gap or a
duplicate order.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Final

from episodeforge.exceptions import NotFoundError, ValidationError
from episodeforge.models import Scene


class Placement(Enum):
    """Reorder targets that are not scene ids."""

    END = "end"


END: Final = Placement.END


def _in_order(scenes: Sequence[Scene]) -> list[Scene]:
    """Sort by current order and reject duplicate ids."""
    seen: set[str] = set()
    for scene in scenes:
        if scene.id in seen:
            raise ValidationError(
                f"Duplicate scene id '{scene.id}' in scene list",
                details={"scene_id": scene.id},
            )
        seen.add(scene.id)
    # sorted() is stable, so scenes sharing an order keep their list position
    return sorted(scenes, key=lambda scene: scene.order)


def _index_of(scenes: Sequence[Scene], scene_id: str) -> int:
    for index, scene in enumerate(scenes):
        if scene.id == scene_id:
            return index
    raise NotFoundError(
        f"Scene '{scene_id}' not found", entity="scene", entity_id=scene_id
    )


def renumber(scenes: Sequence[Scene]) -> list[Scene]:
    """Assign orders 1..N following the given list position."""
    return [
        scene
        if scene.order == position
        else scene.model_copy(update={"order": position})
        for position, scene in enumerate(scenes, start=1)
    ]


def validate_order(scenes: Sequence[Scene]) -> None:
    """Check that the orders of ``scenes`` are exactly ``{1..N}``.

    Raises:
        ValidationError: If an order is missing or repeated.
    """
    orders = sorted(scene.order for scene in scenes)
    expected = list(range(1, len(scenes) + 1))
    if orders != expected:
        raise ValidationError(
            "Scene orders must be contiguous starting at 1",
            details={"orders": orders, "expected": expected},
        )


def reorder(
    scenes: Sequence[Scene], moved_id: str, target_id: str | Placement
) -> list[Scene]:
    """Move a scene to just before another scene, or to the end.

    Args:
        scenes: Current scenes of one episode
        moved_id: Id of the scene being moved
        target_id: Id of the scene the moved scene should precede, or ``END``

    Returns:
        The renumbered scene list; ``scenes`` itself when the ids are equal.

    Raises:
        NotFoundError: If either id is not in ``scenes``.
    """
    ordered = _in_order(scenes)
    moved_index = _index_of(ordered, moved_id)
    if target_id is not END:
        _index_of(ordered, target_id)

    if moved_id == target_id:
        return list(scenes)

    moved = ordered.pop(moved_index)
    if target_id is END:
        ordered.append(moved)
    else:
        ordered.insert(_index_of(ordered, target_id), moved)
    return renumber(ordered)


def insert_at(
    scenes: Sequence[Scene], new_scene: Scene, before_order: int | None = None
) -> list[Scene]:
    """Insert a scene before the scene holding ``before_order``.

    Args:
        scenes: Current scenes of one episode
        new_scene: Scene to insert; its own order value is ignored
        before_order: Order of the scene to insert in front of; ``None`` or
            ``0`` appends

    Returns:
        The renumbered scene list.

    Raises:
        NotFoundError: If no scene holds ``before_order``.
        ValidationError: If ``new_scene`` reuses an existing id.
    """
    ordered = _in_order(scenes)
    if any(scene.id == new_scene.id for scene in ordered):
        raise ValidationError(
            f"Scene '{new_scene.id}' is already part of the episode",
            details={"scene_id": new_scene.id},
        )

    if not before_order:
        ordered.append(new_scene)
        return renumber(ordered)

    for index, scene in enumerate(ordered):
        if scene.order == before_order:
            ordered.insert(index, new_scene)
            return renumber(ordered)

    raise NotFoundError(
        f"No scene holds order {before_order}",
        entity="scene_order",
        entity_id=str(before_order),
        hint=f"Use an order between 1 and {len(ordered)}, or 0 to append",
    )


def remove_and_renumber(scenes: Sequence[Scene], scene_id: str) -> list[Scene]:
    """Remove a scene and close the resulting gap.

    Raises:
        NotFoundError: If ``scene_id`` is not in ``scenes``.
    """
    ordered = _in_order(scenes)
    del ordered[_index_of(ordered, scene_id)]
    return renumber(ordered)

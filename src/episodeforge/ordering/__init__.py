"""Scene ordering primitives and their store-backed editor."""

from __future__ import annotations

from .editor import SceneEditor
from .scene_order import (
    END,
    Placement,
    insert_at,
    remove_and_renumber,
    renumber,
    reorder,
    validate_order,
)

__all__ = [
    "END",
    "Placement",
    "SceneEditor",
    "insert_at",
    "remove_and_renumber",
    "renumber",
    "reorder",
    "validate_order",
]

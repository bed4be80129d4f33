"""Episode store implementations."""

from __future__ import annotations

from .memory import InMemoryEpisodeStore

__all__ = ["InMemoryEpisodeStore"]

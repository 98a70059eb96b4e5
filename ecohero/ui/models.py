"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass

from ecohero.core.content import Level, World


@dataclass
class LevelState:
    """UI state for a single level: best stars, unlock status, and selection."""

    level: Level
    unlocked: bool
    stars: int
    completed: bool
    is_current: bool = False


@dataclass
class WorldState:
    """UI state for a world card on the map."""

    world: World
    unlocked: bool
    stars: int
    max_stars: int
    completed_levels: int
    total_levels: int

    @property
    def complete(self) -> bool:
        return self.total_levels > 0 and self.completed_levels >= self.total_levels

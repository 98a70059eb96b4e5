"""Star totals and unlock predicates.

Everything here is recomputed from the current level progress on every call;
nothing is cached.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ecohero.core.content import ContentRepository, Level
from ecohero.core.state import LevelProgress, PlayerState


def get_total_stars(level_progress: Mapping[str, LevelProgress]) -> int:
    return sum(record.stars for record in level_progress.values())


def get_world_stars(
    level_progress: Mapping[str, LevelProgress],
    world_id: str,
    levels: Optional[Iterable[Level]] = None,
) -> int:
    """Sum of stars over every level of ``world_id``.

    With ``levels`` the world's membership comes from the level table;
    without it, level ids are matched on the ``"<world_id>-"`` prefix.
    """
    if levels is not None:
        ids = {lv.id for lv in levels if lv.world_id == world_id}
        return sum(record.stars for key, record in level_progress.items() if key in ids)
    prefix = f"{world_id}-"
    return sum(record.stars for key, record in level_progress.items() if key.startswith(prefix))


def is_world_complete(
    level_progress: Mapping[str, LevelProgress],
    world_id: str,
    levels: Iterable[Level],
) -> bool:
    world_levels = [lv for lv in levels if lv.world_id == world_id]
    if not world_levels:
        return False
    for level in world_levels:
        record = level_progress.get(level.id)
        if record is None or not record.completed:
            return False
    return True


def is_level_unlocked(state: PlayerState, content: ContentRepository, level_id: str) -> bool:
    level = content.get_level(level_id)
    if level is None:
        return False
    if level.stars_required <= 0:
        return True
    world_stars = get_world_stars(state.level_progress, level.world_id, content.all_levels())
    return world_stars >= level.stars_required


def is_world_unlocked(state: PlayerState, content: ContentRepository, world_id: str) -> bool:
    world = content.get_world(world_id)
    if world is None:
        return False
    if world.stars_to_unlock <= 0:
        return True
    return get_total_stars(state.level_progress) >= world.stars_to_unlock


def is_level_playable(state: PlayerState, content: ContentRepository, level_id: str) -> bool:
    """True when both the level and the world it belongs to are unlocked."""
    level = content.get_level(level_id)
    if level is None:
        return False
    return is_world_unlocked(state, content, level.world_id) and is_level_unlocked(state, content, level_id)

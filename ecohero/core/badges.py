"""Badge award rules.

Each badge in the catalog names a condition ``kind`` plus parameters. The
kind is looked up in :data:`CONDITIONS` and evaluated against the player
state and the content tables, so new badges only need catalog entries.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Tuple

from ecohero.core.state import PlayerState

if TYPE_CHECKING:
    from ecohero.core.content import BadgeDefinition, ContentRepository

logger = logging.getLogger(__name__)

Condition = Callable[[PlayerState, "ContentRepository", Mapping[str, Any]], bool]


def _any_level_completed(state: PlayerState, content: ContentRepository, params: Mapping[str, Any]) -> bool:
    return any(record.completed for record in state.level_progress.values())


def _world_completed(state: PlayerState, content: ContentRepository, params: Mapping[str, Any]) -> bool:
    levels = content.levels_for_world(str(params["world"]))
    if not levels:
        return False
    return all(_is_completed(state, level.id) for level in levels)


def _level_stars_at_least(state: PlayerState, content: ContentRepository, params: Mapping[str, Any]) -> bool:
    target = int(params["stars"])
    return any(record.stars >= target for record in state.level_progress.values())


def _correct_answers_at_least(state: PlayerState, content: ContentRepository, params: Mapping[str, Any]) -> bool:
    return state.total_correct_answers >= int(params["count"])


def _all_levels_completed(state: PlayerState, content: ContentRepository, params: Mapping[str, Any]) -> bool:
    levels = content.all_levels()
    if not levels:
        return False
    return all(_is_completed(state, level.id) for level in levels)


def _green_score_at_least(state: PlayerState, content: ContentRepository, params: Mapping[str, Any]) -> bool:
    return state.green_score >= int(params["points"])


def _is_completed(state: PlayerState, level_id: str) -> bool:
    record = state.level_progress.get(level_id)
    return record is not None and record.completed


CONDITIONS: Dict[str, Tuple[Condition, Tuple[str, ...]]] = {
    "any_level_completed": (_any_level_completed, ()),
    "world_completed": (_world_completed, ("world",)),
    "level_stars_at_least": (_level_stars_at_least, ("stars",)),
    "correct_answers_at_least": (_correct_answers_at_least, ("count",)),
    "all_levels_completed": (_all_levels_completed, ()),
    "green_score_at_least": (_green_score_at_least, ("points",)),
}


def validate_condition(kind: str, params: Mapping[str, Any]) -> None:
    """Raise ValueError if ``kind`` is unknown or a required parameter is missing."""
    if kind not in CONDITIONS:
        raise ValueError(f"unknown badge condition {kind!r}")
    _, required = CONDITIONS[kind]
    missing = [name for name in required if name not in params]
    if missing:
        raise ValueError(f"badge condition {kind!r} is missing {', '.join(missing)}")


def condition_met(badge: BadgeDefinition, state: PlayerState, content: ContentRepository) -> bool:
    check, _ = CONDITIONS[badge.kind]
    return check(state, content, badge.params)


def evaluate_badges(state: PlayerState, content: ContentRepository) -> List[str]:
    """Award every catalog badge whose condition now holds.

    Earned badges are appended to ``state.badges`` in catalog order and
    returned. Badges already held are never re-checked or removed.
    """
    earned: List[str] = []
    held = set(state.badges)
    for badge in content.badges():
        if badge.id in held:
            continue
        if condition_met(badge, state, content):
            state.badges.append(badge.id)
            held.add(badge.id)
            earned.append(badge.id)
            logger.info("Badge earned: %s", badge.id)
    return earned

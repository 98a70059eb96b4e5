from __future__ import annotations

import logging
from typing import Optional

from ecohero.core.badges import evaluate_badges
from ecohero.core.content import ContentRepository, Level
from ecohero.core.stars import calculate_stars, clamp_stars, green_points
from ecohero.core.state import LevelProgress, PlayerState
from ecohero.core.unlocks import get_total_stars

logger = logging.getLogger(__name__)


class ProgressStore:
    """In-memory player progress. The only place PlayerState is mutated.

    Stars per level only ever go up: a worse attempt updates the "last
    result" score fields but keeps the best star count.
    """

    def __init__(self, content: ContentRepository, state: Optional[PlayerState] = None) -> None:
        self._content = content
        self._state = state if state is not None else PlayerState()

    @property
    def player(self) -> PlayerState:
        return self._state

    @property
    def total_stars(self) -> int:
        return get_total_stars(self._state.level_progress)

    def get_level_progress(self, level_id: str) -> LevelProgress:
        return self._state.level_progress.get(level_id, LevelProgress())

    def complete_level(
        self,
        level_id: str,
        score: float,
        max_score: float,
        correct_answers: Optional[int] = None,
    ) -> int:
        """Record a graded attempt and return the level's best star count."""
        level = self._content.get_level(level_id)
        if level is None:
            logger.warning("Ignoring completion for unknown level %r", level_id)
            return 0
        stars = calculate_stars(score, max_score)
        return self._merge(level, stars, score, max_score, correct_answers)

    def record_level_complete(self, level_id: str, stars: int, score: float, max_score: float) -> int:
        """Record an attempt whose star count was decided by the mini-game itself."""
        level = self._content.get_level(level_id)
        if level is None:
            logger.warning("Ignoring completion for unknown level %r", level_id)
            return 0
        return self._merge(level, clamp_stars(stars), score, max_score, None)

    def reset(self) -> None:
        """Clear all progress. Only called when user presses reset progress."""
        self._state = PlayerState()
        evaluate_badges(self._state, self._content)

    def snapshot(self) -> PlayerState:
        return self._state.copy()

    def _merge(
        self,
        level: Level,
        stars: int,
        score: float,
        max_score: float,
        correct_answers: Optional[int],
    ) -> int:
        state = self._state
        record = state.level_progress.get(level.id)
        if record is None:
            record = LevelProgress()
            state.level_progress[level.id] = record

        record.completed = True
        record.stars = max(record.stars, stars)
        record.score = score
        record.max_score = max_score
        record.high_score = max(record.high_score, score)
        if correct_answers is not None:
            record.correct_answers = correct_answers

        state.total_correct_answers += max(0, int(correct_answers or 0))
        state.green_score += green_points(stars, self._content.green_points_per_star(level.type))
        state.current_world_id = level.world_id

        logger.info("Level %s completed: %d star(s) this attempt, best %d", level.id, stars, record.stars)
        evaluate_badges(state, self._content)
        return record.stars

from __future__ import annotations

import logging
import time
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from ecohero.core.content import ContentRepository
from ecohero.core.errors import ProgressResetError, StorageError
from ecohero.core.progress import ProgressStore
from ecohero.core.stars import MAX_STARS
from ecohero.core.state import LevelProgress, PlayerState
from ecohero.core.storage import ProgressFile
from ecohero.core.unlocks import get_world_stars, is_level_playable, is_level_unlocked, is_world_unlocked
from ecohero.core.writer import SnapshotWriter
from ecohero.ui.models import LevelState, WorldState

logger = logging.getLogger(__name__)

RESET_ATTEMPTS = 3
RESET_RETRY_DELAY = 0.2
RESET_FLUSH_TIMEOUT_MS = 2000


class GameProgress(QObject):
    """Progression API used by the screens.

    Owns the single in-memory PlayerState. Mutations update memory, hand a
    snapshot to the background writer and then emit ``progressChanged``;
    the UI never waits on disk.
    """

    progressChanged = Signal()
    levelCompleted = Signal(str, int)
    badgeEarned = Signal(str)

    def __init__(
        self,
        content: ContentRepository,
        storage: Optional[ProgressFile] = None,
        writer: Optional[SnapshotWriter] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._content = content
        self._storage = storage if storage is not None else ProgressFile()
        self._store = ProgressStore(content, self._storage.load())
        self._writer = writer if writer is not None else SnapshotWriter(self._storage)

    @property
    def content(self) -> ContentRepository:
        return self._content

    @property
    def player(self) -> PlayerState:
        return self._store.player

    @property
    def total_stars(self) -> int:
        return self._store.total_stars

    def get_level_progress(self, level_id: str) -> LevelProgress:
        return self._store.get_level_progress(level_id)

    def world_stars(self, world_id: str) -> int:
        return get_world_stars(self.player.level_progress, world_id, self._content.all_levels())

    def complete_level(
        self,
        level_id: str,
        score: float,
        max_score: float,
        correct_answers: Optional[int] = None,
    ) -> int:
        """Record a mini-game result. Returns the best star count for the level."""
        badges_before = len(self.player.badges)
        best = self._store.complete_level(level_id, score, max_score, correct_answers)
        if self._content.get_level(level_id) is not None:
            self._after_completion(level_id, best, badges_before)
        return best

    def record_level_complete(self, level_id: str, stars: int, score: float, max_score: float) -> None:
        """Record a result for a level that decides its own star count."""
        badges_before = len(self.player.badges)
        best = self._store.record_level_complete(level_id, stars, score, max_score)
        if self._content.get_level(level_id) is not None:
            self._after_completion(level_id, best, badges_before)

    def is_level_unlocked(self, level_id: str) -> bool:
        return is_level_unlocked(self.player, self._content, level_id)

    def is_world_unlocked(self, world_id: str) -> bool:
        return is_world_unlocked(self.player, self._content, world_id)

    def is_level_playable(self, level_id: str) -> bool:
        return is_level_playable(self.player, self._content, level_id)

    def reset_progress(self) -> None:
        """Wipe all progress in memory and on disk.

        Memory is always reset. Clearing the saved file is retried a few
        times, and an attempt fails if a write still in flight does not
        finish in time. If every attempt fails ProgressResetError is raised
        so the caller can tell the player.
        """
        self._writer.cancel_pending()
        self._store.reset()
        self.progressChanged.emit()

        last_error: Optional[StorageError] = None
        for attempt in range(1, RESET_ATTEMPTS + 1):
            try:
                if not self._writer.flush(RESET_FLUSH_TIMEOUT_MS):
                    raise StorageError(f"a progress write did not finish within {RESET_FLUSH_TIMEOUT_MS} ms")
                self._storage.reset()
                logger.info("Progress reset")
                return
            except StorageError as e:
                last_error = e
                logger.warning("Reset attempt %d/%d failed: %s", attempt, RESET_ATTEMPTS, e)
                if attempt < RESET_ATTEMPTS:
                    time.sleep(RESET_RETRY_DELAY)
        raise ProgressResetError(str(last_error)) from last_error

    def flush(self, timeout_ms: int = -1) -> bool:
        """Wait for queued writes (e.g. on app exit)."""
        return self._writer.flush(timeout_ms)

    def level_states(self, world_id: str) -> List[LevelState]:
        """Unlock/completion state for every level of a world, marking the next one to play."""
        states: List[LevelState] = []
        for level in self._content.levels_for_world(world_id):
            record = self._store.get_level_progress(level.id)
            states.append(
                LevelState(
                    level=level,
                    unlocked=self.is_level_unlocked(level.id),
                    stars=record.stars,
                    completed=record.completed,
                )
            )
        for st in states:
            if st.unlocked and not st.completed:
                st.is_current = True
                break
        return states

    def world_states(self) -> List[WorldState]:
        states: List[WorldState] = []
        for world in self._content.all_worlds():
            levels = self._content.levels_for_world(world.id)
            completed = sum(1 for lv in levels if self._store.get_level_progress(lv.id).completed)
            states.append(
                WorldState(
                    world=world,
                    unlocked=self.is_world_unlocked(world.id),
                    stars=self.world_stars(world.id),
                    max_stars=MAX_STARS * len(levels),
                    completed_levels=completed,
                    total_levels=len(levels),
                )
            )
        return states

    def _after_completion(self, level_id: str, best: int, badges_before: int) -> None:
        new_badges = self.player.badges[badges_before:]
        self._writer.enqueue(self._store.snapshot())
        self.progressChanged.emit()
        self.levelCompleted.emit(level_id, best)
        for badge_id in new_badges:
            self.badgeEarned.emit(badge_id)

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

from ecohero.core.errors import StorageError
from ecohero.core.stars import clamp_stars
from ecohero.core.state import DEFAULT_PLAYER_NAME, DEFAULT_WORLD_ID, LevelProgress, PlayerState

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def default_progress_path() -> Path:
    return Path.home() / ".ecohero" / "progress.json"


class ProgressFile:
    """Single-snapshot persistence for PlayerState.

    File: ~/.ecohero/progress.json unless another path is given. Every save
    replaces the whole file atomically, so a crash mid-write leaves either
    the previous snapshot or the new one on disk.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._file_path = Path(path) if path is not None else default_progress_path()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> Optional[PlayerState]:
        """Return the saved state, or None on first run or unreadable data."""
        if not self._file_path.exists():
            return None
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError, RecursionError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return None
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress in %s: expected a JSON object", self._file_path)
            return None
        try:
            return state_from_payload(payload)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning("Could not parse progress from %s: %s", self._file_path, e)
            return None

    def save(self, state: PlayerState) -> None:
        data = json.dumps(state_to_payload(state), indent=2)
        directory = self._file_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".progress-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(data)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, self._file_path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Could not save progress to {self._file_path}: {e}") from e

    def reset(self) -> None:
        try:
            self._file_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Could not clear progress at {self._file_path}: {e}") from e


def state_to_payload(state: PlayerState) -> Dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "name": state.name,
        "green_score": state.green_score,
        "total_correct_answers": state.total_correct_answers,
        "current_world_id": state.current_world_id,
        "level_progress": {key: asdict(value) for key, value in state.level_progress.items()},
        "badges": list(state.badges),
    }


def state_from_payload(payload: Dict[str, Any]) -> PlayerState:
    version = payload.get("version", SNAPSHOT_VERSION)
    if isinstance(version, int) and version > SNAPSHOT_VERSION:
        logger.warning("Progress snapshot version %s is newer than %s; reading what we can", version, SNAPSHOT_VERSION)

    levels: Dict[str, LevelProgress] = {}
    raw_levels = payload.get("level_progress", {})
    if isinstance(raw_levels, dict):
        for key, value in raw_levels.items():
            if not isinstance(value, dict):
                continue
            correct = value.get("correct_answers")
            levels[str(key)] = LevelProgress(
                completed=value.get("completed") is True,
                stars=clamp_stars(value.get("stars", 0)),
                score=float(value.get("score", 0)),
                max_score=float(value.get("max_score", 0)),
                high_score=float(value.get("high_score", value.get("score", 0))),
                correct_answers=int(correct) if correct is not None else None,
            )

    badges = []
    raw_badges = payload.get("badges", [])
    if isinstance(raw_badges, list):
        for badge_id in raw_badges:
            badge_id = str(badge_id)
            if badge_id not in badges:
                badges.append(badge_id)

    return PlayerState(
        name=str(payload.get("name", DEFAULT_PLAYER_NAME)),
        green_score=max(0, int(payload.get("green_score", 0))),
        total_correct_answers=max(0, int(payload.get("total_correct_answers", 0))),
        level_progress=levels,
        badges=badges,
        current_world_id=str(payload.get("current_world_id", DEFAULT_WORLD_ID)),
    )

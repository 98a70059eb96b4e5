"""Shared fixtures: a Qt core application and small in-code content tables."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from PySide6.QtCore import QCoreApplication

from ecohero.core.content import BadgeDefinition, ContentRepository, Level, World
from ecohero.core.game import GameProgress
from ecohero.core.storage import ProgressFile


@pytest.fixture(scope="session", autouse=True)
def qapp() -> QCoreApplication:
    return QCoreApplication.instance() or QCoreApplication([])


def make_content() -> ContentRepository:
    worlds = [
        World(id="w1", order=1, title="Rising Waters", stars_to_unlock=0),
        World(id="w2", order=2, title="Green Builder", stars_to_unlock=3),
        World(id="w5", order=5, title="Window Wise", stars_to_unlock=6),
        World(id="w7", order=7, title="Build Your Home", stars_to_unlock=0),
    ]
    levels = [
        Level(id="w1-l1", world_id="w1", order=1, type="quiz", stars_required=0),
        Level(id="w1-l2", world_id="w1", order=2, type="flood-defense", stars_required=1),
        Level(id="w1-l3", world_id="w1", order=3, type="quiz", stars_required=3),
        Level(id="w2-l1", world_id="w2", order=1, type="quiz", stars_required=0),
        Level(id="w2-l2", world_id="w2", order=2, type="sorting", stars_required=0),
        Level(id="w5-l1", world_id="w5", order=1, type="windows", stars_required=0),
        Level(id="w7-l1", world_id="w7", order=1, type="exploration", stars_required=0),
    ]
    badges = [
        BadgeDefinition(id="first-star", kind="any_level_completed"),
        BadgeDefinition(id="flood-novice", kind="world_completed", params={"world": "w1"}),
        BadgeDefinition(id="perfect-score", kind="level_stars_at_least", params={"stars": 3}),
        BadgeDefinition(id="quiz-master", kind="correct_answers_at_least", params={"count": 20}),
        BadgeDefinition(id="eco-hero", kind="all_levels_completed"),
        BadgeDefinition(id="green-score-100", kind="green_score_at_least", params={"points": 100}),
    ]
    return ContentRepository(levels, worlds, badges, {"default": 5, "sorting": 50})


@pytest.fixture()
def content() -> ContentRepository:
    return make_content()


@pytest.fixture()
def progress_file(tmp_path: Path) -> ProgressFile:
    """ProgressFile backed by a temp file so tests don't touch ~/.ecohero."""
    return ProgressFile(tmp_path / "progress.json")


@pytest.fixture()
def game(content: ContentRepository, progress_file: ProgressFile) -> Iterator[GameProgress]:
    g = GameProgress(content, progress_file)
    yield g
    g.flush()

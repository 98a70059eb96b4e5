"""Tests for ecohero.core.badges – data-driven badge rules."""

from __future__ import annotations

import pytest

from ecohero.core.badges import CONDITIONS, evaluate_badges, validate_condition
from ecohero.core.content import BadgeDefinition, ContentRepository, Level, World
from ecohero.core.state import LevelProgress, PlayerState


def _done(stars: int = 1) -> LevelProgress:
    return LevelProgress(completed=True, stars=stars, score=1, max_score=3)


# ---------------------------------------------------------------------------
# validate_condition
# ---------------------------------------------------------------------------

class TestValidateCondition:
    def test_known_kinds(self):
        assert set(CONDITIONS) == {
            "any_level_completed",
            "world_completed",
            "level_stars_at_least",
            "correct_answers_at_least",
            "all_levels_completed",
            "green_score_at_least",
        }

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="unknown badge condition"):
            validate_condition("collect_stamps", {})

    def test_missing_param(self):
        with pytest.raises(ValueError, match="missing world"):
            validate_condition("world_completed", {})

    def test_repository_rejects_bad_badge(self):
        with pytest.raises(ValueError):
            ContentRepository([], [], [BadgeDefinition(id="x", kind="nope")])


# ---------------------------------------------------------------------------
# evaluate_badges
# ---------------------------------------------------------------------------

class TestEvaluateBadges:
    def test_fresh_state_earns_nothing(self, content: ContentRepository):
        state = PlayerState()
        assert evaluate_badges(state, content) == []
        assert state.badges == []

    def test_first_completion(self, content: ContentRepository):
        state = PlayerState(level_progress={"w1-l1": _done(1)})
        assert evaluate_badges(state, content) == ["first-star"]

    def test_perfect_score(self, content: ContentRepository):
        state = PlayerState(level_progress={"w1-l1": _done(3)})
        assert evaluate_badges(state, content) == ["first-star", "perfect-score"]

    def test_world_completed(self, content: ContentRepository):
        state = PlayerState(level_progress={lid: _done() for lid in ("w1-l1", "w1-l2", "w1-l3")})
        assert "flood-novice" in evaluate_badges(state, content)

    def test_world_partially_completed(self, content: ContentRepository):
        state = PlayerState(level_progress={"w1-l1": _done(), "w1-l2": _done()})
        assert "flood-novice" not in evaluate_badges(state, content)

    def test_correct_answers_threshold(self, content: ContentRepository):
        state = PlayerState(total_correct_answers=19)
        assert "quiz-master" not in evaluate_badges(state, content)
        state.total_correct_answers = 20
        assert "quiz-master" in evaluate_badges(state, content)

    def test_green_score_threshold(self, content: ContentRepository):
        state = PlayerState(green_score=100)
        assert evaluate_badges(state, content) == ["green-score-100"]

    def test_all_levels_completed(self, content: ContentRepository):
        state = PlayerState(level_progress={lv.id: _done() for lv in content.all_levels()})
        assert "eco-hero" in evaluate_badges(state, content)

    def test_idempotent(self, content: ContentRepository):
        state = PlayerState(level_progress={"w1-l1": _done(3)}, total_correct_answers=25)
        evaluate_badges(state, content)
        first = list(state.badges)
        assert evaluate_badges(state, content) == []
        assert state.badges == first

    def test_earned_badges_are_not_removed(self, content: ContentRepository):
        state = PlayerState(badges=["quiz-master"])
        evaluate_badges(state, content)
        assert state.badges == ["quiz-master"]

    def test_empty_world_never_completes(self):
        repo = ContentRepository(
            [Level(id="w1-l1", world_id="w1", order=1)],
            [World(id="w1", order=1), World(id="w9", order=9)],
            [BadgeDefinition(id="ghost", kind="world_completed", params={"world": "w9"})],
        )
        state = PlayerState(level_progress={"w1-l1": _done()})
        assert evaluate_badges(state, repo) == []

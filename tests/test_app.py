"""Tests for ecohero.app – entry point and profile summary."""

from __future__ import annotations

from pathlib import Path

import pytest

from ecohero import app as app_module
from ecohero.core.game import GameProgress
from ecohero.core.storage import ProgressFile


class TestFormatSummary:
    def test_fresh_profile(self, game: GameProgress):
        text = app_module.format_summary(game)
        assert "Total stars: 0" in text
        assert "Badges: none yet" in text
        assert "w5" in text and "locked (6 stars)" in text

    def test_after_progress(self, game: GameProgress):
        game.complete_level("w1-l1", 3, 3)
        text = app_module.format_summary(game)
        assert "Total stars: 3" in text
        assert "Green score: 15" in text
        assert "Badges: first-star, perfect-score" in text


class TestRun:
    def test_run_prints_summary(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ):
        monkeypatch.setattr(app_module, "ProgressFile", lambda: ProgressFile(tmp_path / "progress.json"))
        app_module.run([])
        out = capsys.readouterr().out
        assert "Player: EcoHero" in out
        assert "Rising Waters" in out

    def test_run_reset(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
        path = tmp_path / "progress.json"
        path.write_text('{"green_score": 40}', encoding="utf-8")
        monkeypatch.setattr(app_module, "ProgressFile", lambda: ProgressFile(path))
        app_module.run(["--reset"])
        assert "Green score: 0" in capsys.readouterr().out
        assert not path.exists()

"""Tests for the kidlearn command-line interface."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from kidlearn.cli import main


@pytest.fixture
def run(tmp_path, monkeypatch):
    for var in ("KIDLEARN_DATA_DIR", "KIDLEARN_STORAGE_BACKEND", "KIDLEARN_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    runner = CliRunner()
    base = [
        "--config", str(tmp_path / "config.yaml"),
        "--data-dir", str(tmp_path / "data"),
        "--storage", "json",
    ]

    def _run(*args, **kwargs):
        return runner.invoke(main, base + list(args), **kwargs)

    return _run


def test_init(run, tmp_path):
    result = run("init", "c1")
    assert result.exit_code == 0, result.output
    assert "Initialized c1 at level 2 (Easy)" in result.output
    assert (tmp_path / "data" / "settings" / "adaptive_settings_c1.json").exists()


def test_record_without_change(run):
    result = run(
        "record", "c1", "--module", "reading", "--activity", "story-1",
        "--accuracy", "1.0", "--speed", "1.0", "--engagement", "1.0",
    )
    assert result.exit_code == 0, result.output
    assert "Difficulty stays at 2 (Easy)" in result.output


def test_record_requires_scores(run):
    result = run("record", "c1", "--accuracy", "0.5")
    assert result.exit_code != 0
    assert "--speed" in result.output


def test_record_reports_change(run, fast_controller):
    result = run(
        "record", "c1", "--accuracy", "0.95", "--speed", "0.9", "--engagement", "0.95",
        obj={"controller": fast_controller},
    )
    assert result.exit_code == 0, result.output
    assert "Difficulty changed: 2 (Easy) -> 3 (Medium)" in result.output


def test_level(run):
    result = run("level", "c1")
    assert result.exit_code == 0, result.output
    assert "Level 2: Easy" in result.output
    assert "attempts:   5" in result.output


def test_insights_persisted_between_runs(run):
    for _ in range(2):
        run(
            "record", "c1", "--accuracy", "0.95", "--speed", "0.5",
            "--engagement", "0.4", "--attempts", "6",
        )
    result = run("insights", "c1")
    assert result.exit_code == 0, result.output
    assert "Current level: 2 (Easy)" in result.output
    assert "Build confidence and advance to Medium level" in result.output
    assert "ready for more challenging content" in result.output
    assert "keep you engaged" in result.output
    assert "Take your time" in result.output


def test_reset(run, tmp_path):
    run("record", "c1", "--accuracy", "0.5", "--speed", "0.5", "--engagement", "0.5")
    result = run("reset", "c1")
    assert result.exit_code == 0, result.output
    assert "Reset c1 to level 2 (Easy)" in result.output
    doc = (tmp_path / "data" / "settings" / "adaptive_settings_c1.json").read_text()
    assert '"performanceHistory": []' in doc


def test_levels(run):
    result = run("levels")
    assert result.exit_code == 0, result.output
    for name in ("Very Easy", "Easy", "Medium", "Hard", "Expert"):
        assert name in result.output

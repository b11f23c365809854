"""Smoke test for the local dry-run analysis CLI."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "scripts/dry_run_analyze.py", *args],
        cwd=ROOT,
        capture_output=True,
        text=True,
    )


def _sample_source(tmp_path: Path) -> Path:
    source = tmp_path / "user.rb"
    source.write_text(
        "class User < ApplicationRecord\n  has_many :posts\nend", encoding="utf-8"
    )
    return source


def test_dry_run_prints_the_summary(tmp_path: Path) -> None:
    result = _run(str(_sample_source(tmp_path)))

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["filePath"] == "user.rb"
    assert data["agents"] == ["bestPractices", "cleanCode", "codeReview", "security"]
    assert data["summary"]["overallScore"] == 95
    assert str(tmp_path) not in result.stdout


def test_dry_run_full_report(tmp_path: Path) -> None:
    result = _run(str(_sample_source(tmp_path)), "--full", "--framework", "graphql")

    assert result.returncode == 0, result.stderr
    report = json.loads(result.stdout)
    assert report["framework"] == "graphql"
    assert set(report["agents"]) == {
        "codeReview",
        "bestPractices",
        "cleanCode",
        "security",
    }


def test_dry_run_rejects_a_broken_config(tmp_path: Path) -> None:
    config = tmp_path / "agents.json"
    config.write_text('{"agents": {"nope": {"enabled": true}}}', encoding="utf-8")

    result = _run(str(_sample_source(tmp_path)), "--config", str(config))

    assert result.returncode == 2
    assert "invalid" in result.stderr

"""End-to-end run against a real git origin and a local svn repository.

Skipped unless git, svn and svnadmin are all installed.
"""
from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from plugin_mirror.config.loader import ProjectSpec
from plugin_mirror.sync.models import PipelineStage, RunOutcome
from plugin_mirror.sync.orchestrator import SyncOrchestrator

pytestmark = pytest.mark.skipif(
    any(shutil.which(tool) is None for tool in ("git", "svn", "svnadmin")),
    reason="git, svn and svnadmin are required",
)

_IDENTITY = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@example.com",
}


def _run(args: list[str], cwd: Path | None = None) -> str:
    env = {**os.environ, **_IDENTITY}
    completed = subprocess.run(
        args, cwd=cwd, env=env, capture_output=True, text=True, check=True
    )
    return completed.stdout


@pytest.fixture()
def origin(tmp_path: Path) -> Path:
    repo = tmp_path / "origin"
    repo.mkdir()
    _run(["git", "init", "-q"], cwd=repo)
    (repo / "plugin.php").write_text("<?php // demo\n", encoding="utf-8")
    (repo / "inc").mkdir()
    (repo / "inc" / "helpers.php").write_text("<?php\n", encoding="utf-8")
    _run(["git", "add", "-A"], cwd=repo)
    _run(["git", "commit", "-q", "-m", "Release 1.1"], cwd=repo)
    _run(["git", "tag", "v1.1"], cwd=repo)
    return repo


@pytest.fixture()
def dist_url(tmp_path: Path) -> str:
    repo = tmp_path / "svnrepo"
    _run(["svnadmin", "create", str(repo)])
    url = repo.as_uri()
    _run(["svn", "mkdir", "-q", "-m", "Layout", f"{url}/trunk", f"{url}/tags"])
    return url


@pytest.fixture()
def spec(origin: Path, dist_url: str) -> ProjectSpec:
    return ProjectSpec(name="demo", origin_url=str(origin), dist_url=dist_url)


class TestEndToEnd:
    def test_first_run_publishes_trunk_and_tag(
        self, tmp_path: Path, spec: ProjectSpec, dist_url: str
    ) -> None:
        result = SyncOrchestrator(tmp_path / "root").sync_project(spec)

        assert result.outcome == RunOutcome.SUCCESS, result.warnings
        assert result.stage == PipelineStage.COMMITTED
        assert result.release == "v1.1"
        assert result.commit_message == "Release 1.1"

        listing = _run(["svn", "list", "-R", f"{dist_url}/trunk"]).split()
        assert "plugin.php" in listing
        assert "inc/helpers.php" in listing
        assert not any(entry.startswith(".git") for entry in listing)

        tags = _run(["svn", "list", f"{dist_url}/tags"]).split()
        assert tags == ["v1.1/"]

        log = _run(["svn", "log", "-l", "1", dist_url])
        assert "Release 1.1" in log

    def test_second_run_replays_cleanly(
        self, tmp_path: Path, spec: ProjectSpec, origin: Path, dist_url: str
    ) -> None:
        orchestrator = SyncOrchestrator(tmp_path / "root")
        orchestrator.sync_project(spec)

        (origin / "readme.txt").write_text("=== Demo ===\n", encoding="utf-8")
        _run(["git", "add", "-A"], cwd=origin)
        _run(["git", "commit", "-q", "-m", "Add readme"], cwd=origin)

        result = orchestrator.sync_project(spec)

        assert result.outcome == RunOutcome.SUCCESS, result.warnings
        assert result.commit_message == "Add readme"
        listing = _run(["svn", "list", f"{dist_url}/trunk"]).split()
        assert "readme.txt" in listing

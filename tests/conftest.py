"""Shared fixtures: a scripted stand-in for external git/svn/npm/composer calls."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

import pytest

from plugin_mirror.process.runner import ProcessResult, ProcessRunner

Effect = Callable[[tuple[str, ...], "str | None"], None]


@dataclass
class _Rule:
    prefix: tuple[str, ...]
    exit_code: int
    stdout: str
    stderr: str
    effect: Effect | None


class FakeRunner(ProcessRunner):
    """Records every command and answers from rules matched by argv prefix.

    The longest matching prefix wins, and among equally long prefixes the
    rule added last wins; unmatched commands succeed with no output.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[tuple[str, ...], str | None]] = []
        self._rules: list[_Rule] = []

    def respond(
        self,
        *prefix: str,
        exit_code: int = 0,
        stdout: str = "",
        stderr: str = "",
        effect: Effect | None = None,
    ) -> None:
        self._rules.append(_Rule(tuple(prefix), exit_code, stdout, stderr, effect))

    def run(
        self,
        args: Sequence[str],
        cwd: str | os.PathLike[str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        argv = tuple(str(a) for a in args)
        workdir = str(cwd) if cwd is not None else None
        self.calls.append((argv, workdir))
        matches = [
            (index, r) for index, r in enumerate(self._rules) if argv[: len(r.prefix)] == r.prefix
        ]
        if not matches:
            return ProcessResult(args=argv, exit_code=0, cwd=workdir)
        _, rule = max(matches, key=lambda item: (len(item[1].prefix), item[0]))
        if rule.effect is not None and rule.exit_code == 0:
            rule.effect(argv, workdir)
        return ProcessResult(
            args=argv,
            exit_code=rule.exit_code,
            stdout=rule.stdout,
            stderr=rule.stderr,
            cwd=workdir,
        )

    def commands(self) -> list[str]:
        """Return ``"<tool> <subcommand>"`` for every recorded call."""
        return [" ".join(argv[:2]) for argv, _ in self.calls]

    def calls_for(self, *prefix: str) -> list[tuple[tuple[str, ...], str | None]]:
        return [(argv, cwd) for argv, cwd in self.calls if argv[: len(prefix)] == prefix]


# ---------------------------------------------------------------------------
# Effects simulating what the real tools leave on disk
# ---------------------------------------------------------------------------


ORIGIN_FILES = {
    "plugin.php": "<?php // plugin\n",
    "readme.txt": "=== Demo ===\n",
    "assets/app.js": "console.log('demo');\n",
}


def fake_clone(files: dict[str, str] | None = None) -> Effect:
    """Effect for ``git clone <url> <dest>``: populate dest with a tree and .git/."""

    def _effect(argv: tuple[str, ...], cwd: str | None) -> None:
        dest = Path(argv[3])
        for rel, content in (files or ORIGIN_FILES).items():
            target = dest / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        (dest / ".git").mkdir(parents=True, exist_ok=True)
        (dest / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")

    return _effect


def fake_checkout(argv: tuple[str, ...], cwd: str | None) -> None:
    """Effect for ``svn checkout <url> <dest>``: create the standard layout."""
    dest = Path(argv[3])
    for sub in ("trunk", "tags", ".svn"):
        (dest / sub).mkdir(parents=True, exist_ok=True)


@pytest.fixture()
def fake_runner() -> FakeRunner:
    """A runner scripted for a clean, successful first run with tag v1.1."""
    runner = FakeRunner()
    runner.respond("git", "clone", effect=fake_clone())
    runner.respond("svn", "checkout", effect=fake_checkout)
    runner.respond("git", "log", stdout="Release 1.1\n\n")
    runner.respond("git", "rev-list", stdout="0f1e2d3c4b5a\n")
    runner.respond("git", "describe", stdout="v1.1\n")
    runner.respond("svn", "status", stdout="A       trunk/plugin.php\n")
    return runner

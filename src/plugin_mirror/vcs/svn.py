"""Subversion operations on a local working copy of a distribution repository.

The working copy is expected to follow the usual layout::

    <path>/trunk/      current sources
    <path>/tags/<tag>/ release snapshots
"""
from __future__ import annotations

import logging
from pathlib import Path

from plugin_mirror.process.runner import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)

TRUNK = "trunk"
TAGS = "tags"


class SvnWorkingCopy:
    """A Subversion checkout belonging to exactly one project.

    Parameters
    ----------
    path:
        Directory holding the working copy.  It need not exist yet.
    runner:
        Process runner used for every svn invocation.
    executable:
        The svn executable.
    """

    def __init__(self, path: Path, runner: ProcessRunner, executable: str = "svn") -> None:
        self.path = Path(path)
        self._runner = runner
        self._svn = executable

    @property
    def trunk(self) -> Path:
        return self.path / TRUNK

    @property
    def tags(self) -> Path:
        return self.path / TAGS

    def tag_path(self, release: str) -> str:
        """Working-copy relative path of the snapshot for *release*."""
        return f"{TAGS}/{release}"

    def checkout(self, dist_url: str) -> ProcessResult:
        """Check out *dist_url*; svn updates an existing checkout of the same URL."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return self._runner.run([self._svn, "checkout", dist_url, str(self.path)])

    def add_new_paths(self) -> ProcessResult:
        """Schedule every unversioned path below ``trunk`` for addition."""
        return self._runner.run([self._svn, "add", "--force", TRUNK], cwd=self.path)

    def remove(self, relpath: str) -> ProcessResult:
        return self._runner.run(
            [self._svn, "rm", "--force", _literal(relpath)], cwd=self.path
        )

    def copy(self, src: str, dst: str) -> ProcessResult:
        return self._runner.run(
            [self._svn, "copy", _literal(src), _literal(dst)], cwd=self.path
        )

    def status(self) -> ProcessResult:
        return self._runner.run([self._svn, "status"], cwd=self.path)

    def commit(self, message: str) -> ProcessResult:
        return self._runner.run([self._svn, "commit", "-m", message], cwd=self.path)


def _literal(relpath: str) -> str:
    # svn reads the last "@" as a peg revision; an empty one leaves the path as is
    return f"{relpath}@"


__all__ = ["TAGS", "TRUNK", "SvnWorkingCopy"]

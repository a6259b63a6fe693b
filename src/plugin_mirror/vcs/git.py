"""Git operations on a local mirror of an origin repository."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from plugin_mirror.process.runner import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagLookup:
    """Result of looking up the most recent release tag.

    Attributes
    ----------
    release:
        Name of the most recently created tag, or None.
    error:
        The failed command when the lookup itself went wrong; None when
        the lookup succeeded (whether or not a tag was found).
    """

    release: str | None = None
    error: ProcessResult | None = None

    @property
    def found(self) -> bool:
        return self.release is not None


class GitMirror:
    """A local clone of an origin repository, kept current by pulling.

    Parameters
    ----------
    path:
        Directory holding the clone.  It need not exist yet.
    runner:
        Process runner used for every git invocation.
    executable:
        The git executable.
    """

    def __init__(self, path: Path, runner: ProcessRunner, executable: str = "git") -> None:
        self.path = Path(path)
        self._runner = runner
        self._git = executable

    def exists(self) -> bool:
        """Return True if the mirror directory is present."""
        return self.path.is_dir()

    def sync(self, origin_url: str, branch: str = "") -> ProcessResult:
        """Clone the origin if the mirror is absent, otherwise pull into it.

        A directory left behind by an interrupted clone counts as present
        and is pulled into.
        """
        if self.exists():
            logger.info("Pulling git repository at %s...", self.path)
            return self.pull(origin_url, branch)
        logger.info("Cloning git repository to %s...", self.path)
        return self.clone(origin_url, branch)

    def clone(self, origin_url: str, branch: str = "") -> ProcessResult:
        """Clone *origin_url* into :attr:`path`, limited to *branch* when given."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        args = [self._git, "clone", origin_url, str(self.path)]
        if branch:
            args.extend(["--branch", branch])
        return self._runner.run(args)

    def pull(self, origin_url: str, branch: str = "") -> ProcessResult:
        """Pull *branch* (or the default) from *origin_url* into the mirror."""
        args = [self._git, "pull", origin_url]
        if branch:
            args.append(branch)
        return self._runner.run(args, cwd=self.path)

    def last_commit_message(self) -> str:
        """Return the full message of the most recent commit, stripped.

        Returns an empty string if the log cannot be read.
        """
        result = self._runner.run([self._git, "log", "-1", "--pretty=%B"], cwd=self.path)
        if not result.ok:
            logger.warning("Could not read last commit message: %s", result)
            return ""
        return result.stdout.strip()

    def latest_tag(self) -> TagLookup:
        """Find the tag pointing at the most recently tagged revision.

        An empty tag list is not an error: the lookup succeeds with no
        release.  A failing git command is reported through
        :attr:`TagLookup.error`.
        """
        rev_list = self._runner.run(
            [self._git, "rev-list", "--tags", "--max-count=1"], cwd=self.path
        )
        if not rev_list.ok:
            return TagLookup(error=rev_list)
        revision = rev_list.stdout.strip()
        if not revision:
            return TagLookup()

        describe = self._runner.run(
            [self._git, "describe", "--tags", revision], cwd=self.path
        )
        if not describe.ok:
            return TagLookup(error=describe)
        release = describe.stdout.strip()
        return TagLookup(release=release or None)


__all__ = ["GitMirror", "TagLookup"]

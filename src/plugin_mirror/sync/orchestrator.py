"""Synchronization orchestrator: git origin -> svn distribution repository.

Each project runs through a fixed pipeline::

    START -> MIRROR_SYNCED -> DIST_CHECKED_OUT -> TREE_COPIED
          -> BUILD_ATTEMPTED -> REGISTERED -> TAGGED (optional) -> COMMITTED

Early exits
-----------
SKIPPED_MIRROR_FETCH_FAILED  : clone/pull failed; nothing else runs.
SKIPPED_DIST_CHECKOUT_FAILED : svn checkout failed; nothing else runs.
SKIPPED_COMMIT_FAILED        : every step ran but svn commit failed; the
                               working copy keeps the uncommitted changes.

Everything between checkout and commit is best effort.  Projects are
independent: a skipped project never stops the ones after it.

Storage layout under ``root``::

    git/<name>/   mirror of the origin
    svn/<name>/   distribution working copy (trunk/, tags/<release>/)
"""
from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Callable, Iterable, Union

from plugin_mirror.config.loader import ProjectConfigSet, ProjectSpec, ToolPaths
from plugin_mirror.process.runner import ProcessRunner, best_effort
from plugin_mirror.sync.builders import BuildToolRunner
from plugin_mirror.sync.errors import (
    CommitError,
    DistCheckoutError,
    MirrorFetchError,
    SyncStepError,
)
from plugin_mirror.sync.models import PipelineStage, ProjectResult, RunSummary
from plugin_mirror.sync.replicator import replicate_tree
from plugin_mirror.vcs.git import GitMirror
from plugin_mirror.vcs.svn import TRUNK, SvnWorkingCopy

logger = logging.getLogger(__name__)

GIT_DIR = "git"
SVN_DIR = "svn"

ResultCallback = Callable[[ProjectResult], None]


class SyncOrchestrator:
    """Drive the per-project mirroring pipeline, one project at a time.

    Parameters
    ----------
    root:
        Storage root holding ``git/`` and ``svn/``.
    runner:
        Process runner for every external command.  Defaults to a
        :class:`ProcessRunner` with no timeout.
    tools:
        Executable names for git, svn, composer and npm.

    Example
    -------
    ::

        orchestrator = SyncOrchestrator(Path("/srv/mirror"))
        summary = orchestrator.sync_all(load_config("config.yml").projects)
        print(summary.succeeded, summary.skipped)
    """

    def __init__(
        self,
        root: Union[str, Path],
        runner: ProcessRunner | None = None,
        tools: ToolPaths | None = None,
    ) -> None:
        self.root = Path(root)
        self._runner = runner or ProcessRunner()
        self._tools = tools or ToolPaths()
        self._builders = BuildToolRunner(self._runner, self._tools)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def mirror_path(self, name: str) -> Path:
        return self.root / GIT_DIR / name

    def working_copy_path(self, name: str) -> Path:
        return self.root / SVN_DIR / name

    def mirror_for(self, spec: ProjectSpec) -> GitMirror:
        return GitMirror(self.mirror_path(spec.name), self._runner, self._tools.git)

    def working_copy_for(self, spec: ProjectSpec) -> SvnWorkingCopy:
        return SvnWorkingCopy(self.working_copy_path(spec.name), self._runner, self._tools.svn)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def sync_all(
        self,
        projects: Union[ProjectConfigSet, Iterable[ProjectSpec]],
        on_result: ResultCallback | None = None,
    ) -> RunSummary:
        """Synchronize every project in order.

        Parameters
        ----------
        projects:
            A :data:`ProjectConfigSet` or any iterable of specs.
        on_result:
            Called with each :class:`ProjectResult` as soon as that
            project finishes.

        Returns
        -------
        RunSummary
            One result per project, in processing order.
        """
        specs = projects.values() if isinstance(projects, dict) else projects
        summary = RunSummary()
        for spec in specs:
            result = self.sync_project(spec)
            summary.add(result)
            if on_result is not None:
                on_result(result)
        logger.info(
            "Run finished: %d updated, %d skipped", summary.succeeded, summary.skipped
        )
        return summary

    def sync_project(self, spec: ProjectSpec) -> ProjectResult:
        """Run the full pipeline for one project.

        Never raises for external-tool failures; they are reflected in the
        returned :class:`ProjectResult`.
        """
        result = ProjectResult(name=spec.name)
        try:
            self._run_pipeline(spec, result)
        except SyncStepError as exc:
            result.outcome = exc.outcome
            logger.warning("Skipping %s (%s): %s", spec.name, exc.outcome.value, exc.result)
        result.finished_at = datetime.datetime.now(datetime.timezone.utc)
        return result

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run_pipeline(self, spec: ProjectSpec, result: ProjectResult) -> None:
        mirror = self.mirror_for(spec)
        working_copy = self.working_copy_for(spec)

        fetched = mirror.sync(spec.origin_url, spec.origin_branch)
        if not fetched.ok:
            raise MirrorFetchError(spec.name, fetched)
        result.stage = PipelineStage.MIRROR_SYNCED

        logger.info("Checking out svn repository for %s to %s...", spec.name, working_copy.path)
        checkout = working_copy.checkout(spec.dist_url)
        if not checkout.ok:
            raise DistCheckoutError(spec.name, checkout)
        result.stage = PipelineStage.DIST_CHECKED_OUT

        logger.info("Updating svn trunk from latest git commit for %s...", spec.name)
        report = replicate_tree(mirror.path, working_copy.trunk)
        result.files_copied = report.files_copied
        result.warnings.extend(
            f"could not copy {src}: {reason}" for src, _dst, reason in report.errors
        )
        result.stage = PipelineStage.TREE_COPIED

        result.warnings.extend(self._builders.run(working_copy.trunk, spec.name))
        result.stage = PipelineStage.BUILD_ATTEMPTED

        added = working_copy.add_new_paths()
        best_effort(added, "svn add")
        if not added.ok:
            result.warnings.append(f"svn add exited with status {added.exit_code}")
        result.stage = PipelineStage.REGISTERED

        result.commit_message = mirror.last_commit_message()
        self._tag_release(mirror, working_copy, result)

        status = working_copy.status()
        if status.ok and status.stdout.strip():
            logger.info("svn status for %s:\n%s", spec.name, status.stdout.rstrip())

        logger.info(
            'Committing %s to the distribution repository with message: "%s"',
            spec.name,
            result.commit_message,
        )
        committed = working_copy.commit(result.commit_message)
        if not committed.ok:
            raise CommitError(spec.name, committed)
        result.stage = PipelineStage.COMMITTED
        logger.info("%s has been updated.", spec.name)

    def _tag_release(
        self,
        mirror: GitMirror,
        working_copy: SvnWorkingCopy,
        result: ProjectResult,
    ) -> None:
        """Copy ``trunk`` to ``tags/<release>`` for the newest origin tag."""
        lookup = mirror.latest_tag()
        if lookup.error is not None:
            logger.warning(
                "Could not determine the latest release for %s: %s", result.name, lookup.error
            )
            result.warnings.append(
                f"release lookup failed with status {lookup.error.exit_code}"
            )
            return
        if lookup.release is None:
            logger.info("No release tag found for %s, skipping tagging.", result.name)
            return

        release = lookup.release
        tag_path = working_copy.tag_path(release)
        logger.info("Tagging latest release %s for %s...", release, result.name)
        # A tag that does not exist yet is the normal case.
        best_effort(working_copy.remove(tag_path), f"svn rm {tag_path}", quiet=True)
        copied = working_copy.copy(TRUNK, tag_path)
        best_effort(copied, f"svn copy {TRUNK} {tag_path}")
        if not copied.ok:
            result.warnings.append(f"could not create {tag_path} (status {copied.exit_code})")
            return
        result.release = release
        result.stage = PipelineStage.TAGGED


__all__ = ["GIT_DIR", "SVN_DIR", "ResultCallback", "SyncOrchestrator"]

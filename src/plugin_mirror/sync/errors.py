"""Pipeline failures that stop the current project.

Each error carries the failed :class:`ProcessResult` and the
:class:`RunOutcome` the project ends with.  They never escape
:meth:`SyncOrchestrator.sync_project`.
"""
from __future__ import annotations

from plugin_mirror.process.runner import ProcessResult
from plugin_mirror.sync.models import RunOutcome


class SyncStepError(Exception):
    """Base class for failures that end a project's pipeline early."""

    outcome: RunOutcome

    def __init__(self, project: str, result: ProcessResult) -> None:
        self.project = project
        self.result = result
        super().__init__(f"{project}: {result}")


class MirrorFetchError(SyncStepError):
    """Cloning or pulling the origin repository failed."""

    outcome = RunOutcome.SKIPPED_MIRROR_FETCH_FAILED


class DistCheckoutError(SyncStepError):
    """Checking out the distribution repository failed."""

    outcome = RunOutcome.SKIPPED_DIST_CHECKOUT_FAILED


class CommitError(SyncStepError):
    """Committing to the distribution repository failed."""

    outcome = RunOutcome.SKIPPED_COMMIT_FAILED


__all__ = [
    "CommitError",
    "DistCheckoutError",
    "MirrorFetchError",
    "SyncStepError",
]

"""Result types produced by the synchronization orchestrator."""
from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class RunOutcome(str, Enum):
    """Terminal outcome of one project's pipeline."""

    SUCCESS = "success"
    SKIPPED_MIRROR_FETCH_FAILED = "skipped_mirror_fetch_failed"
    SKIPPED_DIST_CHECKOUT_FAILED = "skipped_dist_checkout_failed"
    SKIPPED_COMMIT_FAILED = "skipped_commit_failed"

    @property
    def skipped(self) -> bool:
        return self is not RunOutcome.SUCCESS


class PipelineStage(int, Enum):
    """Furthest state reached by a project's pipeline, in execution order."""

    START = 0
    MIRROR_SYNCED = 1
    DIST_CHECKED_OUT = 2
    TREE_COPIED = 3
    BUILD_ATTEMPTED = 4
    REGISTERED = 5
    TAGGED = 6
    COMMITTED = 7


# ---------------------------------------------------------------------------
# Per-project result
# ---------------------------------------------------------------------------


@dataclass
class ProjectResult:
    """What happened to one project during a run.

    Attributes
    ----------
    name:
        Project name.
    outcome:
        Terminal :class:`RunOutcome`.
    stage:
        Last :class:`PipelineStage` reached.
    release:
        Release tag copied into ``tags/``, or None if tagging was skipped.
    commit_message:
        Message used (or that would have been used) for the commit.
    files_copied:
        Number of files copied into ``trunk``.
    warnings:
        Best-effort failures that did not change the outcome.
    finished_at:
        UTC timestamp of when the pipeline stopped.
    """

    name: str
    outcome: RunOutcome = RunOutcome.SUCCESS
    stage: PipelineStage = PipelineStage.START
    release: str | None = None
    commit_message: str = ""
    files_copied: int = 0
    warnings: list[str] = field(default_factory=list)
    finished_at: datetime.datetime | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is RunOutcome.SUCCESS

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable representation."""
        return {
            "name": self.name,
            "outcome": self.outcome.value,
            "stage": self.stage.name,
            "release": self.release,
            "commit_message": self.commit_message,
            "files_copied": self.files_copied,
            "warnings": list(self.warnings),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


# ---------------------------------------------------------------------------
# Whole-run summary
# ---------------------------------------------------------------------------


@dataclass
class RunSummary:
    """Ordered collection of :class:`ProjectResult` for one run."""

    results: list[ProjectResult] = field(default_factory=list)

    def add(self, result: ProjectResult) -> None:
        self.results.append(result)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if not r.succeeded)

    @property
    def all_succeeded(self) -> bool:
        return all(r.succeeded for r in self.results)

    def get(self, name: str) -> ProjectResult:
        """Return the result for *name*.

        Raises
        ------
        KeyError
            If no project with that name was processed.
        """
        for result in self.results:
            if result.name == name:
                return result
        raise KeyError(f"No result for project {name!r}")

    def to_dict(self) -> dict[str, object]:
        return {
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "projects": [r.to_dict() for r in self.results],
        }


__all__ = [
    "PipelineStage",
    "ProjectResult",
    "RunOutcome",
    "RunSummary",
]

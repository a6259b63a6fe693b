"""Sync orchestration subpackage."""
from __future__ import annotations

from plugin_mirror.sync.builders import BuildToolRunner
from plugin_mirror.sync.errors import (
    CommitError,
    DistCheckoutError,
    MirrorFetchError,
    SyncStepError,
)
from plugin_mirror.sync.models import PipelineStage, ProjectResult, RunOutcome, RunSummary
from plugin_mirror.sync.orchestrator import SyncOrchestrator
from plugin_mirror.sync.replicator import ReplicationReport, replicate_tree

__all__ = [
    "BuildToolRunner",
    "CommitError",
    "DistCheckoutError",
    "MirrorFetchError",
    "PipelineStage",
    "ProjectResult",
    "ReplicationReport",
    "RunOutcome",
    "RunSummary",
    "SyncOrchestrator",
    "SyncStepError",
    "replicate_tree",
]

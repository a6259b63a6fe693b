"""plugin-mirror — mirror git-hosted plugins into Subversion distribution repositories.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import plugin_mirror
>>> plugin_mirror.__version__
'0.1.0'

Configuration
-------------
>>> from plugin_mirror import parse_config
>>> config = parse_config('''
... plugins:
...   demo:
...     git: "https://example/demo.git main"
...     svn: "https://dist.example/svn/demo"
... ''')
>>> config.projects["demo"].origin_branch
'main'

Synchronization
---------------
>>> from plugin_mirror import SyncOrchestrator
>>> orchestrator = SyncOrchestrator("/srv/mirror")
>>> orchestrator.mirror_path("demo").as_posix()
'/srv/mirror/git/demo'
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from plugin_mirror.config.loader import (
    ConfigError,
    MirrorConfig,
    ProjectConfigSet,
    ProjectSpec,
    ToolPaths,
    load_config,
    parse_config,
    parse_git_source,
)

# ---------------------------------------------------------------------------
# Processes
# ---------------------------------------------------------------------------
from plugin_mirror.process.runner import ProcessResult, ProcessRunner, best_effort

# ---------------------------------------------------------------------------
# Version control
# ---------------------------------------------------------------------------
from plugin_mirror.vcs.git import GitMirror, TagLookup
from plugin_mirror.vcs.svn import SvnWorkingCopy

# ---------------------------------------------------------------------------
# Sync
# ---------------------------------------------------------------------------
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
    # Version
    "__version__",
    # Configuration
    "ConfigError",
    "MirrorConfig",
    "ProjectConfigSet",
    "ProjectSpec",
    "ToolPaths",
    "load_config",
    "parse_config",
    "parse_git_source",
    # Processes
    "ProcessResult",
    "ProcessRunner",
    "best_effort",
    # Version control
    "GitMirror",
    "SvnWorkingCopy",
    "TagLookup",
    # Sync: pipeline
    "SyncOrchestrator",
    "BuildToolRunner",
    "ReplicationReport",
    "replicate_tree",
    # Sync: results
    "PipelineStage",
    "ProjectResult",
    "RunOutcome",
    "RunSummary",
    # Sync: errors
    "CommitError",
    "DistCheckoutError",
    "MirrorFetchError",
    "SyncStepError",
]

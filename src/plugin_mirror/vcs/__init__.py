"""Version-control wrappers for the origin mirror and the distribution working copy."""
from __future__ import annotations

from plugin_mirror.vcs.git import GitMirror, TagLookup
from plugin_mirror.vcs.svn import TAGS, TRUNK, SvnWorkingCopy

__all__ = [
    "GitMirror",
    "SvnWorkingCopy",
    "TAGS",
    "TRUNK",
    "TagLookup",
]

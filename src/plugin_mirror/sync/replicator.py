"""Tree replicator: copy a mirror's working tree into ``trunk``.

Files are added and overwritten, never removed.  A file deleted upstream
stays in ``trunk`` until someone prunes it with svn; only additions and
modifications are mirrored automatically.

Symbolic links are copied as links, never followed, so a link pointing
outside the mirror cannot pull files from elsewhere on the host into
``trunk``.  Links already present in ``trunk`` are replaced, never
written through.
"""
from __future__ import annotations

import fnmatch
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

METADATA_DIRS: tuple[str, ...] = (".git",)
"""Origin version-control metadata, never copied."""


@dataclass
class ReplicationReport:
    """Summary of one replication pass.

    Attributes
    ----------
    files_copied:
        Number of regular files written into the destination.
    errors:
        ``(source, destination, reason)`` triples for entries that could
        not be copied.
    """

    files_copied: int = 0
    errors: list[tuple[str, str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def replicate_tree(
    source: Path,
    destination: Path,
    exclude: Iterable[str] = METADATA_DIRS,
) -> ReplicationReport:
    """Copy everything under *source* into *destination*.

    Parameters
    ----------
    source:
        The mirror directory.
    destination:
        The ``trunk`` directory; created if missing.
    exclude:
        Entry names skipped at any depth.

    Returns
    -------
    ReplicationReport
        Counts and per-entry errors.  Copy failures are reported here,
        not raised.
    """
    report = ReplicationReport()
    patterns = tuple(exclude)
    if source.is_dir():
        _clear_link_targets(source, destination, patterns, report)

    def _copy(src: str, dst: str) -> str:
        copied = shutil.copy2(src, dst)
        report.files_copied += 1
        return copied

    try:
        shutil.copytree(
            source,
            destination,
            ignore=shutil.ignore_patterns(*patterns),
            copy_function=_copy,
            symlinks=True,
            dirs_exist_ok=True,
        )
    except shutil.Error as exc:
        entries = exc.args[0] if exc.args and isinstance(exc.args[0], list) else []
        if entries:
            report.errors.extend((str(s), str(d), str(r)) for s, d, r in entries)
        else:
            report.errors.append((str(source), str(destination), str(exc)))
    except OSError as exc:
        report.errors.append((str(source), str(destination), str(exc)))

    for src, dst, reason in report.errors:
        logger.warning("Could not copy %s to %s: %s", src, dst, reason)
    logger.debug("Copied %d file(s) from %s to %s", report.files_copied, source, destination)
    return report


def _clear_link_targets(
    source: Path,
    destination: Path,
    patterns: tuple[str, ...],
    report: ReplicationReport,
) -> None:
    """Unlink destination entries that must be replaced, not written through.

    A destination symlink is always removed so nothing is copied through it.
    A destination file is removed when the source entry is a symlink.
    """
    for dirpath, dirnames, filenames in os.walk(source):
        dirnames[:] = [
            d for d in dirnames if not any(fnmatch.fnmatch(d, p) for p in patterns)
        ]
        for name in dirnames + filenames:
            entry = Path(dirpath) / name
            if any(fnmatch.fnmatch(name, p) for p in patterns):
                continue
            target = destination / entry.relative_to(source)
            if target.is_symlink() or (entry.is_symlink() and target.is_file()):
                try:
                    target.unlink()
                except OSError as exc:
                    report.errors.append((str(entry), str(target), str(exc)))


__all__ = ["METADATA_DIRS", "ReplicationReport", "replicate_tree"]

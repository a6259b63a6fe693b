"""External process execution subpackage."""
from __future__ import annotations

from plugin_mirror.process.runner import (
    EXIT_CANNOT_EXECUTE,
    EXIT_COMMAND_NOT_FOUND,
    EXIT_TIMED_OUT,
    ProcessResult,
    ProcessRunner,
    best_effort,
)

__all__ = [
    "EXIT_CANNOT_EXECUTE",
    "EXIT_COMMAND_NOT_FOUND",
    "EXIT_TIMED_OUT",
    "ProcessResult",
    "ProcessRunner",
    "best_effort",
]

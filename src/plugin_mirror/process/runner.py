"""Thin wrapper around external command execution.

Every external tool the mirror drives (git, svn, composer, npm) goes
through :class:`ProcessRunner`.  A call always returns a
:class:`ProcessResult`; callers decide what a non-zero exit means for
them instead of reading a shared "last status" value.

A command that cannot be started or that times out is folded into a
failed result (exit codes 127, 126 and 124, the values a POSIX shell
uses) so that callers only ever look at one signal.  Output is decoded
as UTF-8 with undecodable bytes replaced.
"""
from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)

EXIT_COMMAND_NOT_FOUND = 127
EXIT_TIMED_OUT = 124
EXIT_CANNOT_EXECUTE = 126


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a single external command.

    Attributes
    ----------
    args:
        The argument vector that was executed.
    exit_code:
        Process exit status (0 on success).
    stdout:
        Captured standard output, decoded as text.
    stderr:
        Captured standard error, decoded as text.
    cwd:
        Working directory the command ran in, or None for the caller's.
    """

    args: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    cwd: str | None = None

    @property
    def ok(self) -> bool:
        """Return True when the command exited with status 0."""
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        """Shell-like rendering of :attr:`args`, for log messages."""
        return shlex.join(self.args)

    def __str__(self) -> str:
        prefix = f"{self.cwd} " if self.cwd else ""
        return f"{prefix}$ {self.command_line} [status {self.exit_code}]"


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


class ProcessRunner:
    """Run external commands synchronously and capture their output.

    Parameters
    ----------
    timeout:
        Default per-command timeout in seconds.  None (the default) waits
        for the command however long it takes.
    env:
        Extra environment variables layered over ``os.environ``.

    Example
    -------
    ::

        runner = ProcessRunner()
        result = runner.run(["git", "--version"])
        if result.ok:
            print(result.stdout)
    """

    def __init__(
        self,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        self._timeout = timeout
        self._env = dict(env or {})

    @property
    def timeout(self) -> float | None:
        """Default per-command timeout in seconds."""
        return self._timeout

    def run(
        self,
        args: Sequence[str],
        cwd: str | os.PathLike[str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Execute *args* and wait for it to finish.

        Parameters
        ----------
        args:
            Argument vector; the first item is the executable.
        cwd:
            Directory to run the command in.
        timeout:
            Overrides the runner's default timeout for this call.

        Returns
        -------
        ProcessResult
            The structured result.  Never raises for a failing command.

        Raises
        ------
        NotADirectoryError
            If *cwd* is given and is not an existing directory.
        """
        argv = tuple(str(a) for a in args)
        workdir = str(cwd) if cwd is not None else None
        if workdir is not None and not Path(workdir).is_dir():
            raise NotADirectoryError(f"Working directory does not exist: {workdir}")

        effective_timeout = timeout if timeout is not None else self._timeout
        logger.debug("Executing %s (cwd=%s)", shlex.join(argv), workdir or os.getcwd())

        env = None
        if self._env:
            env = dict(os.environ)
            env.update(self._env)

        try:
            completed = subprocess.run(
                argv,
                cwd=workdir,
                env=env,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=effective_timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.warning("%r does not exist!", argv[0])
            return ProcessResult(
                args=argv,
                exit_code=EXIT_COMMAND_NOT_FOUND,
                stderr=f"{argv[0]}: command not found",
                cwd=workdir,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("%s timed out after %ss", shlex.join(argv), effective_timeout)
            return ProcessResult(
                args=argv,
                exit_code=EXIT_TIMED_OUT,
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr),
                cwd=workdir,
            )
        except OSError as exc:
            logger.warning("Could not execute %r: %s", argv[0], exc)
            return ProcessResult(
                args=argv,
                exit_code=EXIT_CANNOT_EXECUTE,
                stderr=f"{argv[0]}: {exc.strerror or exc}",
                cwd=workdir,
            )

        result = ProcessResult(
            args=argv,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            cwd=workdir,
        )
        if result.ok:
            logger.debug("[Ok] %s", result.command_line)
        else:
            logger.debug("[Status %d] %s", result.exit_code, result.command_line)
        return result


def _as_text(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


# ---------------------------------------------------------------------------
# Best-effort policy
# ---------------------------------------------------------------------------


def best_effort(result: ProcessResult, what: str, quiet: bool = False) -> None:
    """Discard the outcome of a step whose failure must not stop the pipeline.

    The failure is logged (at WARNING, or DEBUG when *quiet*) and then
    dropped.  Call sites use this instead of ignoring the result so the
    policy is visible where it applies.

    Parameters
    ----------
    result:
        The result being discarded.
    what:
        Short description of the step, used in the log message.
    quiet:
        Log failures at DEBUG instead of WARNING, for steps whose failure
        is routine (e.g. an absent optional build script).
    """
    if result.ok:
        return
    level = logging.DEBUG if quiet else logging.WARNING
    logger.log(level, "Ignoring failure of %s: %s", what, result)


__all__ = [
    "EXIT_CANNOT_EXECUTE",
    "EXIT_COMMAND_NOT_FOUND",
    "EXIT_TIMED_OUT",
    "ProcessResult",
    "ProcessRunner",
    "best_effort",
]

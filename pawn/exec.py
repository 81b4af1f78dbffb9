"""
Execution API - run a command, capture its output, report how it ended.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .constants import DEFAULT_CHUNK_SIZE
from .drain import drain_all, drain_streams
from .errors import (
    ChildCoredumped,
    ChildSignaled,
    ChildStopped,
    ExecError,
    WaitError,
)
from .reap import wait_and_decode
from .spawn import spawn, spawn_detached
from .status import (
    Coredumped,
    Exited,
    Outcome,
    Platform,
    Signaled,
    Stopped,
    current_platform,
)

logger = logging.getLogger("pawn.exec")

__all__ = [
    'ExecResult',
    'build_result',
    'execute',
    'execute_detached',
]


@dataclass
class ExecResult:
    """
    Result from a command that exited normally.

    Attributes:
        exit_code: Exit code from the command (0-255)
        stdout: Captured standard output bytes
        stderr: Captured standard error bytes (empty when merged into stdout)
    """
    exit_code: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        """True when the command exited with code 0."""
        return self.exit_code == 0

    @property
    def stdout_text(self) -> str:
        """Standard output decoded as UTF-8."""
        return self.stdout.decode('utf-8', errors='replace')

    @property
    def stderr_text(self) -> str:
        """Standard error decoded as UTF-8."""
        return self.stderr.decode('utf-8', errors='replace')


def _reap_after_failure(pid: int, platform: Platform) -> None:
    try:
        wait_and_decode(pid, platform)
    except WaitError as e:
        logger.debug(f"could not reap pid:{pid} after failed drain: {e}")


def build_result(
        command: str,
        outcome: Outcome,
        stdout: bytes,
        stderr: bytes,
        check: bool = False,
) -> ExecResult:
    """
    Turn a decoded outcome and the captured output into an ExecResult.

    Raises:
        ChildStopped, ChildSignaled, ChildCoredumped: The child did not exit
        ExecError: ``check`` is set and the exit code is non-zero
    """
    if isinstance(outcome, Exited):
        if check and outcome.code != 0:
            raise ExecError(command, outcome.code, stderr, outcome=outcome, stdout=stdout)
        return ExecResult(exit_code=outcome.code, stdout=stdout, stderr=stderr)
    if isinstance(outcome, Stopped):
        raise ChildStopped(command, outcome.signal, outcome, stdout, stderr)
    if isinstance(outcome, Coredumped):
        raise ChildCoredumped(command, outcome.signal, outcome, stdout, stderr)
    if isinstance(outcome, Signaled):
        raise ChildSignaled(command, outcome.signal, outcome, stdout, stderr)
    raise TypeError(f"unknown outcome: {outcome!r}")


def execute(
        command: str,
        arguments: Sequence[str] = (),
        *,
        merge_stderr: bool = False,
        check: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        platform: Optional[Platform] = None,
) -> ExecResult:
    """
    Execute a command and wait for it, capturing stdout and stderr.

    Both pipes are drained before waiting so a child that fills a pipe
    buffer can never deadlock against the parent.

    Args:
        command: Executable name (looked up on PATH) or path
        arguments: Full argv, argument 0 included (default: [basename(command)])
        merge_stderr: Capture stderr into stdout instead of separately
        check: Raise ExecError on a non-zero exit code
        chunk_size: Bytes per pipe read
        platform: Wait-status layout (default: this host)

    Returns:
        ExecResult with exit_code and output

    Raises:
        SpawnError: The process could not be started
        IoError: Reading a pipe failed; partial output is discarded
        WaitError: Waiting on the child failed
        ChildStopped, ChildSignaled, ChildCoredumped: The child did not exit
        ExecError: ``check`` is set and the exit code is non-zero

    Examples:
        Simple execution::

            result = execute("git", ["git", "status"])
            print(f"Exit code: {result.exit_code}")
            print(f"Stdout: {result.stdout_text}")
    """
    if platform is None:
        platform = current_platform()

    child = spawn(command, arguments, merge_stderr=merge_stderr)
    try:
        if merge_stderr:
            stdout, stderr = drain_all(child.stdout_fd, chunk_size), b""
        else:
            stdout, stderr = drain_streams(child.stdout_fd, child.stderr_fd, chunk_size)
    except BaseException:
        # Closing the read ends first lets a still-writing child die of SIGPIPE.
        child.close()
        _reap_after_failure(child.pid, platform)
        raise
    finally:
        child.close()

    outcome = wait_and_decode(child.pid, platform)
    logger.debug(f"exec finish, {command}: {outcome}")
    return build_result(command, outcome, stdout, stderr, check)


def execute_detached(command: str, arguments: Sequence[str] = ()) -> int:
    """
    Start a command in the background and return immediately.

    Output goes wherever this process's stdout/stderr go, and the exit
    status is never collected.

    Returns:
        The child's pid

    Raises:
        SpawnError: The process could not be started
    """
    return spawn_detached(command, arguments)

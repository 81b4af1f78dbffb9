"""
Spawner - create the child with its output redirected into pipes.

Uses ``os.posix_spawnp`` so the descriptor shuffling happens declaratively
between fork and exec, never in a hand-rolled fork of a threaded process.
"""

import logging
import os
import signal
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .constants import STDERR_FILENO, STDOUT_FILENO
from .errors import SpawnError

# Configure logger
logger = logging.getLogger("pawn.spawn")

__all__ = ['SpawnedChild', 'build_argv', 'spawn', 'spawn_detached']

# Python ignores these; a spawned child should start with the defaults.
_DEFAULT_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGPIPE", "SIGXFSZ")
    if hasattr(signal, name)
)


@dataclass
class SpawnedChild:
    """
    A freshly spawned child and the parent's ends of its capture pipes.

    Attributes:
        pid: Process id, valid until it is reaped exactly once
        stdout_fd: Read end of the stdout pipe
        stderr_fd: Read end of the stderr pipe (None when merged into stdout)
    """
    pid: int
    stdout_fd: Optional[int]
    stderr_fd: Optional[int]

    def close(self) -> None:
        """Close any read ends still held by the parent."""
        for fd in (self.stdout_fd, self.stderr_fd):
            if fd is not None:
                _close_quietly(fd)
        self.stdout_fd = None
        self.stderr_fd = None


def _close_quietly(fd: int) -> None:
    try:
        os.close(fd)
    except OSError:
        pass


def build_argv(command: str, arguments: Sequence[str]) -> List[str]:
    """
    Build the argument vector handed to the child.

    ``arguments`` is the full argv, argument 0 included. When it is empty,
    argv is just the base name of ``command``.

    Raises:
        SpawnError: If command is empty, or an argument is not a str or
            contains a NUL byte
    """
    if not isinstance(command, str):
        raise SpawnError(repr(command), "command is not a str")
    if not command:
        raise SpawnError(command, "empty command")
    argv = list(arguments)
    if not argv:
        argv = [os.path.basename(command)]
    for arg in [command] + argv:
        if not isinstance(arg, str):
            raise SpawnError(command, f"argument {arg!r} is not a str")
        if "\0" in arg:
            raise SpawnError(command, f"embedded NUL byte in {arg!r}")
    return argv


def _file_actions(stdout_w: int, stderr_w: int, fds: Sequence[int]) -> list:
    actions = [
        (os.POSIX_SPAWN_DUP2, stdout_w, STDOUT_FILENO),
        (os.POSIX_SPAWN_DUP2, stderr_w, STDERR_FILENO),
    ]
    # The originals are redundant once duplicated; 1 and 2 themselves stay.
    for fd in fds:
        if fd not in (STDOUT_FILENO, STDERR_FILENO):
            actions.append((os.POSIX_SPAWN_CLOSE, fd))
    return actions


def spawn(
        command: str,
        arguments: Sequence[str] = (),
        *,
        merge_stderr: bool = False,
) -> SpawnedChild:
    """
    Spawn ``command`` with stdout and stderr redirected into private pipes.

    The executable is looked up on ``PATH``; the child inherits the current
    environment and working directory. The parent's copies of the write
    ends are closed before returning, so the read ends see EOF once the
    child (and anything it forked) exits.

    Args:
        command: Executable name or path
        arguments: Full argv, argument 0 included
        merge_stderr: Send the child's stderr into the stdout pipe

    Returns:
        SpawnedChild with the pid and the parent's read ends

    Raises:
        SpawnError: If the pipes or the process could not be created
    """
    argv = build_argv(command, arguments)
    fds: List[int] = []
    try:
        stdout_r, stdout_w = os.pipe()
        fds += [stdout_r, stdout_w]
        if merge_stderr:
            stderr_r, stderr_w = None, stdout_w
        else:
            stderr_r, stderr_w = os.pipe()
            fds += [stderr_r, stderr_w]

        pid = os.posix_spawnp(
            command,
            argv,
            os.environ,
            file_actions=_file_actions(stdout_w, stderr_w, fds),
            setsigdef=_DEFAULT_SIGNALS,
        )
    except BaseException as e:
        for fd in fds:
            _close_quietly(fd)
        if isinstance(e, OSError):
            raise SpawnError(command, e.strerror or str(e)) from e
        raise

    # The parent never writes; its copies would keep the pipes open forever.
    os.close(stdout_w)
    if not merge_stderr:
        os.close(stderr_w)

    logger.debug(f"spawned {command} (pid:{pid}), argv={argv}")
    return SpawnedChild(pid=pid, stdout_fd=stdout_r, stderr_fd=stderr_r)


def spawn_detached(command: str, arguments: Sequence[str] = ()) -> int:
    """
    Spawn ``command`` without redirection and without waiting for it.

    The child's stdout and stderr are inherited from this process and its
    exit status is never collected.

    Returns:
        The child's pid

    Raises:
        SpawnError: If the process could not be created
    """
    argv = build_argv(command, arguments)
    try:
        pid = os.posix_spawnp(command, argv, os.environ, setsigdef=_DEFAULT_SIGNALS)
    except OSError as e:
        raise SpawnError(command, e.strerror or str(e)) from e

    logger.debug(f"spawned detached {command} (pid:{pid})")
    return pid

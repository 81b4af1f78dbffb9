"""
Async execution API.

Same semantics as ``pawn.exec`` for hosts already running an event loop.
Both pipes are drained as concurrent tasks; the blocking ``waitpid()``
runs in the loop's default executor.

Usage:
    result = await pawn.aio.execute("ls", ["ls", "-l", "/"])
    print(result.stdout_text)
"""

import asyncio
import logging
import os
from typing import Optional, Sequence

from .constants import DEFAULT_CHUNK_SIZE
from .errors import IoError, WaitError
from .exec import ExecResult, build_result
from .reap import wait_and_decode
from .spawn import SpawnedChild, spawn, spawn_detached
from .status import Platform, current_platform

logger = logging.getLogger("pawn.aio")

__all__ = ['execute', 'execute_detached']


async def _drain(fd: int, chunk_size: int) -> bytes:
    """Read ``fd`` to EOF via a read-pipe transport; takes ownership of fd."""
    loop = asyncio.get_running_loop()
    pipe = os.fdopen(fd, 'rb', buffering=0)
    reader = asyncio.StreamReader(limit=chunk_size)
    protocol = asyncio.StreamReaderProtocol(reader)
    try:
        transport, _ = await loop.connect_read_pipe(lambda: protocol, pipe)
    except BaseException:
        pipe.close()
        raise

    try:
        data = await reader.read()
    except OSError as e:
        raise IoError(fd, e.strerror or str(e)) from e
    finally:
        transport.close()

    logger.debug(f"drained {len(data)} bytes from fd {fd}")
    return data


async def _drain_child(child: SpawnedChild, chunk_size: int):
    fds = (child.stdout_fd, child.stderr_fd)
    # The transports own the descriptors from here on.
    child.stdout_fd = child.stderr_fd = None

    tasks = [asyncio.ensure_future(_drain(fd, chunk_size)) for fd in fds if fd is not None]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    stdout = results[0]
    stderr = results[1] if len(results) > 1 else b""
    return stdout, stderr


async def _reap_after_failure(loop, pid: int, platform: Platform) -> None:
    # Runs even when the caller is cancelled; the executor finishes the wait.
    reap = loop.run_in_executor(None, wait_and_decode, pid, platform)
    try:
        await asyncio.shield(reap)
    except WaitError as e:
        logger.debug(f"could not reap pid:{pid} after failed drain: {e}")
    except asyncio.CancelledError:
        pass


async def execute(
        command: str,
        arguments: Sequence[str] = (),
        *,
        merge_stderr: bool = False,
        check: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        platform: Optional[Platform] = None,
) -> ExecResult:
    """
    Execute a command and wait for it without blocking the event loop.

    See ``pawn.exec.execute`` for arguments, return value and errors.

    Examples:
        With both streams::

            result = await execute("sh", ["sh", "-c", "echo out; echo err >&2"])
            print(f"Stdout: {result.stdout_text}")
            print(f"Stderr: {result.stderr_text}")
    """
    if platform is None:
        platform = current_platform()
    loop = asyncio.get_running_loop()

    child = spawn(command, arguments, merge_stderr=merge_stderr)
    try:
        stdout, stderr = await _drain_child(child, chunk_size)
    except BaseException:
        child.close()
        await _reap_after_failure(loop, child.pid, platform)
        raise
    finally:
        child.close()

    outcome = await loop.run_in_executor(None, wait_and_decode, child.pid, platform)
    logger.debug(f"exec finish, {command}: {outcome}")
    return build_result(command, outcome, stdout, stderr, check)


async def execute_detached(command: str, arguments: Sequence[str] = ()) -> int:
    """
    Start a command in the background and return its pid immediately.

    Raises:
        SpawnError: The process could not be started
    """
    return spawn_detached(command, arguments)

"""
Drainer - read capture pipes to end-of-stream.
"""

import logging
import os
import selectors
from typing import Dict, Optional, Tuple

from .constants import DEFAULT_CHUNK_SIZE
from .errors import IoError

logger = logging.getLogger("pawn.drain")

__all__ = ['drain_all', 'drain_streams']


def _read_chunk(fd: int, chunk_size: int) -> bytes:
    try:
        return os.read(fd, chunk_size)
    except OSError as e:
        raise IoError(fd, e.strerror or str(e)) from e


def drain_all(fd: int, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Read ``fd`` in fixed-size chunks until a zero-length read.

    Only safe on its own when no other pipe of the same child needs
    draining; use drain_streams() for stdout and stderr together.

    Raises:
        IoError: On any read error other than end-of-stream
    """
    buffer = bytearray()
    while True:
        chunk = _read_chunk(fd, chunk_size)
        if not chunk:
            break
        buffer += chunk
    logger.debug(f"drained {len(buffer)} bytes from fd {fd}")
    return bytes(buffer)


def drain_streams(
        stdout_fd: Optional[int],
        stderr_fd: Optional[int],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Tuple[bytes, bytes]:
    """
    Drain stdout and stderr together on the calling thread.

    Both descriptors are multiplexed with a selector and whichever is
    readable gets serviced, so a child blocked writing to one pipe never
    waits on the parent reading the other to completion.

    Args:
        stdout_fd: Read end of the stdout pipe, or None
        stderr_fd: Read end of the stderr pipe, or None
        chunk_size: Bytes per read

    Returns:
        (stdout, stderr) bytes; b"" for a None descriptor

    Raises:
        IoError: On any read error other than end-of-stream
    """
    buffers: Dict[int, bytearray] = {}
    with selectors.DefaultSelector() as selector:
        for fd in (stdout_fd, stderr_fd):
            if fd is not None:
                buffers[fd] = bytearray()
                selector.register(fd, selectors.EVENT_READ)

        while selector.get_map():
            for key, _ in selector.select():
                chunk = _read_chunk(key.fd, chunk_size)
                if chunk:
                    buffers[key.fd] += chunk
                else:
                    selector.unregister(key.fd)

    stdout = bytes(buffers[stdout_fd]) if stdout_fd is not None else b""
    stderr = bytes(buffers[stderr_fd]) if stderr_fd is not None else b""
    logger.debug(f"drained {len(stdout)} stdout bytes, {len(stderr)} stderr bytes")
    return stdout, stderr

"""
pawn - run an external program, capture its output, decode how it ended.

Spawns children with ``posix_spawnp`` (no shell, no manual fork), drains
stdout and stderr concurrently, and reports either an ExecResult or a
categorized error.
"""

from .errors import (
    PawnError,
    ExecutionError,
    SpawnError,
    IoError,
    WaitError,
    UnsupportedPlatformError,
    ChildError,
    ChildStopped,
    ChildSignaled,
    ChildCoredumped,
    ExecError,
)
from .status import (
    Platform,
    Exited,
    Stopped,
    Signaled,
    Coredumped,
    current_platform,
    decode_wait_status,
)
from .spawn import SpawnedChild, spawn, spawn_detached
from .drain import drain_all, drain_streams
from .reap import wait_and_decode
from .exec import ExecResult, execute, execute_detached
from . import aio

__all__ = [
    # Execution API
    "execute",
    "execute_detached",
    "ExecResult",
    "aio",
    # Building blocks
    "spawn",
    "spawn_detached",
    "SpawnedChild",
    "drain_all",
    "drain_streams",
    "wait_and_decode",
    # Status decoding
    "Platform",
    "Exited",
    "Stopped",
    "Signaled",
    "Coredumped",
    "current_platform",
    "decode_wait_status",
    # Error types
    "PawnError",
    "ExecutionError",
    "SpawnError",
    "IoError",
    "WaitError",
    "UnsupportedPlatformError",
    "ChildError",
    "ChildStopped",
    "ChildSignaled",
    "ChildCoredumped",
    "ExecError",
]

# Get version from package metadata
try:
    from importlib.metadata import version, PackageNotFoundError
    __version__ = version("pawn")
except PackageNotFoundError:
    # Package not installed (e.g., development mode)
    __version__ = "0.0.0+dev"

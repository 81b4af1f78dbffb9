"""
Wait-status decoding.

Turns the raw integer filled in by ``waitpid()`` into one of four outcomes.
The decoder is pure: the platform is an explicit argument so every bit
layout can be tested without spawning anything.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .constants import (
    DARWIN_SIGCONT,
    WAIT_BYTE_MASK,
    WAIT_COREFLAG,
    WAIT_STATUS_MASK,
    WAIT_STOPPED,
)
from .errors import UnsupportedPlatformError

__all__ = [
    'Platform',
    'current_platform',
    'Exited',
    'Stopped',
    'Signaled',
    'Coredumped',
    'Outcome',
    'decode_wait_status',
]


class Platform(Enum):
    """OS families with a known wait-status layout."""
    LINUX = "linux"
    DARWIN = "darwin"


def current_platform(name: Optional[str] = None) -> Platform:
    """
    Map ``sys.platform`` (or ``name``) to a Platform.

    The BSDs share Darwin's layout.

    Raises:
        UnsupportedPlatformError: For anything else (e.g. Windows)
    """
    name = name or sys.platform
    if name.startswith("linux"):
        return Platform.LINUX
    if name == "darwin" or "bsd" in name or name.startswith("dragonfly"):
        return Platform.DARWIN
    raise UnsupportedPlatformError(name)


@dataclass(frozen=True)
class Exited:
    """The child exited normally with ``code`` (0-255)."""
    code: int


@dataclass(frozen=True)
class Stopped:
    """The child was suspended by ``signal``."""
    signal: int


@dataclass(frozen=True)
class Signaled:
    """The child was terminated by ``signal`` without a core dump."""
    signal: int


@dataclass(frozen=True)
class Coredumped:
    """The child was terminated by ``signal`` and dumped core."""
    signal: int


Outcome = Union[Exited, Stopped, Signaled, Coredumped]


def _decode_linux(status: int) -> Outcome:
    if status & WAIT_STATUS_MASK == 0:
        return Exited((status >> 8) & WAIT_BYTE_MASK)
    if status & WAIT_BYTE_MASK == WAIT_STOPPED:
        return Stopped((status >> 8) & WAIT_BYTE_MASK)
    signal = status & WAIT_STATUS_MASK
    if status & WAIT_COREFLAG:
        return Coredumped(signal)
    return Signaled(signal)


def _decode_darwin(status: int) -> Outcome:
    """
    Darwin layout. A continued child (SIGCONT marker, only reported with
    WCONTINUED, which is never requested) is not a stop and falls through
    to Signaled(0x7f).
    """
    wstatus = status & WAIT_STATUS_MASK
    if wstatus == 0:
        return Exited((status >> 8) & WAIT_BYTE_MASK)
    if wstatus == WAIT_STOPPED and (status >> 8) != DARWIN_SIGCONT:
        return Stopped(status >> 8)
    if status & WAIT_COREFLAG:
        return Coredumped(wstatus)
    return Signaled(wstatus)


_DECODERS = {
    Platform.LINUX: _decode_linux,
    Platform.DARWIN: _decode_darwin,
}


def decode_wait_status(status: int, platform: Platform) -> Outcome:
    """
    Decode a raw wait-status word.

    Checked in order: normal exit, stopped, then terminated by signal
    (with or without a core dump).

    Args:
        status: The status word reported by ``waitpid()``
        platform: The OS family whose bit layout applies

    Returns:
        Exited, Stopped, Signaled or Coredumped

    Examples:
        >>> decode_wait_status(42 << 8, Platform.LINUX)
        Exited(code=42)
        >>> decode_wait_status(9, Platform.LINUX)
        Signaled(signal=9)
    """
    return _DECODERS[platform](status)

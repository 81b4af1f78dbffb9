"""
Reaper - wait for a child and decode how it terminated.
"""

import logging
import os
from typing import Optional

from .errors import WaitError
from .status import Outcome, Platform, current_platform, decode_wait_status

logger = logging.getLogger("pawn.reap")

__all__ = ['wait_and_decode']


def wait_and_decode(pid: int, platform: Optional[Platform] = None) -> Outcome:
    """
    Block until ``pid`` terminates and decode its wait status.

    A pid must be passed here exactly once; after that it may belong to an
    unrelated process.

    Args:
        pid: Child process id returned by spawn()
        platform: Status layout to decode with (default: this host)

    Returns:
        Exited, Stopped, Signaled or Coredumped

    Raises:
        WaitError: If waitpid() itself fails (e.g. pid is not our child)
    """
    if platform is None:
        platform = current_platform()
    try:
        _, status = os.waitpid(pid, 0)
    except OSError as e:
        raise WaitError(pid, e.strerror or str(e)) from e

    outcome = decode_wait_status(status, platform)
    logger.debug(f"reaped pid:{pid}, status=0x{status:04x}, outcome={outcome}")
    return outcome

"""
Pytest configuration and shared fixtures for pawn tests.

Child processes are Python one-liners run with the current interpreter, so
the suite needs nothing on PATH beyond ``sh``, ``true`` and ``false``.
"""

from __future__ import annotations

import os
import sys

import pytest


def python_argv(code: str) -> list:
    """Full argv running ``code`` with the current interpreter."""
    return [sys.executable, "-c", code]


def open_fd_count() -> int:
    """Number of descriptors currently open in this process."""
    return len(os.listdir("/dev/fd"))


@pytest.fixture
def python():
    """Build (command, argv) pairs for a Python one-liner child."""
    def make(code: str):
        return sys.executable, python_argv(code)
    return make


@pytest.fixture
def fd_count():
    """Callable returning the current open descriptor count."""
    return open_fd_count

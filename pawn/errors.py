"""
pawn error types.

Two separate hierarchies hang off PawnError:

- ExecutionError: pawn itself could not run the command.
- ChildError: the command ran, but it crashed, was stopped or (with
  ``check=True``) exited non-zero.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .status import Outcome

__all__ = [
    'PawnError',
    'ExecutionError',
    'SpawnError',
    'IoError',
    'WaitError',
    'UnsupportedPlatformError',
    'ChildError',
    'ChildStopped',
    'ChildSignaled',
    'ChildCoredumped',
    'ExecError',
]


class PawnError(Exception):
    """Base exception for all pawn errors."""
    pass


class ExecutionError(PawnError):
    """Base exception for failures of the execution primitive itself."""
    pass


class SpawnError(ExecutionError):
    """
    Raised when the child process could not be created.

    Attributes:
        command: The command that could not be started
        reason: Why the OS refused (usually the OSError strerror)
    """
    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Execution of '{command}' could not be started: {reason}")


class IoError(ExecutionError):
    """
    Raised when reading a capture pipe fails for a reason other than EOF.

    Output collected before the failure is discarded.

    Attributes:
        fd: The pipe read end that failed
        reason: Description of the read failure
    """
    def __init__(self, fd: int, reason: str):
        self.fd = fd
        self.reason = reason
        super().__init__(f"Reading from pipe fd {fd} failed: {reason}")


class WaitError(ExecutionError):
    """
    Raised when waiting on a child process fails.

    Attributes:
        pid: The process id that could not be waited on
        reason: Description of the wait failure
    """
    def __init__(self, pid: int, reason: str):
        self.pid = pid
        self.reason = reason
        super().__init__(f"Waiting on child (pid:{pid}) failed: {reason}")


class UnsupportedPlatformError(ExecutionError):
    """Raised when the host OS has no known wait-status layout."""
    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"Unsupported platform: {platform}")


class ChildError(PawnError):
    """
    Base exception for a child program that did not exit normally.

    Attributes:
        command: The command that was executed
        outcome: The decoded wait status
        stdout: Captured standard output
        stderr: Captured standard error
    """
    def __init__(
            self,
            command: str,
            outcome: Optional['Outcome'],
            message: str,
            stdout: bytes = b"",
            stderr: bytes = b"",
    ):
        self.command = command
        self.outcome = outcome
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


class ChildStopped(ChildError):
    """Raised when the child was stopped (suspended) by a signal."""
    def __init__(self, command: str, signal: int, outcome=None, stdout=b"", stderr=b""):
        self.signal = signal
        super().__init__(
            command, outcome,
            f"Execution of '{command}' was stopped by signal {signal}",
            stdout, stderr,
        )


class ChildSignaled(ChildError):
    """Raised when the child was terminated by an uncaught signal."""
    def __init__(self, command: str, signal: int, outcome=None, stdout=b"", stderr=b""):
        self.signal = signal
        super().__init__(
            command, outcome,
            f"Execution of '{command}' was terminated by signal {signal}",
            stdout, stderr,
        )


class ChildCoredumped(ChildError):
    """Raised when the child was terminated by a signal and dumped core."""
    def __init__(self, command: str, signal: int, outcome=None, stdout=b"", stderr=b""):
        self.signal = signal
        super().__init__(
            command, outcome,
            f"Core dumped when executing '{command}' (signal {signal})",
            stdout, stderr,
        )


class ExecError(ChildError):
    """
    Raised when a command exits non-zero and the caller asked for ``check``.

    Attributes:
        command: The command that failed
        exit_code: The non-zero exit code
        stderr: Standard error output from the command
    """
    def __init__(self, command: str, exit_code: int, stderr: bytes, outcome=None, stdout=b""):
        self.exit_code = exit_code
        text = stderr.decode('utf-8', errors='replace')
        super().__init__(
            command, outcome,
            f"Command '{command}' failed with exit code {exit_code}: {text}",
            stdout, stderr,
        )

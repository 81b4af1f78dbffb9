"""
Centralized constants for pawn.
"""

# Bytes requested per read() on a capture pipe
DEFAULT_CHUNK_SIZE = 65536

# Standard descriptors redirected in the child
STDOUT_FILENO = 1
STDERR_FILENO = 2

# Wait-status bit layout shared by Linux and Darwin
WAIT_STATUS_MASK = 0o177
WAIT_STOPPED = 0o177
WAIT_COREFLAG = 0o200
WAIT_BYTE_MASK = 0xFF

# Darwin reports a continued child as "stopped" by SIGCONT
DARWIN_SIGCONT = 0x13

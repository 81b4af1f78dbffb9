"""
Tests for the drainer, using plain pipes and live children.
"""

from __future__ import annotations

import os
import threading

import pytest

from pawn.drain import drain_all, drain_streams
from pawn.errors import IoError


def _writer(fd: int, payload: bytes) -> threading.Thread:
    def run():
        with os.fdopen(fd, "wb") as pipe:
            pipe.write(payload)
    thread = threading.Thread(target=run)
    thread.start()
    return thread


class TestDrainAll:
    """Test draining a single descriptor."""

    def test_empty_pipe(self):
        """Test that a pipe closed without writes drains to b''."""
        r, w = os.pipe()
        os.close(w)
        try:
            assert drain_all(r) == b""
        finally:
            os.close(r)

    def test_larger_than_pipe_buffer(self):
        """Test that more than a pipe buffer's worth arrives intact."""
        payload = bytes(range(256)) * 1024
        r, w = os.pipe()
        thread = _writer(w, payload)
        try:
            assert drain_all(r) == payload
        finally:
            thread.join()
            os.close(r)

    def test_small_chunks(self):
        """Test that a tiny chunk size still collects everything."""
        r, w = os.pipe()
        thread = _writer(w, b"hello, world")
        try:
            assert drain_all(r, chunk_size=1) == b"hello, world"
        finally:
            thread.join()
            os.close(r)

    def test_read_error_raises_io_error(self):
        """Test that a read failure other than EOF is an IoError."""
        r, w = os.pipe()
        os.close(r)
        os.close(w)
        with pytest.raises(IoError) as exc_info:
            drain_all(r)
        assert exc_info.value.fd == r
        assert isinstance(exc_info.value.__cause__, OSError)


class TestDrainStreams:
    """Test draining stdout and stderr together."""

    def test_both_streams(self):
        """Test that each stream keeps its own bytes."""
        out_r, out_w = os.pipe()
        err_r, err_w = os.pipe()
        threads = [_writer(out_w, b"out"), _writer(err_w, b"err")]
        try:
            assert drain_streams(out_r, err_r) == (b"out", b"err")
        finally:
            for thread in threads:
                thread.join()
            os.close(out_r)
            os.close(err_r)

    def test_none_descriptor(self):
        """Test that a missing stderr descriptor yields b''."""
        r, w = os.pipe()
        thread = _writer(w, b"merged")
        try:
            assert drain_streams(r, None) == (b"merged", b"")
        finally:
            thread.join()
            os.close(r)

    def test_no_descriptors(self):
        """Test that draining nothing returns two empty sequences."""
        assert drain_streams(None, None) == (b"", b"")

    def test_stderr_filled_before_stdout(self):
        """Test that a full stderr pipe is serviced while stdout is idle."""
        payload = b"e" * (1024 * 1024)
        out_r, out_w = os.pipe()
        err_r, err_w = os.pipe()

        def run():
            with os.fdopen(err_w, "wb") as err, os.fdopen(out_w, "wb") as out:
                err.write(payload)
                out.write(b"done")

        thread = threading.Thread(target=run)
        thread.start()
        try:
            stdout, stderr = drain_streams(out_r, err_r)
        finally:
            thread.join()
            os.close(out_r)
            os.close(err_r)
        assert stdout == b"done"
        assert stderr == payload


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""Tests for core/bytebuf.py"""

import io
import re

import pytest

from consolecore.core.bytebuf import ByteBuffer


class TestByteBuffer:
    """Populated prefix and spare capacity."""

    def test_append(self):
        buf = ByteBuffer()
        buf.append(b"abc")
        assert buf.to_bytes() == b"abc"
        assert buf.bytes_populated == 3

    def test_fill_from_reader(self):
        """fill_from offers the spare capacity to readinto."""
        buf = ByteBuffer(8)
        count = buf.fill_from(io.BytesIO(b"abc").readinto)
        assert count == 3
        assert buf.to_bytes() == b"abc"
        assert buf.free_space == 5

    def test_fill_from_limit(self):
        """A limit caps the bytes offered."""
        buf = ByteBuffer(8)
        count = buf.fill_from(io.BytesIO(b"abcdef").readinto, limit=2)
        assert count == 2
        assert buf.to_bytes() == b"ab"

    def test_discard_front(self):
        """Remaining bytes move to the start."""
        buf = ByteBuffer()
        buf.append(b"abcdef")
        buf.discard_front(2)
        assert buf.to_bytes() == b"cdef"

    def test_mark_valid_beyond_capacity(self):
        buf = ByteBuffer(2)
        with pytest.raises(ValueError):
            buf.mark_valid(3)

    def test_extend_only_grows(self):
        buf = ByteBuffer(16)
        buf.extend(4)
        assert buf.allocated == 16

    def test_search_and_slice(self):
        buf = ByteBuffer()
        buf.append(b"ab\ncd")
        match = buf.search(re.compile(rb"\n"), 0)
        assert match.start() == 2
        assert buf.slice(3, 100) == b"cd"

    def test_reset_keeps_allocation(self):
        buf = ByteBuffer(32)
        buf.append(b"xyz")
        buf.reset()
        assert buf.bytes_populated == 0
        assert buf.allocated == 32

    def test_cleanup_releases(self):
        buf = ByteBuffer(32)
        buf.cleanup()
        assert buf.allocated == 0

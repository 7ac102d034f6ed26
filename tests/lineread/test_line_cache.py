"""Tests for lineread/cache.py"""

import io

from consolecore.lineread.cache import AtomicSlot, LineReadCache, line_read_cache
from consolecore.lineread.reader import (
    LineReadContext,
    LineReader,
    line_read_close_or_cache,
    line_read_cleanup_cache,
    read_line_to_string,
)
from consolecore.lineread.sources import StreamSource
from consolecore.telemetry import metrics


class TestAtomicSlot:
    def test_compare_and_swap(self):
        slot = AtomicSlot()
        marker = object()
        assert slot.compare_and_swap(None, marker) is None
        assert slot.value is marker
        # expected value does not match, nothing changes
        assert slot.compare_and_swap(None, object()) is marker
        assert slot.value is marker


class TestLineReadCache:
    def test_store_and_take(self):
        cache = LineReadCache(slot_count=2, enabled=True)
        context = LineReadContext()
        assert cache.store(context)
        assert len(cache) == 1
        assert cache.take() is context
        assert len(cache) == 0

    def test_full_cache_drops(self):
        cache = LineReadCache(slot_count=1, enabled=True)
        assert cache.store(LineReadContext())
        assert not cache.store(LineReadContext())
        assert metrics.get_counter("lineread.cache.dropped") == 1

    def test_disabled(self):
        cache = LineReadCache(enabled=False)
        assert not cache.store(LineReadContext())
        assert cache.take() is None

    def test_cleanup_releases_buffers(self):
        cache = LineReadCache(slot_count=2, enabled=True)
        context = LineReadContext()
        context.buffer.extend(1024)
        cache.store(context)
        assert cache.cleanup() == 1
        assert context.buffer.allocated == 0
        assert len(cache) == 0


class TestCloseOrCache:
    def test_closed_reader_context_is_reused(self, monkeypatch):
        """Closing publishes a cleaned context the next reader picks up."""
        monkeypatch.setattr(line_read_cache, "enabled", True)
        with LineReader(StreamSource(io.BytesIO(b"a\nb\n"))) as reader:
            list(reader)
            context = reader.context
        assert len(line_read_cache) == 1
        assert context.lines_read == 0
        assert not context.terminated

        result = read_line_to_string(None, None, StreamSource(io.BytesIO(b"c\n")))
        assert result.context is context
        assert result.line.text == "c"
        assert metrics.get_counter("lineread.cache.hit") == 1

    def test_none_is_ignored(self):
        line_read_close_or_cache(None)
        assert len(line_read_cache) == 0

    def test_cleanup_cache(self, monkeypatch):
        monkeypatch.setattr(line_read_cache, "enabled", True)
        line_read_close_or_cache(LineReadContext())
        line_read_cleanup_cache()
        assert len(line_read_cache) == 0

"""Byte-oriented line reader."""

from .cache import AtomicSlot, LineReadCache, line_read_cache
from .reader import (
    LineEnding,
    LineReadContext,
    LineReader,
    LineReadResult,
    line_read_cleanup_cache,
    line_read_close,
    line_read_close_or_cache,
    read_line_to_string,
    read_line_to_string_ex,
)
from .sources import ByteSource, PipeSource, StreamSource, source_for

__all__ = [
    "AtomicSlot",
    "ByteSource",
    "LineEnding",
    "LineReadCache",
    "LineReadContext",
    "LineReadResult",
    "LineReader",
    "PipeSource",
    "StreamSource",
    "line_read_cache",
    "line_read_cleanup_cache",
    "line_read_close",
    "line_read_close_or_cache",
    "read_line_to_string",
    "read_line_to_string_ex",
    "source_for",
]

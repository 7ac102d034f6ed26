"""Line reader

Reads records terminated by CR, LF or CR-LF from a byte source. The
scratch buffer survives between calls in a LineReadContext, so a caller
reading a stream line by line performs one large read per buffer rather
than one per line. Input may be single-byte, UTF-8 or UTF-16LE; in
UTF-16 mode terminators are matched on two-byte code units.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from .. import config
from ..core.bytebuf import ByteBuffer
from ..core.cancel import cancel_state
from ..core.encoding import Encoding, multibyte
from ..core.strings import CountedString
from ..errors import ErrorKind
from ..telemetry import get_logger, metrics
from .cache import line_read_cache
from .sources import ByteSource

logger = get_logger(__name__)

_NARROW_TERMINATOR_RE = re.compile(rb"[\r\n]")
_WIDE_TERMINATOR_RE = re.compile(rb"\r\x00|\n\x00")


class LineEnding(Enum):
    NONE = ""
    CR = "\r"
    LF = "\n"
    CRLF = "\r\n"


@dataclass
class LineReadContext:
    """Reader state for one stream.

    Always current_buffer_offset <= bytes_in_buffer <= allocated.
    Once ``terminated`` is set every read returns end of input.
    """

    buffer: ByteBuffer = field(default_factory=ByteBuffer)
    current_buffer_offset: int = 0
    lines_read: int = 0
    is_pipe: bool | None = None
    read_wide: bool = False
    terminated: bool = False
    end_of_stream: bool = False

    @property
    def bytes_in_buffer(self) -> int:
        return self.buffer.bytes_populated

    def clean(self) -> None:
        """Reset for reuse on another stream, keeping the allocation."""
        self.buffer.reset()
        self.current_buffer_offset = 0
        self.lines_read = 0
        self.is_pipe = None
        self.read_wide = False
        self.terminated = False
        self.end_of_stream = False


@dataclass
class LineReadResult:
    """Outcome of one read.

    ``line`` is None at end of input, on cancellation, on timeout and on
    failure; ``error`` and ``timed_out`` tell them apart.
    """

    line: CountedString | None
    context: LineReadContext
    line_ending: LineEnding = LineEnding.NONE
    timed_out: bool = False
    error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.line is not None


class _Wait(Enum):
    READY = "ready"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"


def _find_terminator(ctx: LineReadContext) -> tuple[int, int, LineEnding] | None:
    """Locate the next terminator in the unprocessed window.

    Returns:
        (offset of terminator, terminator length, ending) or None
    """
    unit = 2 if ctx.read_wide else 1
    pattern = _WIDE_TERMINATOR_RE if ctx.read_wide else _NARROW_TERMINATOR_RE
    start = ctx.current_buffer_offset
    end = ctx.bytes_in_buffer
    lf = "\n".encode("utf-16-le") if ctx.read_wide else b"\n"

    pos = start
    while True:
        match = ctx.buffer.search(pattern, pos, end)
        if match is None:
            return None
        index = match.start()
        if (index - start) % unit:
            pos = index + 1
            continue
        if ctx.buffer.slice(index, index + 1) == b"\n":
            return index, unit, LineEnding.LF

        following = index + unit
        if following + unit <= end:
            if ctx.buffer.slice(following, following + unit) == lf:
                return index, 2 * unit, LineEnding.CRLF
            return index, unit, LineEnding.CR

        # CR is the last unit: an LF may still arrive unless nothing can follow
        buffer_full = start == 0 and end == ctx.buffer.allocated
        if ctx.end_of_stream or buffer_full:
            return index, unit, LineEnding.CR
        return None


def _emit_line(ctx: LineReadContext, user_string: CountedString, line_end: int) -> CountedString:
    data = ctx.buffer.slice(ctx.current_buffer_offset, line_end)
    if ctx.lines_read == 0:
        encoding = Encoding.UTF16LE if ctx.read_wide else multibyte.input_encoding
        data = data[multibyte.bytes_in_bom(data, encoding):]
    multibyte.input_convert(data, None, user_string)
    ctx.lines_read += 1
    metrics.inc("lineread.lines")
    return user_string


def _wait_for_data(ctx: LineReadContext, source: ByteSource, max_delay_ms: int | None) -> _Wait:
    """Wait until a read will not block, the deadline passes, or cancel is set."""
    delay = config.LINE_READ_INITIAL_DELAY_MS
    waited = 0
    while True:
        if cancel_state.is_cancelled():
            return _Wait.CANCELLED
        if not ctx.is_pipe:
            return _Wait.READY
        if source.poll():
            return _Wait.READY
        if max_delay_ms is not None and waited >= max_delay_ms:
            return _Wait.TIMED_OUT
        if cancel_state.wait(delay / 1000):
            return _Wait.CANCELLED
        waited += delay
        delay = min(delay * 2, config.LINE_READ_MAX_DELAY_MS)


def _fill(ctx: LineReadContext, source: ByteSource) -> int:
    try:
        try:
            return ctx.buffer.fill_from(source.readinto)
        except MemoryError:
            logger.warning("Read failed for lack of memory, retrying with a smaller request")
            return ctx.buffer.fill_from(source.readinto, config.LINE_READ_RETRY_BYTES)
    except OSError as e:
        logger.warning(f"Read failed: {e}")
        return 0


def _acquire_context() -> LineReadContext:
    context = line_read_cache.take()
    if context is None:
        context = LineReadContext()
    return context


def read_line_to_string_ex(
    user_string: CountedString | None,
    context: LineReadContext | None,
    source: ByteSource,
    max_delay_ms: int | None = None,
    return_final_partial: bool = True,
) -> LineReadResult:
    """Read the next line from ``source``.

    Args:
        user_string: string to fill, reused and grown as needed; None for a new one
        context: state from the previous call on this stream, None on the first
        source: byte source
        max_delay_ms: cumulative wait allowed for a pipe to produce data, None to wait forever
        return_final_partial: return bytes after the last terminator as a final line

    Returns:
        LineReadResult; pass ``result.context`` to the next call
    """
    ctx = context if context is not None else _acquire_context()
    if user_string is None:
        user_string = CountedString.init_empty()

    if ctx.terminated:
        return LineReadResult(None, ctx)

    if ctx.is_pipe is None:
        ctx.is_pipe = source.is_pipe
        ctx.read_wide = multibyte.input_encoding is Encoding.UTF16LE
    unit = 2 if ctx.read_wide else 1
    ctx.buffer.extend(max(config.LINE_READ_MIN_BUFFER, user_string.length_allocated * unit))

    while True:
        found = _find_terminator(ctx)
        if found is not None:
            index, length, ending = found
            line = _emit_line(ctx, user_string, index)
            ctx.current_buffer_offset = index + length
            return LineReadResult(line, ctx, ending)

        if ctx.end_of_stream:
            has_residue = ctx.current_buffer_offset < ctx.bytes_in_buffer
            ctx.terminated = True
            if has_residue and return_final_partial:
                line = _emit_line(ctx, user_string, ctx.bytes_in_buffer)
                ctx.current_buffer_offset = ctx.bytes_in_buffer
                return LineReadResult(line, ctx, LineEnding.NONE)
            return LineReadResult(None, ctx, error=ErrorKind.INCOMPLETE_READ if has_residue else None)

        if ctx.current_buffer_offset:
            ctx.buffer.discard_front(ctx.current_buffer_offset)
            ctx.current_buffer_offset = 0
        if ctx.buffer.free_space == 0:
            ctx.terminated = True
            metrics.inc("lineread.too_long")
            logger.warning(f"Line exceeds the {ctx.buffer.allocated} byte buffer")
            return LineReadResult(None, ctx, error=ErrorKind.LINE_TOO_LONG)

        waited = _wait_for_data(ctx, source, max_delay_ms)
        if waited is _Wait.CANCELLED:
            ctx.terminated = True
            return LineReadResult(None, ctx, error=ErrorKind.OPERATION_CANCELLED)
        if waited is _Wait.TIMED_OUT:
            metrics.inc("lineread.timeouts")
            logger.debug(f"No data within {max_delay_ms}ms")
            return LineReadResult(None, ctx, timed_out=True, error=ErrorKind.OPERATION_TIMED_OUT)

        if _fill(ctx, source) == 0:
            ctx.end_of_stream = True


def read_line_to_string(
    user_string: CountedString | None, context: LineReadContext | None, source: ByteSource
) -> LineReadResult:
    """Read a line, waiting indefinitely and returning a final unterminated line."""
    return read_line_to_string_ex(user_string, context, source)


def line_read_close(context: LineReadContext | None) -> None:
    """Release a context and its buffer."""
    if context is not None:
        context.buffer.cleanup()


def line_read_close_or_cache(context: LineReadContext | None) -> None:
    """Clean a context and keep it for reuse, or release it if the cache is full."""
    if context is None:
        return
    context.clean()
    if not line_read_cache.store(context):
        line_read_close(context)


def line_read_cleanup_cache() -> None:
    """Release every cached context."""
    released = line_read_cache.cleanup()
    logger.debug(f"Released {released} cached line reader contexts")


class LineReader:
    """Iterates over the lines of one source.

    Usage::

        with LineReader(StreamSource(stream)) as reader:
            for line in reader:
                ...
    """

    def __init__(self, source: ByteSource, max_delay_ms: int | None = None, return_final_partial: bool = True):
        self.source = source
        self.max_delay_ms = max_delay_ms
        self.return_final_partial = return_final_partial
        self.context: LineReadContext | None = None
        self.last_ending = LineEnding.NONE
        self.timed_out = False
        self.error: ErrorKind | None = None
        self._string = CountedString.init_empty()

    def read_line(self) -> str | None:
        """Next line without its terminator, or None."""
        result = read_line_to_string_ex(
            self._string, self.context, self.source, self.max_delay_ms, self.return_final_partial
        )
        self.context = result.context
        self.last_ending = result.line_ending
        self.timed_out = result.timed_out
        self.error = result.error
        return result.line.text if result.line is not None else None

    def __iter__(self):
        while True:
            line = self.read_line()
            if line is None:
                return
            yield line

    def close(self) -> None:
        line_read_close_or_cache(self.context)
        self.context = None

    def __enter__(self) -> "LineReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

"""VT pipeline

Splits text into plain runs and control sequences and dispatches them to
a sink. The pipeline is a stateful transducer: feed() may end in the
middle of an escape, which is held until more text arrives or the
stream finishes.
"""

from .. import config
from ..errors import TruncatedEscapeError
from ..telemetry import get_logger, metrics
from .devices import OutputDevice
from .sgr import ESC
from .sinks import VtSink

logger = get_logger(__name__)

_PARAM_CHARS = frozenset("0123456789;")


class VtPipeline:
    """Feeds text through a sink onto a device.

    Usage::

        pipeline = VtPipeline(sink, device)
        pipeline.feed(chunk)          # any number of times
        pipeline.finish()             # raises if an escape is left open
    """

    def __init__(self, sink: VtSink, device: OutputDevice, max_pending: int = config.VT_MAX_PENDING_CHARS):
        self.sink = sink
        self.device = device
        self.max_pending = max_pending
        self._pending = ""
        self._started = False

    def _start(self) -> bool:
        if not self._started:
            self._started = True
            return self.sink.init_stream(self.device)
        return True

    def feed(self, text: str, more_expected: bool = True) -> bool:
        """Process ``text``.

        Args:
            text: next chunk of output
            more_expected: False when no further chunk will follow

        Returns:
            False if the sink failed to write

        Raises:
            TruncatedEscapeError: an escape is incomplete and cannot complete
        """
        if not self._start():
            return False
        buffer = self._pending + text
        self._pending = ""
        length = len(buffer)
        pos = 0

        while pos < length:
            esc = buffer.find(ESC, pos)
            if esc < 0:
                if not self.sink.on_text(self.device, buffer[pos:]):
                    return False
                pos = length
                break
            if esc > pos and not self.sink.on_text(self.device, buffer[pos:esc]):
                return False
            pos = esc

            if esc + 1 >= length:
                # lone ESC at the end, may be the start of a CSI
                if more_expected:
                    break
                if not self.sink.on_text(self.device, ESC):
                    return False
                pos += 1
                continue

            if buffer[esc + 1] != "[":
                if not self.sink.on_text(self.device, ESC):
                    return False
                pos = esc + 1
                continue

            end = esc + 2
            while end < length and buffer[end] in _PARAM_CHARS:
                end += 1
            if end >= length:
                if more_expected:
                    break
                metrics.inc("vt.truncated")
                raise TruncatedEscapeError(f"Escape sequence truncated: {buffer[esc:]!r}")

            metrics.inc("vt.escapes")
            if not self.sink.on_escape(self.device, buffer[esc:end + 1]):
                return False
            pos = end + 1

        self._pending = buffer[pos:]
        if len(self._pending) >= self.max_pending:
            metrics.inc("vt.truncated")
            raise TruncatedEscapeError(f"Escape sequence exceeds {self.max_pending} chars")
        if not more_expected:
            return self.finish()
        return True

    @property
    def pending(self) -> str:
        """Unconsumed tail waiting for more input."""
        return self._pending

    def finish(self) -> bool:
        """End the stream.

        Raises:
            TruncatedEscapeError: an escape is still open
        """
        if self._pending:
            if self._pending == ESC:
                self._pending = ""
                if not self.sink.on_text(self.device, ESC):
                    return False
            else:
                pending = self._pending
                self._pending = ""
                metrics.inc("vt.truncated")
                raise TruncatedEscapeError(f"Escape sequence truncated: {pending!r}")
        if not self._started:
            return True
        self._started = False
        return self.sink.end_stream(self.device)


def process_vt_escapes(sink: VtSink, device: OutputDevice, text: str) -> bool:
    """Run one complete string through a sink."""
    return VtPipeline(sink, device).feed(text, more_expected=False)

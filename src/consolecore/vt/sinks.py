"""VT sinks

A sink receives the text runs and escape sequences found by the
pipeline, in source order. Variants differ in what they do with escapes
and whether text is normalised for a byte device.
"""

from abc import ABC, abstractmethod

from ..telemetry import get_logger
from .defaults import get_default_color, get_line_ending
from .devices import OutputDevice
from .normalize import LineEndingNormalizer
from .sgr import final_color_from_sequence
from .types import OutputFlags

logger = get_logger(__name__)


class VtSink(ABC):
    """Receiver for pipeline output; every hook returns False on failure."""

    name = "sink"

    def init_stream(self, device: OutputDevice) -> bool:
        return True

    def end_stream(self, device: OutputDevice) -> bool:
        return True

    @abstractmethod
    def on_text(self, device: OutputDevice, text: str) -> bool:
        pass

    @abstractmethod
    def on_escape(self, device: OutputDevice, escape: str) -> bool:
        pass


class ConsoleTranslateSink(VtSink):
    """Turns SGR sequences into console attribute changes."""

    name = "console-translate"

    def __init__(self, default_color: int | None = None):
        self.default_color = default_color

    def on_text(self, device: OutputDevice, text: str) -> bool:
        return device.write_text(text)

    def on_escape(self, device: OutputDevice, escape: str) -> bool:
        if not escape.endswith("m"):
            return True
        default = self.default_color if self.default_color is not None else get_default_color()
        current = device.get_attribute()
        if current is None:
            current = default
        return device.set_attribute(final_color_from_sequence(current, escape, default))


class ConsoleStripSink(VtSink):
    name = "console-strip"

    def on_text(self, device: OutputDevice, text: str) -> bool:
        return device.write_text(text)

    def on_escape(self, device: OutputDevice, escape: str) -> bool:
        return True


class ConsolePassthroughSink(VtSink):
    name = "console-passthrough"

    def on_text(self, device: OutputDevice, text: str) -> bool:
        return device.write_text(text)

    def on_escape(self, device: OutputDevice, escape: str) -> bool:
        return device.write_text(escape)


class _FileSink(VtSink):
    """Text is line-ending normalised and encoded by the device."""

    def __init__(self, line_ending: str | None = None):
        self.line_ending = line_ending
        self._normalizer: LineEndingNormalizer | None = None

    def init_stream(self, device: OutputDevice) -> bool:
        self._normalizer = LineEndingNormalizer(self.line_ending or get_line_ending())
        return True

    def end_stream(self, device: OutputDevice) -> bool:
        tail = self._normalizer.flush() if self._normalizer else ""
        self._normalizer = None
        return device.write_text(tail)

    def on_text(self, device: OutputDevice, text: str) -> bool:
        if self._normalizer is None:
            self.init_stream(device)
        return device.write_text(self._normalizer.feed(text))


class FileStripSink(_FileSink):
    name = "file-strip"

    def on_escape(self, device: OutputDevice, escape: str) -> bool:
        return True


class FilePassthroughSink(_FileSink):
    name = "file-passthrough"

    def on_escape(self, device: OutputDevice, escape: str) -> bool:
        # a held CR precedes the escape in the source
        pending = self._normalizer.flush() if self._normalizer else ""
        return device.write_text(pending + escape)


def select_sink(device: OutputDevice, flags: OutputFlags) -> VtSink:
    """Sink variant for a device and output flags."""
    if device.is_console:
        if flags & OutputFlags.STRIP_VT:
            sink = ConsoleStripSink()
        elif flags & OutputFlags.PASSTHROUGH_VT:
            sink = ConsolePassthroughSink()
        else:
            sink = ConsoleTranslateSink()
    elif flags & OutputFlags.STRIP_VT:
        sink = FileStripSink()
    else:
        sink = FilePassthroughSink()
    logger.debug(f"Selected sink {sink.name}")
    return sink

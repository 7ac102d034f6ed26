"""Output devices

A device is where VT pipeline sinks write. Win32ConsoleDevice drives a
console through colorama's Win32 bindings and can change the text
attribute; StreamDevice writes encoded bytes to any binary stream.
"""

import sys
from abc import ABC, abstractmethod
from typing import BinaryIO, TextIO

from colorama import win32 as colorama_win32

from .. import _win32
from .. import capabilities as caps
from ..core.encoding import multibyte
from ..telemetry import get_logger
from .types import OutputFlags

logger = get_logger(__name__)


class OutputDevice(ABC):
    """Destination for pipeline output."""

    is_console: bool = False

    @abstractmethod
    def write_text(self, text: str) -> bool:
        """Write text; False if the device rejected it."""

    def get_attribute(self) -> int | None:
        """Current text attribute, None when the device has none."""
        return None

    def set_attribute(self, attr: int) -> bool:
        return False

    def window_size(self) -> tuple[int, int] | None:
        return None


class Win32ConsoleDevice(OutputDevice):
    """Console screen buffer behind a standard handle."""

    is_console = True

    def __init__(self, stream: TextIO, std_id: int = colorama_win32.STDOUT):
        self.stream = stream
        self.std_id = std_id

    def write_text(self, text: str) -> bool:
        try:
            self.stream.write(text)
            # attribute changes apply to whatever is flushed after them
            self.stream.flush()
        except OSError as e:
            logger.warning(f"Console write failed: {e}")
            return False
        return True

    def get_attribute(self) -> int | None:
        caps.require("win32_console")
        return colorama_win32.GetConsoleScreenBufferInfo(self.std_id).wAttributes

    def set_attribute(self, attr: int) -> bool:
        caps.require("win32_console")
        self.stream.flush()
        colorama_win32.SetConsoleTextAttribute(self.std_id, attr)
        return True

    def window_size(self) -> tuple[int, int] | None:
        caps.require("win32_console")
        window = colorama_win32.GetConsoleScreenBufferInfo(self.std_id).srWindow
        return window.Right - window.Left + 1, window.Bottom - window.Top + 1


class StreamDevice(OutputDevice):
    """Byte device: a file, pipe or non-Windows terminal."""

    def __init__(self, stream: BinaryIO | TextIO):
        self._text_layer = stream if hasattr(stream, "buffer") else None
        self.stream: BinaryIO = getattr(stream, "buffer", stream)

    def write_bytes(self, data: bytes) -> bool:
        try:
            if self._text_layer is not None:
                self._text_layer.flush()
            self.stream.write(data)
            self.stream.flush()
        except OSError as e:
            logger.warning(f"Write failed: {e}")
            return False
        return True

    def write_text(self, text: str) -> bool:
        if not text:
            return True
        return self.write_bytes(multibyte.encode(text))

    def fileno(self) -> int | None:
        try:
            return self.stream.fileno()
        except (AttributeError, OSError, ValueError):
            return None


def _std_id_for(stream) -> int | None:
    if stream is sys.stdout or stream is sys.__stdout__:
        return colorama_win32.STDOUT
    if stream is sys.stderr or stream is sys.__stderr__:
        return colorama_win32.STDERR
    return None


def device_for_stream(stream) -> OutputDevice:
    """Pick the device type for a stream."""
    std_id = _std_id_for(stream)
    if (
        std_id is not None
        and caps.has("win32_console")
        and caps.has("console_mode")
        and _win32.std_handle_is_console(std_id)
    ):
        return Win32ConsoleDevice(stream, std_id)
    return StreamDevice(stream)


def standard_device(flags: OutputFlags) -> OutputDevice:
    """Device for stdout, or stderr when OutputFlags.STDERR is set."""
    stream = sys.stderr if flags & OutputFlags.STDERR else sys.stdout
    return device_for_stream(stream)

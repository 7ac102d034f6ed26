"""Shared fixtures"""

import pytest

from consolecore.core.cancel import cancel_state
from consolecore.core.encoding import Encoding, multibyte
from consolecore.lineread.cache import line_read_cache
from consolecore.telemetry import metrics
from consolecore.vt.defaults import output_defaults
from consolecore.vt.devices import OutputDevice


class RecordingConsole(OutputDevice):
    """Fake console that records every call in order."""

    is_console = True

    def __init__(self, attribute: int = 0x07, size: tuple[int, int] | None = (120, 40)):
        self.attribute = attribute
        self.size = size
        self.calls: list[tuple[str, object]] = []

    def write_text(self, text: str) -> bool:
        if text:
            self.calls.append(("text", text))
        return True

    def get_attribute(self) -> int | None:
        return self.attribute

    def set_attribute(self, attr: int) -> bool:
        self.attribute = attr
        self.calls.append(("attr", attr))
        return True

    def window_size(self) -> tuple[int, int] | None:
        return self.size

    @property
    def text(self) -> str:
        return "".join(value for kind, value in self.calls if kind == "text")


class RecordingFile(OutputDevice):
    """Fake byte device collecting the text it is given."""

    def __init__(self):
        self.chunks: list[str] = []

    def write_text(self, text: str) -> bool:
        self.chunks.append(text)
        return True

    @property
    def text(self) -> str:
        return "".join(self.chunks)


@pytest.fixture
def console():
    return RecordingConsole()


@pytest.fixture
def make_console():
    """Factory for consoles with a given starting attribute."""
    return RecordingConsole


@pytest.fixture
def file_device():
    return RecordingFile()


@pytest.fixture(autouse=True)
def reset_process_state():
    """Reset process-wide holders around every test."""
    metrics.enabled = True
    metrics.reset()
    line_read_cache.cleanup()
    output_defaults.reset()
    output_defaults.set_default_color(0x07)
    cancel_state.reset()
    multibyte.input_encoding = Encoding.UTF8
    multibyte.output_encoding = Encoding.UTF8
    yield
    metrics.reset()
    line_read_cache.cleanup()
    output_defaults.reset()
    cancel_state.reset()
    multibyte.input_encoding = Encoding.UTF8
    multibyte.output_encoding = Encoding.UTF8

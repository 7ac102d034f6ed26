"""Process-wide output settings.

Initialisation order: the line ending starts from config.DEFAULT_LINE_ENDING
and changes only through set_line_ending(). The default colour is unset
until set_default_color() runs or the first get_default_color() samples
the stdout console (config.DEFAULT_COLOR when stdout is not a console).
The sampled value is kept for the life of the process.
"""

import sys

from .. import config
from ..telemetry import get_logger

logger = get_logger(__name__)


class OutputDefaults:
    def __init__(self):
        self._default_color: int | None = None
        self.line_ending = config.DEFAULT_LINE_ENDING

    def get_default_color(self) -> int:
        if self._default_color is None:
            self._default_color = self._sample_console_color()
        return self._default_color

    def set_default_color(self, attr: int) -> None:
        self._default_color = attr

    def set_line_ending(self, literal: str) -> None:
        self.line_ending = literal

    def reset(self) -> None:
        """Back to the initial state (for tests)."""
        self._default_color = None
        self.line_ending = config.DEFAULT_LINE_ENDING

    @staticmethod
    def _sample_console_color() -> int:
        from .devices import device_for_stream

        device = device_for_stream(sys.stdout)
        if device.is_console:
            attr = device.get_attribute()
            if attr is not None:
                logger.debug(f"Default colour sampled from console: {attr:#x}")
                return attr & 0xFF
        return config.DEFAULT_COLOR


output_defaults = OutputDefaults()


def get_default_color() -> int:
    return output_defaults.get_default_color()


def set_default_color(attr: int) -> None:
    output_defaults.set_default_color(attr)


def set_line_ending(literal: str) -> None:
    output_defaults.set_line_ending(literal)


def get_line_ending() -> str:
    return output_defaults.line_ending

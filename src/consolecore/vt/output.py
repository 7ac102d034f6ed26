"""Formatted output

The write paths for utilities: format, choose a device and sink, run the
VT pipeline.
"""

from ..color import ColorAttributes
from ..telemetry import get_logger
from .devices import OutputDevice, standard_device
from .pipeline import process_vt_escapes
from .sgr import vt_string_for_text_attribute
from .sinks import select_sink
from .types import OutputFlags

logger = get_logger(__name__)


def output_string(device: OutputDevice, flags: OutputFlags, text: str) -> bool:
    """Write ``text`` to ``device`` through the sink ``flags`` selects."""
    return process_vt_escapes(select_sink(device, flags), device, text)


def output_to_device(device: OutputDevice, flags: OutputFlags, fmt: str, *args) -> bool:
    """printf-style formatting, then output_string()."""
    text = fmt % args
    return output_string(device, flags, text)


def output(flags: OutputFlags, fmt: str, *args) -> bool:
    """Write formatted text to stdout, or stderr with OutputFlags.STDERR."""
    return output_to_device(standard_device(flags), flags, fmt, *args)


def vt_set_console_text_attribute(flags: OutputFlags, color: ColorAttributes | int) -> bool:
    """Switch the output colour by emitting the matching escape."""
    if isinstance(color, int):
        color = ColorAttributes(win32_attr=color)
    return output(flags, "%s", vt_string_for_text_attribute(color))

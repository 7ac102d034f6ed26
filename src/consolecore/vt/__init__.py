"""VT escape-processing output pipeline."""

from .defaults import get_default_color, get_line_ending, output_defaults, set_default_color, set_line_ending
from .devices import OutputDevice, StreamDevice, Win32ConsoleDevice, device_for_stream, standard_device
from .normalize import LineEndingNormalizer, normalize_line_endings
from .output import output, output_string, output_to_device, vt_set_console_text_attribute
from .pipeline import VtPipeline, process_vt_escapes
from .sgr import final_color_from_sequence, strip_vt_escapes, vt_string_for_text_attribute
from .sinks import (
    ConsolePassthroughSink,
    ConsoleStripSink,
    ConsoleTranslateSink,
    FilePassthroughSink,
    FileStripSink,
    VtSink,
    select_sink,
)
from .terminal import get_window_dimensions, query_console_capabilities
from .types import OutputFlags, TerminalCapabilities

__all__ = [
    "ConsolePassthroughSink",
    "ConsoleStripSink",
    "ConsoleTranslateSink",
    "FilePassthroughSink",
    "FileStripSink",
    "LineEndingNormalizer",
    "OutputDevice",
    "OutputFlags",
    "StreamDevice",
    "TerminalCapabilities",
    "VtPipeline",
    "VtSink",
    "Win32ConsoleDevice",
    "device_for_stream",
    "final_color_from_sequence",
    "get_default_color",
    "get_line_ending",
    "get_window_dimensions",
    "normalize_line_endings",
    "output",
    "output_defaults",
    "output_string",
    "output_to_device",
    "process_vt_escapes",
    "query_console_capabilities",
    "select_sink",
    "set_default_color",
    "set_line_ending",
    "standard_device",
    "strip_vt_escapes",
    "vt_set_console_text_attribute",
    "vt_string_for_text_attribute",
]

"""VT output data types."""

from dataclasses import dataclass
from enum import IntFlag


class OutputFlags(IntFlag):
    """Destination and escape handling for formatted output."""

    STDOUT = 0x1
    STDERR = 0x2
    STRIP_VT = 0x4
    PASSTHROUGH_VT = 0x8


@dataclass(frozen=True)
class TerminalCapabilities:
    """What the attached output device can render."""

    color: bool = False
    extended_chars: bool = False
    auto_line_wrap: bool = False

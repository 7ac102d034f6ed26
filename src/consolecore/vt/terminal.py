"""Terminal queries: window size and rendering capabilities."""

import os

from .. import config
from ..core.environ import get_environment_variable, get_environment_variable_as_number
from ..telemetry import get_logger
from .devices import OutputDevice, StreamDevice, standard_device
from .types import OutputFlags, TerminalCapabilities

logger = get_logger(__name__)


def get_window_dimensions(device: OutputDevice | None = None) -> tuple[int, int]:
    """(columns, rows) of the output window.

    Falls back from the console window, to the OS terminal size, to the
    COLUMNS/LINES variables, to 80x25.
    """
    device = device or standard_device(OutputFlags.STDOUT)
    if device.is_console:
        size = device.window_size()
        if size is not None:
            return size

    if isinstance(device, StreamDevice):
        fd = device.fileno()
        if fd is not None:
            try:
                size = os.get_terminal_size(fd)
                return size.columns, size.lines
            except OSError:
                pass

    columns = get_environment_variable_as_number("COLUMNS")
    lines = get_environment_variable_as_number("LINES")
    return (
        columns if columns and columns > 0 else config.DEFAULT_WINDOW_WIDTH,
        lines if lines and lines > 0 else config.DEFAULT_WINDOW_HEIGHT,
    )


def query_console_capabilities(device: OutputDevice | None = None) -> TerminalCapabilities:
    """Capabilities of the output device.

    Consoles render everything. Other devices declare support through a
    semicolon list in config.TERM_CAPABILITIES_VAR, e.g.
    ``color;extendedchars;autolinewrap``.
    """
    device = device or standard_device(OutputFlags.STDOUT)
    if device.is_console:
        return TerminalCapabilities(color=True, extended_chars=True, auto_line_wrap=True)

    declared = get_environment_variable(config.TERM_CAPABILITIES_VAR) or ""
    words = {word.strip().lower() for word in declared.split(";") if word.strip()}
    logger.debug(f"Declared terminal capabilities: {sorted(words)}")
    return TerminalCapabilities(
        color="color" in words,
        extended_chars="extendedchars" in words,
        auto_line_wrap="autolinewrap" in words,
    )

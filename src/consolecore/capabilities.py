"""Host capability record.

Populated once at import. Code that depends on an optional OS facility
checks it here first and raises UnsupportedPlatformError when absent.
"""

import importlib.util
import os
import sys
from dataclasses import dataclass, fields

from colorama import win32 as colorama_win32

from . import _win32
from .errors import UnsupportedPlatformError
from .telemetry import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Capabilities:
    """OS facilities available to this process."""

    win32_console: bool = False  # SetConsoleTextAttribute and friends via colorama
    console_mode: bool = False  # GetConsoleMode for console detection
    peek_named_pipe: bool = False
    compressed_file_size: bool = False
    short_names: bool = False
    device_io_control: bool = False  # file system controls (object id, USN, extents)
    stream_enumeration: bool = False
    posix_owner: bool = False
    select_pipes: bool = False
    seek_data: bool = False
    fiemap: bool = False
    atomic_slots: bool = True  # lock-backed compare-and-swap cells


def probe() -> Capabilities:
    """Inspect the running system."""
    caps = Capabilities(
        win32_console=colorama_win32.windll is not None
        and hasattr(colorama_win32, "GetConsoleScreenBufferInfo"),
        console_mode=_win32.GetStdHandle is not None and _win32.GetConsoleMode is not None,
        peek_named_pipe=_win32.PeekNamedPipe is not None,
        compressed_file_size=_win32.GetCompressedFileSizeW is not None,
        short_names=_win32.GetShortPathNameW is not None,
        device_io_control=_win32.DeviceIoControl is not None,
        stream_enumeration=_win32.FindFirstStreamW is not None,
        posix_owner=importlib.util.find_spec("pwd") is not None,
        select_pipes=sys.platform != "win32",
        seek_data=hasattr(os, "SEEK_DATA") and hasattr(os, "SEEK_HOLE"),
        fiemap=sys.platform.startswith("linux"),
    )
    logger.debug(f"Capabilities: {caps}")
    return caps


capabilities = probe()


def has(name: str) -> bool:
    """Whether the named capability is available."""
    return bool(getattr(capabilities, name))


def require(name: str) -> None:
    """Raise UnsupportedPlatformError unless the capability is available."""
    if name not in {f.name for f in fields(Capabilities)}:
        raise ValueError(f"Unknown capability: {name}")
    if not has(name):
        raise UnsupportedPlatformError(name)

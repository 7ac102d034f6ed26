"""Byte sources for the line reader

A source yields raw bytes. Pipes additionally report whether a read
would return without blocking, which lets the reader wait with a
deadline and observe cancellation.
"""

import os
import select
import stat
from abc import ABC, abstractmethod
from typing import BinaryIO

from .. import _win32
from .. import capabilities as caps


class ByteSource(ABC):
    """Something the line reader can pull bytes from."""

    is_pipe: bool = False

    @abstractmethod
    def readinto(self, view: memoryview) -> int:
        """Fill ``view`` with up to len(view) bytes; 0 means end of stream."""

    def poll(self) -> bool:
        """Whether a read would return without blocking (data or end of stream)."""
        return True

    def close(self) -> None:
        pass


def _is_fifo(fd: int) -> bool:
    try:
        return stat.S_ISFIFO(os.fstat(fd).st_mode)
    except OSError:
        return False


def _poll_fd(fd: int) -> bool:
    if caps.has("select_pipes"):
        readable, _, _ = select.select([fd], [], [], 0)
        return bool(readable)
    caps.require("peek_named_pipe")
    import msvcrt

    # -1 is a broken pipe, which reads as end of stream
    return _win32.bytes_available_in_pipe(msvcrt.get_osfhandle(fd)) != 0


class StreamSource(ByteSource):
    """Binary file object: a file on disk, io.BytesIO, a socket file."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        try:
            self._fd: int | None = stream.fileno()
        except (AttributeError, OSError, ValueError):
            self._fd = None
        self.is_pipe = self._fd is not None and _is_fifo(self._fd)

    def readinto(self, view: memoryview) -> int:
        readinto = getattr(self.stream, "readinto1", None) or getattr(self.stream, "readinto", None)
        if readinto is not None:
            return readinto(view) or 0
        data = self.stream.read(len(view))
        if not data:
            return 0
        view[: len(data)] = data
        return len(data)

    def poll(self) -> bool:
        if not self.is_pipe:
            return True
        return _poll_fd(self._fd)

    def close(self) -> None:
        self.stream.close()


class PipeSource(ByteSource):
    """Raw pipe file descriptor."""

    is_pipe = True

    def __init__(self, fd: int, close_fd: bool = False):
        self.fd = fd
        self.close_fd = close_fd

    def readinto(self, view: memoryview) -> int:
        data = os.read(self.fd, len(view))
        view[: len(data)] = data
        return len(data)

    def poll(self) -> bool:
        return _poll_fd(self.fd)

    def close(self) -> None:
        if self.close_fd:
            os.close(self.fd)


def source_for(stream: BinaryIO | int) -> ByteSource:
    """Wrap a file descriptor or binary stream."""
    if isinstance(stream, int):
        if _is_fifo(stream):
            return PipeSource(stream)
        return StreamSource(os.fdopen(stream, "rb", closefd=False))
    return StreamSource(stream)

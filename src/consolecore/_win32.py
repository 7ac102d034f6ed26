"""kernel32 entry points resolved by name at import.

Each attribute is None when the running system does not export the
function. Callers go through consolecore.capabilities before using them.
"""

import ctypes
import sys

GetStdHandle = None
GetConsoleMode = None
PeekNamedPipe = None
GetCompressedFileSizeW = None
GetShortPathNameW = None
CreateFileW = None
DeviceIoControl = None
CloseHandle = None
FindFirstStreamW = None
FindNextStreamW = None
FindClose = None

FILE_READ_ATTRIBUTES = 0x80
FILE_SHARE_ALL = 0x7
OPEN_EXISTING = 3
FILE_FLAG_BACKUP_SEMANTICS = 0x02000000
FILE_FLAG_OPEN_REPARSE_POINT = 0x00200000
ERROR_MORE_DATA = 234


def _resolve() -> None:
    global GetStdHandle, GetConsoleMode, PeekNamedPipe, GetCompressedFileSizeW, GetShortPathNameW
    global CreateFileW, DeviceIoControl, CloseHandle, FindFirstStreamW, FindNextStreamW, FindClose

    if sys.platform != "win32":
        return
    from ctypes import wintypes

    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)

    fn = getattr(kernel32, "GetStdHandle", None)
    if fn is not None:
        fn.argtypes = [wintypes.DWORD]
        fn.restype = wintypes.HANDLE
        GetStdHandle = fn

    fn = getattr(kernel32, "GetConsoleMode", None)
    if fn is not None:
        fn.argtypes = [wintypes.HANDLE, ctypes.POINTER(wintypes.DWORD)]
        fn.restype = wintypes.BOOL
        GetConsoleMode = fn

    fn = getattr(kernel32, "PeekNamedPipe", None)
    if fn is not None:
        fn.argtypes = [
            wintypes.HANDLE,
            ctypes.c_void_p,
            wintypes.DWORD,
            ctypes.POINTER(wintypes.DWORD),
            ctypes.POINTER(wintypes.DWORD),
            ctypes.POINTER(wintypes.DWORD),
        ]
        fn.restype = wintypes.BOOL
        PeekNamedPipe = fn

    fn = getattr(kernel32, "GetCompressedFileSizeW", None)
    if fn is not None:
        fn.argtypes = [wintypes.LPCWSTR, ctypes.POINTER(wintypes.DWORD)]
        fn.restype = wintypes.DWORD
        GetCompressedFileSizeW = fn

    fn = getattr(kernel32, "GetShortPathNameW", None)
    if fn is not None:
        fn.argtypes = [wintypes.LPCWSTR, wintypes.LPWSTR, wintypes.DWORD]
        fn.restype = wintypes.DWORD
        GetShortPathNameW = fn

    create = getattr(kernel32, "CreateFileW", None)
    ioctl = getattr(kernel32, "DeviceIoControl", None)
    close = getattr(kernel32, "CloseHandle", None)
    if create is not None and ioctl is not None and close is not None:
        create.argtypes = [
            wintypes.LPCWSTR,
            wintypes.DWORD,
            wintypes.DWORD,
            ctypes.c_void_p,
            wintypes.DWORD,
            wintypes.DWORD,
            wintypes.HANDLE,
        ]
        create.restype = wintypes.HANDLE
        ioctl.argtypes = [
            wintypes.HANDLE,
            wintypes.DWORD,
            ctypes.c_void_p,
            wintypes.DWORD,
            ctypes.c_void_p,
            wintypes.DWORD,
            ctypes.POINTER(wintypes.DWORD),
            ctypes.c_void_p,
        ]
        ioctl.restype = wintypes.BOOL
        close.argtypes = [wintypes.HANDLE]
        close.restype = wintypes.BOOL
        CreateFileW, DeviceIoControl, CloseHandle = create, ioctl, close

    first = getattr(kernel32, "FindFirstStreamW", None)
    following = getattr(kernel32, "FindNextStreamW", None)
    find_close = getattr(kernel32, "FindClose", None)
    if first is not None and following is not None and find_close is not None:
        first.argtypes = [wintypes.LPCWSTR, ctypes.c_int, ctypes.c_void_p, wintypes.DWORD]
        first.restype = wintypes.HANDLE
        following.argtypes = [wintypes.HANDLE, ctypes.c_void_p]
        following.restype = wintypes.BOOL
        find_close.argtypes = [wintypes.HANDLE]
        find_close.restype = wintypes.BOOL
        FindFirstStreamW, FindNextStreamW, FindClose = first, following, find_close


def std_handle_is_console(std_id: int) -> bool:
    """Whether a standard handle (-11 stdout, -12 stderr) is a console."""
    from ctypes import wintypes

    handle = GetStdHandle(std_id & 0xFFFFFFFF)
    mode = wintypes.DWORD()
    return bool(GetConsoleMode(handle, ctypes.byref(mode)))


def bytes_available_in_pipe(os_handle: int) -> int:
    """Bytes waiting in a pipe; -1 when the pipe is broken."""
    from ctypes import wintypes

    available = wintypes.DWORD()
    if not PeekNamedPipe(os_handle, None, 0, None, ctypes.byref(available), None):
        return -1
    return available.value


def compressed_file_size(path: str) -> int:
    from ctypes import wintypes

    high = wintypes.DWORD()
    low = GetCompressedFileSizeW(path, ctypes.byref(high))
    if low == 0xFFFFFFFF and ctypes.get_last_error() != 0:
        raise ctypes.WinError(ctypes.get_last_error())
    return (high.value << 32) | low


_INVALID_HANDLE_VALUE = ctypes.c_void_p(-1).value


def short_path_name(path: str) -> str:
    size = GetShortPathNameW(path, None, 0)
    if size == 0:
        raise ctypes.WinError(ctypes.get_last_error())
    buffer = ctypes.create_unicode_buffer(size)
    if GetShortPathNameW(path, buffer, size) == 0:
        raise ctypes.WinError(ctypes.get_last_error())
    return buffer.value


def device_io_control(path: str, code: int, in_data: bytes = b"", out_size: int = 4096) -> bytes:
    """Issue a file system control against ``path`` and return the output bytes.

    A partially filled buffer (ERROR_MORE_DATA) is returned as is.
    """
    from ctypes import wintypes

    handle = CreateFileW(
        path,
        FILE_READ_ATTRIBUTES,
        FILE_SHARE_ALL,
        None,
        OPEN_EXISTING,
        FILE_FLAG_BACKUP_SEMANTICS | FILE_FLAG_OPEN_REPARSE_POINT,
        None,
    )
    if handle is None or handle == _INVALID_HANDLE_VALUE:
        raise ctypes.WinError(ctypes.get_last_error())
    try:
        in_buffer = ctypes.create_string_buffer(in_data, len(in_data)) if in_data else None
        out_buffer = ctypes.create_string_buffer(out_size)
        returned = wintypes.DWORD()
        ok = DeviceIoControl(
            handle,
            code,
            in_buffer,
            len(in_data),
            out_buffer,
            out_size,
            ctypes.byref(returned),
            None,
        )
        if not ok and ctypes.get_last_error() != ERROR_MORE_DATA:
            raise ctypes.WinError(ctypes.get_last_error())
        return out_buffer.raw[: returned.value]
    finally:
        CloseHandle(handle)


class _FindStreamData(ctypes.Structure):
    _fields_ = [("StreamSize", ctypes.c_longlong), ("cStreamName", ctypes.c_wchar * (260 + 36))]


def count_streams(path: str) -> int:
    data = _FindStreamData()
    handle = FindFirstStreamW(path, 0, ctypes.byref(data), 0)
    if handle is None or handle == _INVALID_HANDLE_VALUE:
        # directories without named streams report no streams at all
        return 0
    try:
        count = 1
        while FindNextStreamW(handle, ctypes.byref(data)):
            count += 1
        return count
    finally:
        FindClose(handle)


_resolve()
